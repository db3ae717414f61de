"""Per-session composition of synced views, pipelines and banners"""

from enum import Enum
from typing import Tuple

from transfer_desk.domain.models import Account, Session, Transaction, TransferOutcome
from transfer_desk.infrastructure.clients.bank import BankClient
from transfer_desk.session.messages import MessageBoard
from transfer_desk.session.recipients import RecipientManager
from transfer_desk.session.synchronizer import DataSynchronizer
from transfer_desk.session.transfer import TransferForm, TransferPipeline
from transfer_desk.utils.scheduler import ScopedScheduler


class ActiveView(str, Enum):
    TRANSACTIONS = "transactions"
    SEND_MONEY = "sendMoney"
    SAVED_RECIPIENTS = "savedRecipients"


class Dashboard:
    """Everything that lives exactly as long as one session"""

    def __init__(
        self,
        client: BankClient,
        session: Session,
        scheduler: ScopedScheduler,
        sync_interval_seconds: float | None = None,
        message_ttl_seconds: float | None = None,
        view_return_delay_seconds: float | None = None,
    ):
        self.session = session
        self.scheduler = scheduler
        self.active_view = ActiveView.TRANSACTIONS
        self.messages = MessageBoard(scheduler, ttl_seconds=message_ttl_seconds)
        self.synchronizer = DataSynchronizer(
            client, session, scheduler, interval_seconds=sync_interval_seconds
        )
        self.form = TransferForm()
        self.transfers = TransferPipeline(
            client,
            session,
            self.synchronizer,
            self.messages,
            scheduler,
            on_show_transactions=lambda: self.show(ActiveView.TRANSACTIONS),
            return_delay_seconds=view_return_delay_seconds,
        )
        self.recipients = RecipientManager(client, session, self.synchronizer, self.messages)

    @property
    def account(self) -> Account:
        return self.synchronizer.account

    @property
    def transactions(self) -> Tuple[Transaction, ...]:
        return self.synchronizer.transactions

    @property
    def loading(self) -> bool:
        return self.transfers.loading

    def show(self, view: ActiveView) -> None:
        if self.session.alive:
            self.active_view = view

    def select_recipient(self, recipient_id: str | None) -> None:
        self.recipients.select(self.form, recipient_id)

    @property
    def offer_save_recipient(self) -> bool:
        return self.recipients.should_offer_save(self.form)

    async def send_money(self) -> TransferOutcome:
        return await self.transfers.submit_form(self.form)

    async def save_form_recipient(self) -> bool:
        return await self.recipients.save(self.form.iban, self.form.first_name, self.form.last_name)

    def start(self) -> None:
        self.synchronizer.start()

    def close(self) -> None:
        self.synchronizer.stop()
        self.messages.close()
        self.scheduler.cancel_all()
