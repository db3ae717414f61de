"""Transfer form state and the transfer submission pipeline"""

import logging
import time
from typing import Callable, Optional

from transfer_desk.config import settings
from transfer_desk.domain.exceptions import (
    DomainException,
    InvalidAmountError,
    InvalidIbanError,
    MissingFieldError,
    TransferRejectedError,
)
from transfer_desk.domain.models import (
    DEFAULT_DESCRIPTION,
    SavedRecipient,
    Session,
    TransferOutcome,
    TransferRequest,
    TransferStatus,
)
from transfer_desk.domain.validation import (
    accepts_amount_input,
    normalize_iban,
    parse_amount,
    validate_iban,
)
from transfer_desk.infrastructure.clients.bank import BankClient
from transfer_desk.infrastructure.clients.schemas import TransferPayload
from transfer_desk.infrastructure.observability.logging import log_transfer
from transfer_desk.infrastructure.observability.metrics import record_transfer
from transfer_desk.session.messages import MessageBoard
from transfer_desk.session.synchronizer import DataSynchronizer
from transfer_desk.utils.scheduler import Scheduler

MISSING_FIELDS_MESSAGE = "Please fill in all required fields"
SUCCESS_MESSAGE = "Transfer successful!"
FAILURE_MESSAGE = "Transfer failed"
INVALID_IBAN_MESSAGE = "Invalid IBAN format"


class TransferForm:
    """
    Headless state of the send-money form.

    `selected_recipient_id` is set only while the recipient fields mirror a
    saved recipient. Editing any of those fields by hand detaches the form
    from the selection but keeps what was typed.
    """

    def __init__(self) -> None:
        self.iban = ""
        self.first_name = ""
        self.last_name = ""
        self.amount = ""
        self.description = ""
        self.selected_recipient_id: Optional[str] = None

    @property
    def following_selection(self) -> bool:
        return self.selected_recipient_id is not None

    @property
    def iban_error(self) -> Optional[str]:
        if self.iban and not validate_iban(self.iban):
            return INVALID_IBAN_MESSAGE
        return None

    def select_recipient(self, recipient: Optional[SavedRecipient]) -> None:
        """Fill all three recipient fields from one saved record, or clear them"""
        if recipient is None:
            self.selected_recipient_id = None
            self.iban = ""
            self.first_name = ""
            self.last_name = ""
            return

        self.selected_recipient_id = recipient.id
        self.iban = recipient.iban
        self.first_name = recipient.first_name
        self.last_name = recipient.last_name

    def set_iban(self, value: str) -> None:
        self.selected_recipient_id = None
        self.iban = value

    def set_first_name(self, value: str) -> None:
        self.selected_recipient_id = None
        self.first_name = value

    def set_last_name(self, value: str) -> None:
        self.selected_recipient_id = None
        self.last_name = value

    def set_amount(self, value: str) -> bool:
        """Apply one keystroke; input outside the amount mask is refused"""
        if not accepts_amount_input(value):
            return False
        self.amount = value
        return True

    def set_description(self, value: str) -> None:
        self.description = value

    def to_request(self) -> TransferRequest:
        return TransferRequest(
            iban=self.iban,
            first_name=self.first_name,
            last_name=self.last_name,
            amount=self.amount,
            description=self.description,
        )

    def reset(self) -> None:
        self.select_recipient(None)
        self.amount = ""
        self.description = ""


class TransferPipeline:
    """
    Validates and submits transfers for one session.

    Flow per submit():
    1. Clear banners, mark the form as loading
    2. Validate locally (no network call on failure)
    3. Normalize IBAN, default description, parse amount
    4. Submit; surface error, or success plus optional warning
    5. On success refresh the synced views, then return to the transaction
       list after a short delay
    6. Loading cleared whatever happened
    """

    def __init__(
        self,
        client: BankClient,
        session: Session,
        synchronizer: DataSynchronizer,
        messages: MessageBoard,
        scheduler: Scheduler,
        on_show_transactions: Callable[[], None],
        return_delay_seconds: float | None = None,
    ):
        self._client = client
        self._session = session
        self._synchronizer = synchronizer
        self._messages = messages
        self._scheduler = scheduler
        self._on_show_transactions = on_show_transactions
        self._return_delay = (
            return_delay_seconds if return_delay_seconds is not None else settings.view_return_delay_seconds
        )
        self._in_flight = 0

    @property
    def loading(self) -> bool:
        return self._in_flight > 0

    async def submit(self, request: TransferRequest) -> TransferOutcome:
        start_time = time.time()
        self._in_flight += 1
        self._messages.clear()
        try:
            try:
                payload = self._build_payload(request)
            except DomainException as e:
                logging.info(f"Transfer rejected locally: {e}", extra={"session_id": self._session.session_id})
                self._messages.show_error(MISSING_FIELDS_MESSAGE)
                return self._finish(TransferOutcome(TransferStatus.REJECTED, MISSING_FIELDS_MESSAGE), request, start_time)

            try:
                result = await self._client.create_transfer(payload)
            except TransferRejectedError as e:
                return self._fail(e.service_message or FAILURE_MESSAGE, request, start_time)
            except DomainException as e:
                logging.error(f"Transfer request failed: {e}", extra={"session_id": self._session.session_id})
                return self._fail(FAILURE_MESSAGE, request, start_time)

            echo = result.transaction
            transaction = echo.to_domain() if echo else None
            warning = (echo.warning or None) if echo else None
            outcome = TransferOutcome(
                status=TransferStatus.SUCCEEDED_WITH_WARNING if warning else TransferStatus.SUCCEEDED,
                message=SUCCESS_MESSAGE,
                warning=warning,
                transaction=transaction,
            )

            if not self._session.alive:
                # Session ended while the request was in flight
                return self._finish(outcome, request, start_time)

            if warning:
                self._messages.show_warning(warning)
            self._messages.show_success(SUCCESS_MESSAGE)

            await self._synchronizer.refresh()
            if self._session.alive:
                self._scheduler.call_later(self._return_delay, self._on_show_transactions)
            return self._finish(outcome, request, start_time)

        finally:
            self._in_flight -= 1

    async def submit_form(self, form: TransferForm) -> TransferOutcome:
        """Submit the form's contents; the form is cleared only after a success"""
        outcome = await self.submit(form.to_request())
        if outcome.succeeded:
            form.reset()
        return outcome

    def _build_payload(self, request: TransferRequest) -> TransferPayload:
        if not request.iban or not validate_iban(request.iban):
            raise InvalidIbanError(f"Invalid IBAN '{request.iban}'")
        if not request.first_name or not request.last_name:
            raise MissingFieldError("Recipient first and last name are required")
        if not request.amount:
            raise InvalidAmountError("Amount is required")

        return TransferPayload(
            from_iban=self._session.account.iban,
            # Whitespace stripped and upper-cased, the same form used for duplicate checks
            to_iban=normalize_iban(request.iban),
            to_first_name=request.first_name,
            to_last_name=request.last_name,
            amount=parse_amount(request.amount),
            description=request.description.strip() or DEFAULT_DESCRIPTION,
        )

    def _fail(self, message: str, request: TransferRequest, start_time: float) -> TransferOutcome:
        if self._session.alive:
            self._messages.show_error(message)
        return self._finish(TransferOutcome(TransferStatus.FAILED, message), request, start_time)

    def _finish(self, outcome: TransferOutcome, request: TransferRequest, start_time: float) -> TransferOutcome:
        record_transfer(outcome.status.value)
        log_transfer(
            self._session.session_id,
            outcome.status.value,
            request.amount,
            outcome.warning,
            (time.time() - start_time) * 1000,
        )
        return outcome

