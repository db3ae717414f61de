"""Saved recipient create/delete and transfer-form selection"""

import logging
from typing import Iterable, Optional, Tuple

from transfer_desk.domain.exceptions import DomainException
from transfer_desk.domain.models import SavedRecipient, Session
from transfer_desk.domain.validation import normalize_iban, validate_iban
from transfer_desk.infrastructure.clients.bank import BankClient
from transfer_desk.infrastructure.clients.schemas import SaveRecipientPayload
from transfer_desk.infrastructure.observability.metrics import record_recipient_operation
from transfer_desk.session.messages import MessageBoard
from transfer_desk.session.synchronizer import DataSynchronizer
from transfer_desk.session.transfer import TransferForm

MISSING_DETAILS_MESSAGE = "Please fill in all recipient details"
SAVED_MESSAGE = "Recipient saved successfully!"
SAVE_FAILED_MESSAGE = "Failed to save recipient"
DELETED_MESSAGE = "Recipient deleted successfully!"
DELETE_FAILED_MESSAGE = "Failed to delete recipient"


def find_recipient(recipients: Iterable[SavedRecipient], recipient_id: Optional[str]) -> Optional[SavedRecipient]:
    if not recipient_id:
        return None
    return next((r for r in recipients if r.id == recipient_id), None)


class RecipientManager:
    """
    Creates and deletes saved recipients for the session's account.

    The recipient list itself is never edited here: after a successful
    mutation the synchronizer is asked for a refresh and the next snapshot
    carries the change.
    """

    def __init__(
        self,
        client: BankClient,
        session: Session,
        synchronizer: DataSynchronizer,
        messages: MessageBoard,
    ):
        self._client = client
        self._session = session
        self._synchronizer = synchronizer
        self._messages = messages

    @property
    def recipients(self) -> Tuple[SavedRecipient, ...]:
        return self._synchronizer.recipients

    async def save(self, iban: str, first_name: str, last_name: str) -> bool:
        if not iban or not first_name or not last_name:
            self._messages.show_error(MISSING_DETAILS_MESSAGE)
            return False

        payload = SaveRecipientPayload(
            user_id=self._session.account.id,
            recipient_iban=normalize_iban(iban),
            first_name=first_name,
            last_name=last_name,
        )
        try:
            await self._client.save_recipient(payload)
        except DomainException as e:
            record_recipient_operation("save", succeeded=False)
            logging.warning(f"Saving recipient failed: {e}", extra={"session_id": self._session.session_id})
            if self._session.alive:
                self._messages.show_error(SAVE_FAILED_MESSAGE)
            return False

        record_recipient_operation("save", succeeded=True)
        if not self._session.alive:
            return True

        self._messages.show_success(SAVED_MESSAGE)
        await self._synchronizer.refresh()
        return True

    async def delete(self, iban: str) -> bool:
        try:
            await self._client.delete_recipient(self._session.account.id, normalize_iban(iban))
        except DomainException as e:
            record_recipient_operation("delete", succeeded=False)
            logging.warning(f"Deleting recipient failed: {e}", extra={"session_id": self._session.session_id})
            if self._session.alive:
                self._messages.show_error(DELETE_FAILED_MESSAGE)
            return False

        record_recipient_operation("delete", succeeded=True)
        if not self._session.alive:
            return True

        self._messages.show_success(DELETED_MESSAGE)
        await self._synchronizer.refresh()
        return True

    def is_saved(self, iban: str) -> bool:
        normalized = normalize_iban(iban)
        return any(normalize_iban(r.iban) == normalized for r in self.recipients)

    def can_offer_save(self, iban: str, first_name: str, last_name: str) -> bool:
        """Offer saving only for a complete, valid recipient that isn't saved yet (names ignored)"""
        if not validate_iban(iban) or not first_name or not last_name:
            return False
        return not self.is_saved(iban)

    def should_offer_save(self, form: TransferForm) -> bool:
        return self.can_offer_save(form.iban, form.first_name, form.last_name)

    def select(self, form: TransferForm, recipient_id: Optional[str]) -> Optional[SavedRecipient]:
        """Point the form at a synced recipient; an empty or unknown id clears the selection"""
        recipient = find_recipient(self.recipients, recipient_id)
        form.select_recipient(recipient)
        return recipient

