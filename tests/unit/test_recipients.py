"""Unit tests for saved recipient management"""

import pytest

from transfer_desk.domain.exceptions import RemoteServiceError
from transfer_desk.domain.models import SavedRecipient
from transfer_desk.session.messages import MessageBoard
from transfer_desk.session.recipients import (
    DELETE_FAILED_MESSAGE,
    DELETED_MESSAGE,
    MISSING_DETAILS_MESSAGE,
    SAVE_FAILED_MESSAGE,
    SAVED_MESSAGE,
    RecipientManager,
    find_recipient,
)
from transfer_desk.session.synchronizer import DataSynchronizer
from transfer_desk.session.transfer import TransferForm

PAYEE_IBAN = "DE44500105175407324931"
NEW_IBAN = "DE893704004405320130XX"


@pytest.fixture
def messages(scheduler):
    return MessageBoard(scheduler, ttl_seconds=5)


@pytest.fixture
async def manager(bank_client, session, scheduler, messages):
    synchronizer = DataSynchronizer(bank_client, session, scheduler, interval_seconds=10)
    await synchronizer.refresh()
    return RecipientManager(bank_client, session, synchronizer, messages)


def test_find_recipient(saved_recipient):
    assert find_recipient([saved_recipient], "rcp-1") is saved_recipient
    assert find_recipient([saved_recipient], "rcp-2") is None
    assert find_recipient([saved_recipient], "") is None


async def test_offer_to_save_only_unsaved_complete_recipients(manager):
    assert manager.can_offer_save(NEW_IBAN, "Erika", "Muster") is True
    # Already saved, regardless of spacing, case or names
    assert manager.can_offer_save("de44 5001 0517 5407 3249 31", "Someone", "Else") is False
    assert manager.can_offer_save(NEW_IBAN, "", "Muster") is False
    assert manager.can_offer_save("DE4450010517540732493", "Erika", "Muster") is False


async def test_save_success_refreshes_recipients(manager, bank_client, messages, session):
    added = SavedRecipient(id="rcp-2", first_name="Erika", last_name="Muster", iban=NEW_IBAN)
    bank_client.save_recipient.return_value = added
    bank_client.get_saved_recipients.return_value = [*manager.recipients, added]

    assert await manager.save(" de89 3704 0044 0532 0130 xx", "Erika", "Muster") is True

    payload = bank_client.save_recipient.await_args.args[0]
    assert payload.user_id == session.account.id
    assert payload.recipient_iban == NEW_IBAN
    assert messages.success == SAVED_MESSAGE
    assert manager.is_saved(NEW_IBAN) is True


async def test_save_with_missing_details_does_not_call_service(manager, bank_client, messages):
    assert await manager.save(NEW_IBAN, "Erika", "") is False

    assert messages.error == MISSING_DETAILS_MESSAGE
    bank_client.save_recipient.assert_not_awaited()


async def test_save_failure_leaves_list_untouched(manager, bank_client, messages):
    bank_client.save_recipient.side_effect = RemoteServiceError("Bank API error: 404")
    bank_client.get_saved_recipients.reset_mock()

    assert await manager.save(NEW_IBAN, "Erika", "Muster") is False

    assert messages.error == SAVE_FAILED_MESSAGE
    assert len(manager.recipients) == 1
    bank_client.get_saved_recipients.assert_not_awaited()


async def test_delete_success_and_failure(manager, bank_client, messages, session):
    bank_client.get_saved_recipients.return_value = []
    assert await manager.delete(PAYEE_IBAN) is True
    bank_client.delete_recipient.assert_awaited_once_with(session.account.id, PAYEE_IBAN)
    assert messages.success == DELETED_MESSAGE
    assert manager.recipients == ()

    bank_client.delete_recipient.side_effect = RemoteServiceError("Bank API error: 404")
    assert await manager.delete(PAYEE_IBAN) is False
    assert messages.error == DELETE_FAILED_MESSAGE


async def test_select_fills_form_and_unknown_id_clears_it(manager):
    form = TransferForm()

    assert manager.select(form, "rcp-1") is not None
    assert form.iban == PAYEE_IBAN
    assert manager.should_offer_save(form) is False

    form.set_iban(NEW_IBAN)
    assert form.following_selection is False
    assert form.first_name == "Max"
    assert manager.should_offer_save(form) is True

    assert manager.select(form, "missing") is None
    assert (form.iban, form.first_name, form.last_name) == ("", "", "")
