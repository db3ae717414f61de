"""Unit tests for session lifecycle and teardown"""

import pytest

from transfer_desk.domain.exceptions import (
    AuthenticationError,
    NoActiveSessionError,
    RemoteServiceError,
    SessionAlreadyActiveError,
)
from transfer_desk.session.activity import ActivityEvent
from transfer_desk.session.controller import (
    DELETE_ACCOUNT_FAILED_MESSAGE,
    LogoutReason,
    SessionController,
    SessionState,
)
from transfer_desk.session.store import SessionStore


@pytest.fixture
def store():
    return SessionStore()


@pytest.fixture
def controller(bank_client, scheduler, activity, store, account):
    bank_client.login.return_value = account
    return SessionController(
        client=bank_client,
        scheduler=scheduler,
        activity=activity,
        store=store,
        inactivity_timeout_seconds=300,
        sync_interval_seconds=10,
        message_ttl_seconds=5,
        view_return_delay_seconds=2,
    )


@pytest.fixture
def logouts(controller):
    calls = []
    controller.add_logout_listener(lambda session, reason: calls.append((session.session_id, reason)))
    return calls


async def test_login_activates_session(controller, store, account):
    session = await controller.login("anna", "secret")

    assert controller.state == SessionState.ACTIVE
    assert controller.session is session
    assert store.load() == account
    await controller.dashboard.synchronizer.drain()
    assert controller.dashboard.account == account
    assert controller.timer.time_remaining == 300


async def test_failed_login_stays_anonymous(controller, bank_client, store):
    bank_client.login.side_effect = AuthenticationError("Invalid credentials")

    with pytest.raises(AuthenticationError):
        await controller.login("anna", "wrong")

    assert controller.state == SessionState.ANONYMOUS
    assert store.occupied is False
    with pytest.raises(NoActiveSessionError):
        controller.dashboard


async def test_second_login_is_refused(controller, bank_client):
    await controller.login("anna", "secret")

    with pytest.raises(SessionAlreadyActiveError):
        await controller.login("anna", "secret")
    assert bank_client.login.await_count == 1


async def test_inactivity_logs_out_exactly_once(controller, scheduler, activity, store, logouts):
    session = await controller.login("anna", "secret")
    dashboard = controller.dashboard

    scheduler.advance(299)
    assert logouts == []

    scheduler.advance(1)
    assert logouts == [(session.session_id, LogoutReason.INACTIVITY)]
    assert controller.state == SessionState.ANONYMOUS
    assert session.alive is False
    assert store.occupied is False

    # A manual logout racing the timeout is a no-op
    assert controller.logout() is False
    assert len(logouts) == 1

    await dashboard.synchronizer.drain()
    assert scheduler.pending == 0
    assert activity.listener_count() == 0


async def test_activity_keeps_session_alive(controller, scheduler, logouts):
    await controller.login("anna", "secret")

    scheduler.advance(250)
    controller.record_activity(ActivityEvent.TOUCH_START)
    scheduler.advance(250)

    assert logouts == []
    assert controller.timer.time_remaining == 50
    controller.logout()
    assert scheduler.pending == 0


async def test_manual_logout_tears_everything_down(controller, scheduler, activity, logouts):
    session = await controller.login("anna", "secret")
    dashboard = controller.dashboard
    dashboard.messages.show_success("Transfer successful!")

    assert controller.logout() is True
    assert controller.logout() is False

    assert logouts == [(session.session_id, LogoutReason.MANUAL)]
    assert dashboard.synchronizer.running is False
    assert dashboard.messages.success is None
    assert scheduler.pending == 0
    assert activity.listener_count() == 0

    scheduler.advance(1000)
    await dashboard.synchronizer.drain()
    assert logouts == [(session.session_id, LogoutReason.MANUAL)]


async def test_resume_restores_identity_from_store(controller, bank_client, scheduler, activity, store, account):
    await controller.login("anna", "secret")

    fresh = SessionController(client=bank_client, scheduler=scheduler, activity=activity, store=store)
    assert fresh.state == SessionState.ANONYMOUS
    session = fresh.resume()

    assert session is not None
    assert session.account == account
    assert fresh.state == SessionState.ACTIVE
    fresh.logout()
    controller.logout()


async def test_resume_with_empty_store_does_nothing(controller):
    assert controller.resume() is None
    assert controller.state == SessionState.ANONYMOUS


async def test_delete_account_logs_out(controller, bank_client, account, logouts):
    session = await controller.login("anna", "secret")

    assert await controller.delete_account() is True

    bank_client.delete_account.assert_awaited_once_with(account.id)
    assert logouts == [(session.session_id, LogoutReason.ACCOUNT_DELETED)]


async def test_delete_account_failure_keeps_session(controller, bank_client, logouts):
    await controller.login("anna", "secret")
    bank_client.delete_account.side_effect = RemoteServiceError("Bank API error: 500")

    assert await controller.delete_account() is False

    assert controller.state == SessionState.ACTIVE
    assert controller.dashboard.messages.error == DELETE_ACCOUNT_FAILED_MESSAGE
    assert logouts == []
    controller.logout()


async def test_explicit_zero_inactivity_timeout_is_honoured(bank_client, scheduler, activity, store, account):
    bank_client.login.return_value = account
    controller = SessionController(
        client=bank_client, scheduler=scheduler, activity=activity, store=store, inactivity_timeout_seconds=0
    )
    reasons = []
    controller.add_logout_listener(lambda session, reason: reasons.append(reason))

    await controller.login("anna", "secret")
    dashboard = controller.dashboard
    assert controller.timer.threshold == 0

    scheduler.advance(0)
    await dashboard.synchronizer.drain()

    assert reasons == [LogoutReason.INACTIVITY]
    assert controller.state == SessionState.ANONYMOUS
