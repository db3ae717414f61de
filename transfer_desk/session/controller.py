"""Session lifecycle: login, inactivity logout and teardown"""

import logging
from enum import Enum
from typing import Callable, List, Optional

from transfer_desk.config import settings
from transfer_desk.domain.exceptions import (
    NoActiveSessionError,
    RemoteServiceError,
    SessionAlreadyActiveError,
)
from transfer_desk.domain.models import Account, Session
from transfer_desk.infrastructure.clients.bank import BankClient
from transfer_desk.infrastructure.observability.logging import log_session_event
from transfer_desk.infrastructure.observability.metrics import (
    active_sessions_gauge,
    session_termination_counter,
)
from transfer_desk.session.activity import ActivitySource
from transfer_desk.session.dashboard import Dashboard
from transfer_desk.session.store import SessionStore
from transfer_desk.session.timer import InactivityTimer
from transfer_desk.utils.scheduler import AsyncioScheduler, Scheduler, ScopedScheduler

DELETE_ACCOUNT_FAILED_MESSAGE = "Failed to delete account"


class SessionState(str, Enum):
    ANONYMOUS = "anonymous"
    ACTIVE = "active"


class LogoutReason(str, Enum):
    MANUAL = "manual"
    INACTIVITY = "inactivity"
    ACCOUNT_DELETED = "account_deleted"


LogoutListener = Callable[[Session, LogoutReason], None]


class SessionController:
    """
    Owns the single active session of this client.

    ANONYMOUS -> ACTIVE on login, registration or resume; ACTIVE ->
    ANONYMOUS on logout, inactivity timeout or account deletion. Leaving
    ACTIVE runs teardown once; further logout calls are no-ops.
    """

    def __init__(
        self,
        client: BankClient | None = None,
        scheduler: Scheduler | None = None,
        activity: ActivitySource | None = None,
        store: SessionStore | None = None,
        inactivity_timeout_seconds: int | None = None,
        sync_interval_seconds: float | None = None,
        message_ttl_seconds: float | None = None,
        view_return_delay_seconds: float | None = None,
    ):
        self.client = client or BankClient()
        self.scheduler = scheduler or AsyncioScheduler()
        self.activity = activity or ActivitySource()
        self.store = store or SessionStore()
        self._inactivity_timeout = (
            inactivity_timeout_seconds
            if inactivity_timeout_seconds is not None
            else settings.inactivity_timeout_seconds
        )
        self._sync_interval = sync_interval_seconds
        self._message_ttl = message_ttl_seconds
        self._view_return_delay = view_return_delay_seconds
        self._session: Optional[Session] = None
        self._dashboard: Optional[Dashboard] = None
        self._timer: Optional[InactivityTimer] = None
        self._logout_listeners: List[LogoutListener] = []

    @property
    def state(self) -> SessionState:
        return SessionState.ACTIVE if self._session is not None else SessionState.ANONYMOUS

    @property
    def session(self) -> Optional[Session]:
        return self._session

    @property
    def dashboard(self) -> Dashboard:
        if self._dashboard is None:
            raise NoActiveSessionError("No active session")
        return self._dashboard

    @property
    def timer(self) -> Optional[InactivityTimer]:
        return self._timer

    def add_logout_listener(self, listener: LogoutListener) -> None:
        self._logout_listeners.append(listener)

    async def login(self, username: str, password: str) -> Session:
        """
        Raises:
            SessionAlreadyActiveError: A session is already active
            AuthenticationError: Credentials refused or service unavailable
        """
        self._ensure_anonymous()
        account = await self.client.login(username, password)
        return self.activate(account)

    async def register(self, username: str, password: str, first_name: str, last_name: str) -> Session:
        """
        Raises:
            SessionAlreadyActiveError: A session is already active
            RegistrationError: Registration refused or service unavailable
        """
        self._ensure_anonymous()
        account = await self.client.register(username, password, first_name, last_name)
        return self.activate(account)

    def resume(self) -> Optional[Session]:
        """Re-activate from the identity left in the store, if any"""
        if self._session is not None:
            return self._session
        account = self.store.load()
        if account is None:
            return None
        return self.activate(account)

    def activate(self, account: Account) -> Session:
        self._ensure_anonymous()

        session = Session(account=account)
        scope = ScopedScheduler(self.scheduler)
        dashboard = Dashboard(
            self.client,
            session,
            scope,
            sync_interval_seconds=self._sync_interval,
            message_ttl_seconds=self._message_ttl,
            view_return_delay_seconds=self._view_return_delay,
        )
        timer = InactivityTimer(
            on_timeout=self._on_inactivity,
            scheduler=scope,
            activity=self.activity,
            threshold_seconds=self._inactivity_timeout,
        )

        self._session = session
        self._dashboard = dashboard
        self._timer = timer
        self.store.save(account)

        timer.start()
        dashboard.start()
        active_sessions_gauge.inc()
        log_session_event(session.session_id, "started", account_id=account.id)
        return session

    def logout(self, reason: LogoutReason = LogoutReason.MANUAL) -> bool:
        """Tear the session down; returns False when there was nothing to tear down"""
        session = self._session
        if session is None:
            return False

        self._session = None
        session.close()
        if self._timer is not None:
            self._timer.stop()
        if self._dashboard is not None:
            self._dashboard.close()
        self._timer = None
        self._dashboard = None
        self.store.clear()

        active_sessions_gauge.dec()
        session_termination_counter.labels(reason=reason.value).inc()
        log_session_event(session.session_id, "ended", reason=reason.value)

        for listener in list(self._logout_listeners):
            listener(session, reason)
        return True

    async def delete_account(self) -> bool:
        dashboard = self.dashboard
        session = dashboard.session
        try:
            await self.client.delete_account(session.account.id)
        except RemoteServiceError as e:
            logging.error(f"Account deletion failed: {e}", extra={"session_id": session.session_id})
            if session.alive:
                dashboard.messages.show_error(DELETE_ACCOUNT_FAILED_MESSAGE)
            return False

        if session is self._session:
            self.logout(LogoutReason.ACCOUNT_DELETED)
        return True

    def record_activity(self, event: str) -> None:
        self.activity.emit(event)

    def _on_inactivity(self) -> None:
        self.logout(LogoutReason.INACTIVITY)

    def _ensure_anonymous(self) -> None:
        if self._session is not None:
            raise SessionAlreadyActiveError(
                f"Session {self._session.session_id} is already active"
            )
