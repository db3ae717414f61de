"""Periodic pull of account, transactions and saved recipients"""

import asyncio
import logging
import time
from datetime import datetime, timezone
from typing import Callable, List, Optional, Set, Tuple

from transfer_desk.config import settings
from transfer_desk.domain.exceptions import RemoteServiceError
from transfer_desk.domain.models import Account, SavedRecipient, Session, SyncSnapshot, Transaction
from transfer_desk.infrastructure.clients.bank import BankClient
from transfer_desk.infrastructure.observability.logging import log_sync_cycle
from transfer_desk.infrastructure.observability.metrics import record_sync_cycle
from transfer_desk.utils.scheduler import Interval, Scheduler

SnapshotListener = Callable[[SyncSnapshot], None]


class DataSynchronizer:
    """
    Sole writer of the cached account, transaction and recipient views.

    Every cycle pulls the three views concurrently and applies them as one
    SyncSnapshot: if any pull fails nothing is replaced. Cycles may overlap;
    each gets an increasing id and a result is dropped when a newer cycle
    has already been applied, so an older snapshot never overwrites a newer
    one. Results arriving after stop() are dropped as well.
    """

    def __init__(
        self,
        client: BankClient,
        session: Session,
        scheduler: Scheduler,
        interval_seconds: float | None = None,
    ):
        self._client = client
        self._session = session
        self._scheduler = scheduler
        self._interval_seconds = interval_seconds or settings.sync_interval_seconds
        self._snapshot: Optional[SyncSnapshot] = None
        self._started_cycles = 0
        self._applied_cycle = 0
        self._interval: Interval | None = None
        self._tasks: Set[asyncio.Task] = set()
        self._listeners: List[SnapshotListener] = []
        self._running = False
        self._stopped = False

    @property
    def snapshot(self) -> Optional[SyncSnapshot]:
        return self._snapshot

    @property
    def account(self) -> Account:
        return self._snapshot.account if self._snapshot else self._session.account

    @property
    def transactions(self) -> Tuple[Transaction, ...]:
        return self._snapshot.transactions if self._snapshot else ()

    @property
    def recipients(self) -> Tuple[SavedRecipient, ...]:
        return self._snapshot.recipients if self._snapshot else ()

    @property
    def running(self) -> bool:
        return self._running

    def subscribe(self, listener: SnapshotListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def start(self) -> None:
        """Run one cycle now, then one every interval until stop()"""
        if self._running or self._stopped:
            return
        self._running = True
        self._spawn_cycle()
        self._interval = Interval(self._scheduler, self._interval_seconds, self._spawn_cycle)

    def stop(self) -> None:
        self._running = False
        self._stopped = True
        if self._interval is not None:
            self._interval.cancel()
            self._interval = None

    async def refresh(self) -> bool:
        """
        Pull all three views once, outside the periodic schedule.

        Never raises; returns True when the result was applied.
        """
        if self._stopped or not self._session.alive:
            return False

        self._started_cycles += 1
        cycle = self._started_cycles
        start_time = time.time()
        account = self._session.account

        try:
            fresh_account, transactions, recipients = await asyncio.gather(
                self._client.get_account(account.account_number),
                self._client.get_transactions(account.iban),
                self._client.get_saved_recipients(account.id),
            )

        except RemoteServiceError as e:
            self._finish(cycle, "failed", start_time)
            logging.warning(f"Sync cycle failed: {e}", extra={"session_id": self._session.session_id})
            return False

        except Exception as e:
            self._finish(cycle, "failed", start_time)
            logging.error(f"Unexpected sync error: {e}", extra={"session_id": self._session.session_id})
            return False

        if self._stopped or not self._session.alive or cycle < self._applied_cycle:
            self._finish(cycle, "discarded", start_time)
            return False

        self._snapshot = SyncSnapshot(
            account=fresh_account,
            transactions=tuple(transactions),
            recipients=tuple(recipients),
            synced_at=datetime.now(timezone.utc),
        )
        self._applied_cycle = cycle
        self._finish(cycle, "applied", start_time)

        for listener in list(self._listeners):
            try:
                listener(self._snapshot)
            except Exception as e:
                logging.error(f"Snapshot listener failed: {e}", extra={"session_id": self._session.session_id})
        return True

    async def drain(self) -> None:
        """Wait for every background cycle started so far"""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    def _spawn_cycle(self) -> None:
        if not self._running:
            return
        task = asyncio.ensure_future(self.refresh())
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    def _finish(self, cycle: int, outcome: str, start_time: float) -> None:
        record_sync_cycle(outcome)
        log_sync_cycle(self._session.session_id, cycle, outcome, (time.time() - start_time) * 1000)
