"""Pytest fixtures for testing"""

import asyncio
import heapq
import itertools
from decimal import Decimal
from typing import Awaitable, Callable, List, Tuple
from unittest.mock import AsyncMock

import httpx
import pytest

from mock_bank.main import BankState, create_app
from transfer_desk.domain.models import Account, SavedRecipient, Session, Transaction
from transfer_desk.infrastructure.clients.bank import BankClient
from transfer_desk.session.activity import ActivitySource
from transfer_desk.utils.scheduler import ScopedScheduler

OWN_IBAN = "DE89370400440532013000"
PAYEE_IBAN = "DE44500105175407324931"


class FakeHandle:
    def __init__(self, callback: Callable[[], None]):
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class FakeScheduler:
    """Virtual clock: callbacks run only when the test calls advance()"""

    def __init__(self) -> None:
        self.now = 0.0
        self._queue: List[Tuple[float, int, FakeHandle]] = []
        self._seq = itertools.count()

    def call_later(self, delay: float, callback: Callable[[], None]) -> FakeHandle:
        handle = FakeHandle(callback)
        heapq.heappush(self._queue, (self.now + delay, next(self._seq), handle))
        return handle

    def advance(self, seconds: float) -> None:
        target = self.now + seconds
        while self._queue and self._queue[0][0] <= target:
            due, _, handle = heapq.heappop(self._queue)
            self.now = due
            if not handle.cancelled:
                handle.cancelled = True
                handle.callback()
        self.now = target

    @property
    def pending(self) -> int:
        return sum(1 for _, _, handle in self._queue if not handle.cancelled)


async def _settle(rounds: int = 10) -> None:
    for _ in range(rounds):
        await asyncio.sleep(0)


@pytest.fixture
def settle() -> Callable[[], Awaitable[None]]:
    """Let spawned tasks run until they block on something real"""
    return _settle


@pytest.fixture
def scheduler() -> FakeScheduler:
    return FakeScheduler()


@pytest.fixture
def scope(scheduler: FakeScheduler) -> ScopedScheduler:
    return ScopedScheduler(scheduler)


@pytest.fixture
def activity() -> ActivitySource:
    return ActivitySource()


@pytest.fixture
def account() -> Account:
    return Account(
        id="user-1",
        username="anna",
        first_name="Anna",
        last_name="Schmidt",
        iban=OWN_IBAN,
        account_number="0532013000",
        balance=Decimal("1000.00"),
        status="ACTIVE",
    )


@pytest.fixture
def saved_recipient() -> SavedRecipient:
    return SavedRecipient(id="rcp-1", first_name="Max", last_name="Mustermann", iban=PAYEE_IBAN)


@pytest.fixture
def outgoing_transaction() -> Transaction:
    return Transaction(
        id="tx-1",
        from_iban=OWN_IBAN,
        to_iban=PAYEE_IBAN,
        from_first_name="Anna",
        from_last_name="Schmidt",
        to_first_name="Max",
        to_last_name="Mustermann",
        amount=Decimal("250.00"),
        description="Rent",
        status="COMPLETED",
    )


@pytest.fixture
def session(account: Account) -> Session:
    return Session(account=account)


@pytest.fixture
def bank_client(account: Account, saved_recipient: SavedRecipient) -> AsyncMock:
    """BankClient double whose reads succeed with one saved recipient and no history"""
    client = AsyncMock(spec=BankClient)
    client.get_account.return_value = account
    client.get_transactions.return_value = []
    client.get_saved_recipients.return_value = [saved_recipient]
    return client


@pytest.fixture
def bank_state() -> BankState:
    """Mock bank seeded with two customers"""
    state = BankState()
    state.add_user("anna", "secret", "Anna", "Schmidt", OWN_IBAN)
    state.add_user("max", "secret", "Max", "Mustermann", PAYEE_IBAN)
    return state


@pytest.fixture
def live_client(bank_state: BankState) -> BankClient:
    """Real BankClient talking to the mock bank in-process"""
    app = create_app(bank_state)
    return BankClient(base_url="http://testserver/api", transport=httpx.ASGITransport(app=app))
