"""Domain models - pure Python dataclasses representing banking entities"""

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Optional, Tuple

DEFAULT_DESCRIPTION = "Transfer"


class Direction(str, Enum):
    """Direction of a transaction relative to the viewing account"""

    INCOMING = "incoming"
    OUTGOING = "outgoing"


@dataclass(frozen=True)
class Account:
    """Authenticated account as last reported by the remote service"""

    id: str
    username: str
    first_name: str
    last_name: str
    iban: str
    account_number: str
    balance: Decimal
    status: str

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"


@dataclass(frozen=True)
class Transaction:
    """Posted transaction pulled from the remote ledger"""

    id: str
    from_iban: str
    to_iban: str
    from_first_name: str
    from_last_name: str
    to_first_name: str
    to_last_name: str
    amount: Decimal
    description: str = DEFAULT_DESCRIPTION
    status: str = ""
    warning: Optional[str] = None
    transaction_date: Optional[datetime] = None

    def direction_for(self, iban: str) -> Direction:
        return Direction.OUTGOING if self.from_iban == iban else Direction.INCOMING

    def counterparty_name_for(self, iban: str) -> str:
        if self.direction_for(iban) is Direction.OUTGOING:
            return f"{self.to_first_name} {self.to_last_name}"
        return f"{self.from_first_name} {self.from_last_name}"

    def counterparty_iban_for(self, iban: str) -> str:
        return self.to_iban if self.direction_for(iban) is Direction.OUTGOING else self.from_iban


@dataclass(frozen=True)
class SavedRecipient:
    """Recipient shortcut stored by the remote service"""

    id: str
    first_name: str
    last_name: str
    iban: str


@dataclass(frozen=True)
class TransferRequest:
    """Transfer as entered by the user, before validation"""

    iban: str
    first_name: str
    last_name: str
    amount: str
    description: str = ""


class TransferStatus(str, Enum):
    REJECTED = "rejected"  # failed local validation, nothing sent
    FAILED = "failed"
    SUCCEEDED = "succeeded"
    SUCCEEDED_WITH_WARNING = "succeeded_with_warning"


@dataclass(frozen=True)
class TransferOutcome:
    """Result of one transfer pipeline run"""

    status: TransferStatus
    message: str
    warning: Optional[str] = None
    transaction: Optional[Transaction] = None

    @property
    def succeeded(self) -> bool:
        return self.status in (TransferStatus.SUCCEEDED, TransferStatus.SUCCEEDED_WITH_WARNING)


@dataclass(frozen=True)
class SyncSnapshot:
    """Account, transactions and recipients from one successful sync cycle"""

    account: Account
    transactions: Tuple[Transaction, ...]
    recipients: Tuple[SavedRecipient, ...]
    synced_at: datetime


@dataclass
class Session:
    """Authenticated session bound to a single account"""

    account: Account
    session_id: str = field(default_factory=lambda: uuid.uuid4().hex)
    started_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    alive: bool = True

    def close(self) -> None:
        self.alive = False
