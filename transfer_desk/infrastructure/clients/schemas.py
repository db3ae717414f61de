"""Pydantic schemas for the remote banking API wire format"""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_serializer
from pydantic.alias_generators import to_camel

from transfer_desk.domain.models import (
    DEFAULT_DESCRIPTION,
    Account,
    SavedRecipient,
    Transaction,
)


class WireModel(BaseModel):
    """camelCase on the wire, snake_case in Python; unknown fields ignored"""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class AccountSchema(WireModel):
    """Account record (GET /users/number/{accountNumber}, login, register)"""

    id: str
    username: str = ""
    first_name: str
    last_name: str
    iban: str
    account_number: str
    balance: Decimal
    status: str = ""

    def to_domain(self) -> Account:
        return Account(
            id=self.id,
            username=self.username,
            first_name=self.first_name,
            last_name=self.last_name,
            iban=self.iban,
            account_number=self.account_number,
            balance=self.balance.quantize(Decimal("0.01")),
            status=self.status,
        )

    @classmethod
    def from_domain(cls, account: Account) -> "AccountSchema":
        return cls(
            id=account.id,
            username=account.username,
            first_name=account.first_name,
            last_name=account.last_name,
            iban=account.iban,
            account_number=account.account_number,
            balance=account.balance,
            status=account.status,
        )


class TransactionSchema(WireModel):
    """Single ledger entry (GET /transactions/iban/{iban})"""

    id: str
    from_iban: str
    to_iban: str
    from_first_name: str = ""
    from_last_name: str = ""
    to_first_name: str = ""
    to_last_name: str = ""
    amount: Decimal
    description: Optional[str] = None
    status: str = ""
    warning: Optional[str] = None
    transaction_date: Optional[datetime] = None

    def to_domain(self) -> Transaction:
        return Transaction(
            id=self.id,
            from_iban=self.from_iban,
            to_iban=self.to_iban,
            from_first_name=self.from_first_name,
            from_last_name=self.from_last_name,
            to_first_name=self.to_first_name,
            to_last_name=self.to_last_name,
            amount=self.amount,
            description=self.description or DEFAULT_DESCRIPTION,
            status=self.status,
            warning=self.warning or None,
            transaction_date=self.transaction_date,
        )


class SavedRecipientSchema(WireModel):
    """Saved recipient (GET/POST /users/{userId}/saved-recipients)"""

    id: str
    first_name: str
    last_name: str
    iban: str

    def to_domain(self) -> SavedRecipient:
        return SavedRecipient(
            id=self.id,
            first_name=self.first_name,
            last_name=self.last_name,
            iban=self.iban,
        )


class LoginRequest(WireModel):
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class RegisterRequest(LoginRequest):
    first_name: str = Field(..., min_length=1)
    last_name: str = Field(..., min_length=1)


class TransferPayload(WireModel):
    """Request body for POST /transactions/transfer"""

    from_iban: str
    to_iban: str
    to_first_name: str
    to_last_name: str
    amount: Decimal = Field(..., ge=0)
    description: str

    @field_serializer("amount")
    def serialize_amount(self, amount: Decimal) -> float:
        # The service reads the amount as a JSON number
        return float(amount)


class TransferEcho(WireModel):
    """
    Transaction echoed back by POST /transactions/transfer.

    Only `warning` is relied upon; the service may send a partial record, so
    every field is optional and an incomplete echo maps to no transaction.
    """

    id: Optional[str] = None
    from_iban: Optional[str] = None
    to_iban: Optional[str] = None
    from_first_name: str = ""
    from_last_name: str = ""
    to_first_name: str = ""
    to_last_name: str = ""
    amount: Optional[Decimal] = None
    description: Optional[str] = None
    status: str = ""
    warning: Optional[str] = None
    transaction_date: Optional[datetime] = None

    def to_domain(self) -> Optional[Transaction]:
        if not (self.id and self.from_iban and self.to_iban) or self.amount is None:
            return None
        return TransactionSchema.model_validate(self.model_dump()).to_domain()


class TransferResult(WireModel):
    """Response for POST /transactions/transfer"""

    success: bool
    message: Optional[str] = None
    transaction: Optional[TransferEcho] = None


class SaveRecipientPayload(WireModel):
    """Request body for POST /users/{userId}/saved-recipients"""

    user_id: str
    recipient_iban: str
    first_name: str
    last_name: str
