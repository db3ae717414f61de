"""In-memory mock of the remote banking API, served in-process for tests"""

import uuid
from datetime import datetime
from decimal import Decimal
from typing import Dict, List

from fastapi import FastAPI, HTTPException
from fastapi.responses import JSONResponse
from pydantic import BaseModel

STARTING_BALANCE = Decimal("1000.00")


class BankState:
    """Users and ledger for one mock bank instance"""

    def __init__(self) -> None:
        self.users: Dict[str, dict] = {}
        self.passwords: Dict[str, str] = {}
        self.saved_recipients: Dict[str, List[str]] = {}
        self.transactions: List[dict] = []
        self.fail_reads = False

    def add_user(self, username: str, password: str, first_name: str, last_name: str, iban: str,
                 balance: Decimal = STARTING_BALANCE) -> dict:
        user = {
            "id": uuid.uuid4().hex,
            "username": username,
            "firstName": first_name,
            "lastName": last_name,
            "iban": iban,
            "accountNumber": iban[-10:],
            "balance": balance,
            "status": "ACTIVE",
        }
        self.users[user["id"]] = user
        self.passwords[username] = password
        self.saved_recipients[user["id"]] = []
        return user

    def by_username(self, username: str) -> dict | None:
        return next((u for u in self.users.values() if u["username"] == username), None)

    def by_iban(self, iban: str) -> dict | None:
        return next((u for u in self.users.values() if u["iban"] == iban), None)


class Credentials(BaseModel):
    username: str
    password: str


class Registration(Credentials):
    firstName: str
    lastName: str


class TransferBody(BaseModel):
    fromIban: str
    toIban: str
    toFirstName: str
    toLastName: str
    amount: float
    description: str | None = None


class RecipientBody(BaseModel):
    recipientIban: str
    firstName: str | None = None
    lastName: str | None = None


def _user_json(user: dict) -> dict:
    return {**user, "balance": float(user["balance"])}


def create_app(state: BankState | None = None) -> FastAPI:
    bank = state or BankState()
    app = FastAPI(title="Mock Bank Server", version="1.0.0")
    app.state.bank = bank

    def guard_reads() -> None:
        if bank.fail_reads:
            raise HTTPException(status_code=503, detail="service unavailable")

    @app.get("/health")
    def health():
        return {"status": "ok"}

    @app.post("/api/users/register", status_code=201)
    def register(body: Registration):
        if bank.by_username(body.username):
            raise HTTPException(status_code=400, detail="username taken")
        iban = f"DE89370400440532{len(bank.users) + 1:06d}"
        return _user_json(bank.add_user(body.username, body.password, body.firstName, body.lastName, iban))

    @app.post("/api/users/login")
    def login(body: Credentials):
        user = bank.by_username(body.username)
        if user is None or bank.passwords.get(body.username) != body.password:
            raise HTTPException(status_code=401, detail="invalid credentials")
        return _user_json(user)

    @app.get("/api/users/number/{account_number}")
    def get_account(account_number: str):
        guard_reads()
        user = next((u for u in bank.users.values() if u["accountNumber"] == account_number), None)
        if user is None:
            raise HTTPException(status_code=404, detail="account not found")
        return _user_json(user)

    @app.delete("/api/users/{user_id}")
    def delete_user(user_id: str):
        if bank.users.pop(user_id, None) is None:
            raise HTTPException(status_code=404, detail="user not found")
        bank.saved_recipients.pop(user_id, None)
        return {}

    @app.get("/api/transactions/iban/{iban}")
    def get_transactions(iban: str):
        guard_reads()
        return [
            {**tx, "amount": float(tx["amount"])}
            for tx in bank.transactions
            if iban in (tx["fromIban"], tx["toIban"])
        ]

    @app.post("/api/transactions/transfer", status_code=201)
    def transfer(body: TransferBody):
        amount = Decimal(str(body.amount)).quantize(Decimal("0.01"))
        sender = bank.by_iban(body.fromIban)
        recipient = bank.by_iban(body.toIban)
        error = None
        if amount <= 0:
            error = "Transfer amount must be positive"
        elif body.fromIban == body.toIban:
            error = "Cannot transfer money to your own account"
        elif sender is None:
            error = "Your account not found"
        elif recipient is None:
            error = "Recipient IBAN not found. Please check the IBAN and try again."
        elif sender["balance"] < amount:
            error = "Insufficient funds"
        if error:
            return JSONResponse(status_code=400, content={"success": False, "message": error})

        tx = {
            "id": uuid.uuid4().hex,
            "fromIban": body.fromIban,
            "toIban": body.toIban,
            "fromFirstName": sender["firstName"],
            "fromLastName": sender["lastName"],
            "toFirstName": body.toFirstName,
            "toLastName": body.toLastName,
            "amount": amount,
            "description": body.description,
            "status": "COMPLETED",
            "warning": None,
            "transactionDate": datetime.now().isoformat(),
        }
        if (recipient["firstName"].lower() != body.toFirstName.lower()
                or recipient["lastName"].lower() != body.toLastName.lower()):
            tx["warning"] = f"Name mismatch: Account holder is {recipient['firstName']} {recipient['lastName']}"

        sender["balance"] -= amount
        recipient["balance"] += amount
        bank.transactions.append(tx)
        return {"success": True, "transaction": {**tx, "amount": float(amount)}}

    @app.get("/api/users/{user_id}/saved-recipients")
    def get_saved_recipients(user_id: str):
        guard_reads()
        if user_id not in bank.users:
            raise HTTPException(status_code=404, detail="user not found")
        found = (bank.by_iban(iban) for iban in bank.saved_recipients[user_id])
        return [
            {"id": u["id"], "firstName": u["firstName"], "lastName": u["lastName"], "iban": u["iban"]}
            for u in found
            if u is not None
        ]

    @app.post("/api/users/{user_id}/saved-recipients")
    def save_recipient(user_id: str, body: RecipientBody):
        recipient = bank.by_iban(body.recipientIban)
        if user_id not in bank.users or recipient is None:
            raise HTTPException(status_code=404, detail="recipient not found")
        if body.recipientIban not in bank.saved_recipients[user_id]:
            bank.saved_recipients[user_id].append(body.recipientIban)
        return {
            "id": recipient["id"],
            "firstName": recipient["firstName"],
            "lastName": recipient["lastName"],
            "iban": recipient["iban"],
        }

    @app.delete("/api/users/{user_id}/saved-recipients/{iban}")
    def delete_recipient(user_id: str, iban: str):
        saved = bank.saved_recipients.get(user_id)
        if saved is None or iban not in saved:
            raise HTTPException(status_code=404, detail="recipient not found")
        saved.remove(iban)
        return {}

    return app


app = create_app()
