"""Remote banking service HTTP client"""

import httpx
from typing import Any, List
from pydantic import ValidationError as SchemaValidationError

from transfer_desk.config import settings
from transfer_desk.domain.exceptions import (
    AuthenticationError,
    RegistrationError,
    RemoteServiceError,
    TransferRejectedError,
)
from transfer_desk.domain.models import Account, SavedRecipient, Transaction
from transfer_desk.infrastructure.clients.schemas import (
    AccountSchema,
    LoginRequest,
    RegisterRequest,
    SavedRecipientSchema,
    SaveRecipientPayload,
    TransactionSchema,
    TransferPayload,
    TransferResult,
)
from transfer_desk.infrastructure.observability.metrics import remote_request_duration_histogram


class BankClient:
    """Client for the remote account, transaction and recipient API"""

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = (base_url or settings.bank_api_base).rstrip("/")
        self.timeout = timeout or settings.http_timeout_seconds
        self.transport = transport

    async def _request(self, operation: str, method: str, path: str, **kwargs: Any) -> httpx.Response:
        """
        Send one request and raise on non-2xx.

        Raises:
            RemoteServiceError: On timeout, transport failure or HTTP error status
        """
        async with httpx.AsyncClient(
            base_url=self.base_url, timeout=self.timeout, transport=self.transport
        ) as client:
            try:
                with remote_request_duration_histogram.labels(operation=operation).time():
                    response = await client.request(method, path, **kwargs)
                response.raise_for_status()
                return response

            except httpx.TimeoutException as e:
                raise RemoteServiceError(f"Bank API timeout after {self.timeout}s") from e
            except httpx.HTTPStatusError as e:
                raise RemoteServiceError(f"Bank API error: {e.response.status_code}") from e
            except httpx.RequestError as e:
                raise RemoteServiceError(f"Bank API unreachable: {e}") from e

    async def login(self, username: str, password: str) -> Account:
        try:
            payload = LoginRequest(username=username, password=password)
        except SchemaValidationError as e:
            raise AuthenticationError("Username and password are required") from e
        try:
            response = await self._request(
                "login", "POST", "/users/login", json=payload.model_dump(by_alias=True)
            )
        except RemoteServiceError as e:
            raise AuthenticationError("Invalid username or password") from e
        return self._parse_account(response)

    async def register(self, username: str, password: str, first_name: str, last_name: str) -> Account:
        try:
            payload = RegisterRequest(
                username=username, password=password, first_name=first_name, last_name=last_name
            )
        except SchemaValidationError as e:
            raise RegistrationError("All registration fields are required") from e
        try:
            response = await self._request(
                "register", "POST", "/users/register", json=payload.model_dump(by_alias=True)
            )
        except RemoteServiceError as e:
            raise RegistrationError("Registration failed") from e
        return self._parse_account(response)

    async def get_account(self, account_number: str) -> Account:
        response = await self._request("get_account", "GET", f"/users/number/{account_number}")
        return self._parse_account(response)

    async def get_transactions(self, iban: str) -> List[Transaction]:
        response = await self._request("get_transactions", "GET", f"/transactions/iban/{iban}")
        try:
            return [TransactionSchema.model_validate(txn).to_domain() for txn in response.json()]
        except (SchemaValidationError, ValueError, TypeError) as e:
            raise RemoteServiceError(f"Invalid transaction data from bank: {e}") from e

    async def get_saved_recipients(self, user_id: str) -> List[SavedRecipient]:
        response = await self._request(
            "get_saved_recipients", "GET", f"/users/{user_id}/saved-recipients"
        )
        try:
            return [SavedRecipientSchema.model_validate(r).to_domain() for r in response.json()]
        except (SchemaValidationError, ValueError, TypeError) as e:
            raise RemoteServiceError(f"Invalid recipient data from bank: {e}") from e

    async def create_transfer(self, payload: TransferPayload) -> TransferResult:
        """
        Submit a transfer.

        The service answers rejected transfers with a 4xx/5xx status and a
        {success: false, message} body, so the body is read before the status.

        Raises:
            TransferRejectedError: Service answered success=false
            RemoteServiceError: Timeout, transport failure or unreadable response
        """
        async with httpx.AsyncClient(
            base_url=self.base_url, timeout=self.timeout, transport=self.transport
        ) as client:
            try:
                with remote_request_duration_histogram.labels(operation="create_transfer").time():
                    response = await client.post(
                        "/transactions/transfer", json=payload.model_dump(by_alias=True)
                    )
                result = TransferResult.model_validate(response.json())

            except httpx.TimeoutException as e:
                raise RemoteServiceError(f"Bank API timeout after {self.timeout}s") from e
            except httpx.RequestError as e:
                raise RemoteServiceError(f"Bank API unreachable: {e}") from e
            except (SchemaValidationError, ValueError) as e:
                raise RemoteServiceError(f"Invalid transfer response from bank: {e}") from e

        if not result.success:
            raise TransferRejectedError(result.message)
        return result

    async def save_recipient(self, payload: SaveRecipientPayload) -> SavedRecipient:
        response = await self._request(
            "save_recipient",
            "POST",
            f"/users/{payload.user_id}/saved-recipients",
            json=payload.model_dump(by_alias=True),
        )
        try:
            return SavedRecipientSchema.model_validate(response.json()).to_domain()
        except (SchemaValidationError, ValueError) as e:
            raise RemoteServiceError(f"Invalid recipient data from bank: {e}") from e

    async def delete_recipient(self, user_id: str, recipient_iban: str) -> None:
        await self._request(
            "delete_recipient", "DELETE", f"/users/{user_id}/saved-recipients/{recipient_iban}"
        )

    async def delete_account(self, user_id: str) -> None:
        await self._request("delete_account", "DELETE", f"/users/{user_id}")

    @staticmethod
    def _parse_account(response: httpx.Response) -> Account:
        try:
            return AccountSchema.model_validate(response.json()).to_domain()
        except (SchemaValidationError, ValueError) as e:
            raise RemoteServiceError(f"Invalid account data from bank: {e}") from e
