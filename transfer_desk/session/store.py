"""Process-wide slot holding the signed-in account identity"""

from typing import Optional

from transfer_desk.domain.models import Account
from transfer_desk.infrastructure.clients.schemas import AccountSchema


class SessionStore:
    """
    Keeps the authenticated account serialized as JSON for the life of the
    process, so a controller can resume without logging in again.
    """

    def __init__(self) -> None:
        self._payload: Optional[str] = None

    def save(self, account: Account) -> None:
        self._payload = AccountSchema.from_domain(account).model_dump_json(by_alias=True)

    def load(self) -> Optional[Account]:
        if self._payload is None:
            return None
        return AccountSchema.model_validate_json(self._payload).to_domain()

    def clear(self) -> None:
        self._payload = None

    @property
    def occupied(self) -> bool:
        return self._payload is not None
