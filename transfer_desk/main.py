"""Client core factory"""

from transfer_desk.config import settings
from transfer_desk.infrastructure.clients.bank import BankClient
from transfer_desk.infrastructure.observability.logging import setup_logging
from transfer_desk.session.controller import SessionController


def create_controller(client: BankClient | None = None) -> SessionController:
    """
    Configure logging and build a SessionController wired to settings.

    Presentation layers call this once at startup, then drive the returned
    controller (login, activity events, dashboard actions).
    """
    setup_logging(settings.log_level)
    return SessionController(client=client or BankClient())
