from __future__ import annotations
import logging
from typing import Protocol

log = logging.getLogger(__name__)


class CredentialStore(Protocol):
    async def update_password(self, identity: str, new_password: str) -> None:
        ...


class LoggingCredentialStore:
    """Placeholder store: records the reset in the log and persists nothing.

    Pass a real implementation (hashing + user table) to ``create_app`` to
    make resets take effect.
    """

    async def update_password(self, identity: str, new_password: str) -> None:
        log.info("password reset for %s", identity, extra={"identity": identity})
