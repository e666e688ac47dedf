from __future__ import annotations
import asyncio
import logging
from collections.abc import MutableSet
from typing import Optional

from ..domain.errors import CredentialStoreError, Unauthorized, ValidationError, WeakPassword
from ..observability.metrics import PASSWORD_RESET
from .credential_store import CredentialStore
from .password_policy import POLICY_MESSAGE, meets_password_policy

log = logging.getLogger(__name__)


class VerificationGate:
    """Identities that proved OTP ownership and may reset their password once.

    A grant has no expiry; it lives until a successful reset or ``revoke``.
    """

    def __init__(
        self,
        credential_store: CredentialStore,
        verified: Optional[MutableSet[str]] = None,
    ) -> None:
        self._credentials = credential_store
        self._verified: MutableSet[str] = verified if verified is not None else set()
        self._lock = asyncio.Lock()

    def is_granted(self, identity: str) -> bool:
        return identity in self._verified

    async def grant(self, identity: str) -> None:
        async with self._lock:
            self._verified.add(identity)

    async def revoke(self, identity: str) -> None:
        async with self._lock:
            self._verified.discard(identity)

    async def reset_password(self, identity: str, new_password: str) -> None:
        identity = identity.strip()
        new_password = new_password.strip()
        if not identity or not new_password:
            PASSWORD_RESET.labels(result="invalid").inc()
            raise ValidationError("email and new password are required")

        async with self._lock:
            if identity not in self._verified:
                PASSWORD_RESET.labels(result="unauthorized").inc()
                raise Unauthorized("OTP has not been verified for this email")

            # a rejected password keeps the grant so the user can retry
            if not meets_password_policy(new_password):
                PASSWORD_RESET.labels(result="weak").inc()
                raise WeakPassword(POLICY_MESSAGE)

            self._verified.discard(identity)

        try:
            await self._credentials.update_password(identity, new_password)
        except Exception as e:
            # the password did not change, so the grant is still owed
            async with self._lock:
                self._verified.add(identity)
            PASSWORD_RESET.labels(result="store_error").inc()
            raise CredentialStoreError(str(e)) from e

        PASSWORD_RESET.labels(result="ok").inc()
        log.info("password reset completed", extra={"identity": identity})
