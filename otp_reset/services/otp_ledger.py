from __future__ import annotations
import asyncio
import logging
import secrets
from collections.abc import MutableMapping
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional, Protocol

from ..domain.errors import (
    ChallengeExpired,
    ChallengeNotFound,
    CodeMismatch,
    DeliveryError,
    ValidationError,
)
from ..observability.metrics import OTP_ISSUED, OTP_SWEPT, OTP_VERIFY

log = logging.getLogger(__name__)

OTP_TTL = timedelta(minutes=5)
CODE_MIN = 100000
CODE_SPACE = 900000  # 100000..999999


class OtpNotifier(Protocol):
    async def send_otp(self, identity: str, code: str) -> None:
        ...


@dataclass(frozen=True)
class Challenge:
    code: str
    expires_at: datetime

    def is_expired(self, now: datetime) -> bool:
        return now > self.expires_at


def _now_utc() -> datetime:
    return datetime.now(timezone.utc)


def generate_code() -> str:
    return str(CODE_MIN + secrets.randbelow(CODE_SPACE))


class OtpLedger:
    """Outstanding OTP challenges, at most one per identity.

    Issuing overwrites, a successful verify consumes, an expired challenge is
    dropped when someone tries to verify against it. Every check-then-mutate
    step runs under one lock with no await in between, so a code can only be
    consumed once even with concurrent requests.
    """

    def __init__(
        self,
        notifier: OtpNotifier,
        store: Optional[MutableMapping[str, Challenge]] = None,
    ) -> None:
        self._notifier = notifier
        self._store: MutableMapping[str, Challenge] = store if store is not None else {}
        self._lock = asyncio.Lock()

    def __len__(self) -> int:
        return len(self._store)

    def has_challenge(self, identity: str) -> bool:
        return identity in self._store

    async def issue(self, identity: str) -> None:
        if not identity:
            raise ValidationError("email is required")

        code = generate_code()
        async with self._lock:
            self._store[identity] = Challenge(code=code, expires_at=_now_utc() + OTP_TTL)
        OTP_ISSUED.inc()
        log.info("otp issued", extra={"identity": identity})

        # The challenge stays on record even if delivery fails.
        try:
            await self._notifier.send_otp(identity, code)
        except DeliveryError:
            raise
        except Exception as e:
            raise DeliveryError(str(e)) from e

    async def verify(self, identity: str, submitted_code: str) -> None:
        async with self._lock:
            challenge = self._store.get(identity)
            if challenge is None:
                OTP_VERIFY.labels(result="not_found").inc()
                raise ChallengeNotFound("no OTP was sent to this email")

            if challenge.is_expired(_now_utc()):
                del self._store[identity]
                OTP_VERIFY.labels(result="expired").inc()
                raise ChallengeExpired("OTP has expired")

            if submitted_code != challenge.code:
                OTP_VERIFY.labels(result="mismatch").inc()
                raise CodeMismatch("OTP is incorrect")

            del self._store[identity]
        OTP_VERIFY.labels(result="ok").inc()
        log.info("otp verified", extra={"identity": identity})

    async def sweep_expired(self) -> int:
        now = _now_utc()
        async with self._lock:
            stale = [k for k, c in self._store.items() if c.is_expired(now)]
            for k in stale:
                del self._store[k]
        if stale:
            OTP_SWEPT.inc(len(stale))
        return len(stale)
