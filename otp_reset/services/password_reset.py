from __future__ import annotations
from typing import Optional

from ..domain.errors import ValidationError
from .otp_ledger import OtpLedger
from .verification_gate import VerificationGate


def normalize_identity(email: Optional[str]) -> str:
    return (email or "").strip().lower()


class PasswordResetService:
    """Request-level entry point: normalizes input and drives ledger + gate."""

    def __init__(self, ledger: OtpLedger, gate: VerificationGate) -> None:
        self.ledger = ledger
        self.gate = gate

    async def request_challenge(self, email: Optional[str]) -> None:
        identity = normalize_identity(email)
        if not identity:
            raise ValidationError("email is required")
        await self.ledger.issue(identity)

    async def verify_challenge(self, email: Optional[str], otp: Optional[str]) -> None:
        identity = normalize_identity(email)
        code = (otp or "").strip()
        if not identity or not code:
            raise ValidationError("email and OTP are required")
        await self.ledger.verify(identity, code)
        await self.gate.grant(identity)

    async def reset_password(self, email: Optional[str], new_password: Optional[str]) -> None:
        identity = normalize_identity(email)
        await self.gate.reset_password(identity, (new_password or "").strip())
