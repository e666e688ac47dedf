from datetime import datetime, timedelta, timezone

import httpx
import pytest
import pytest_asyncio

from otp_reset.domain.errors import DeliveryError
from otp_reset.services import otp_ledger
from otp_reset.services.otp_ledger import OtpLedger
from otp_reset.services.password_reset import PasswordResetService
from otp_reset.services.verification_gate import VerificationGate


class CapturingSender:
    """Records delivered codes instead of mailing them."""

    def __init__(self):
        self.sent: list[tuple[str, str]] = []
        self.fail_with: Exception | None = None

    async def send_otp(self, identity: str, code: str) -> None:
        if self.fail_with is not None:
            raise self.fail_with
        self.sent.append((identity, code))

    def last_code(self, identity: str) -> str:
        return [c for (i, c) in self.sent if i == identity][-1]


class RecordingCredentialStore:
    def __init__(self):
        self.updates: list[tuple[str, str]] = []

    async def update_password(self, identity: str, new_password: str) -> None:
        self.updates.append((identity, new_password))


class FrozenClock:
    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kw) -> None:
        self.now = self.now + timedelta(**kw)


@pytest.fixture
def clock(monkeypatch):
    c = FrozenClock(datetime(2026, 1, 15, 12, 0, tzinfo=timezone.utc))
    monkeypatch.setattr(otp_ledger, "_now_utc", c)
    return c


@pytest.fixture
def sender():
    return CapturingSender()


@pytest.fixture
def credentials():
    return RecordingCredentialStore()


@pytest.fixture
def ledger(sender):
    return OtpLedger(notifier=sender)


@pytest.fixture
def gate(credentials):
    return VerificationGate(credentials)


@pytest.fixture
def service(ledger, gate):
    return PasswordResetService(ledger, gate)


@pytest_asyncio.fixture
async def client(service):
    from otp_reset.main import create_app

    app = create_app(reset_service=service)
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


# ---------- helpers ----------
async def verified(service: PasswordResetService, sender: CapturingSender, email: str) -> None:
    await service.request_challenge(email)
    await service.verify_challenge(email, sender.last_code(email.strip().lower()))


def smtp_down() -> DeliveryError:
    return DeliveryError("connection refused")
