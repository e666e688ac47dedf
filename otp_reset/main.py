import asyncio
import contextlib
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from .config import get_settings
from .api.routers import health as health_router
from .api.routers import metrics as metrics_router
from .api.routers import password_reset as password_reset_router
from .observability.logging import setup_logging
from .middleware.request_context import RequestContextMiddleware
from .observability.metrics import MetricsHTTPMiddleware
from .services.credential_store import CredentialStore, LoggingCredentialStore
from .services.otp_ledger import OtpLedger
from .services.otp_sender import build_otp_sender
from .services.password_reset import PasswordResetService
from .services.verification_gate import VerificationGate
from .workers import challenge_sweeper
import uvicorn

settings = get_settings()
setup_logging()


def build_reset_service(credential_store: Optional[CredentialStore] = None) -> PasswordResetService:
    ledger = OtpLedger(notifier=build_otp_sender(settings))
    gate = VerificationGate(credential_store or LoggingCredentialStore())
    return PasswordResetService(ledger, gate)


@asynccontextmanager
async def lifespan(app: FastAPI):
    task = None
    if settings.CHALLENGE_SWEEP_INTERVAL_SEC > 0:
        task = asyncio.create_task(
            challenge_sweeper.run_forever(app.state.reset_service.ledger, settings.CHALLENGE_SWEEP_INTERVAL_SEC)
        )
    app.state.sweeper_task = task
    try:
        yield
    finally:
        if task is not None:
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task


def create_app(
    reset_service: Optional[PasswordResetService] = None,
    credential_store: Optional[CredentialStore] = None,
) -> FastAPI:
    app = FastAPI(title=settings.APP_NAME, debug=settings.DEBUG, lifespan=lifespan)

    # one ledger + gate per process, shared by every request
    app.state.reset_service = reset_service or build_reset_service(credential_store)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestContextMiddleware)
    app.add_middleware(MetricsHTTPMiddleware)

    app.include_router(health_router.router)
    app.include_router(password_reset_router.router)
    app.include_router(metrics_router.router)

    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run("otp_reset.main:app", host=settings.APP_HOST, port=settings.APP_PORT)
