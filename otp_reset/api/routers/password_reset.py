from __future__ import annotations
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request, status

from ...domain.errors import (
    ChallengeExpired,
    ChallengeNotFound,
    CodeMismatch,
    CredentialStoreError,
    DeliveryError,
    Unauthorized,
    ValidationError,
    WeakPassword,
)
from ...domain.schemas.password_reset import MessageOut, ResetPasswordIn, SendOtpIn, VerifyOtpIn
from ...services.password_reset import PasswordResetService

router = APIRouter(prefix="/api", tags=["password-reset"])
log = logging.getLogger(__name__)


def get_reset_service(request: Request) -> PasswordResetService:
    return request.app.state.reset_service


def _bad_request(e: Exception) -> HTTPException:
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


# Bodies are optional: a request without JSON is a missing field (400), not a 422.

@router.post("/send-otp", response_model=MessageOut)
async def send_otp(payload: Optional[SendOtpIn] = None, svc: PasswordResetService = Depends(get_reset_service)):
    payload = payload or SendOtpIn()
    try:
        await svc.request_challenge(payload.email)
    except ValidationError as e:
        raise _bad_request(e)
    except DeliveryError:
        log.exception("send otp error")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="could not send email; check SMTP configuration",
        )
    return MessageOut(message="OTP sent to email")


@router.post("/verify-otp", response_model=MessageOut)
async def verify_otp(payload: Optional[VerifyOtpIn] = None, svc: PasswordResetService = Depends(get_reset_service)):
    payload = payload or VerifyOtpIn()
    try:
        await svc.verify_challenge(payload.email, payload.otp)
    except (ValidationError, ChallengeNotFound, ChallengeExpired, CodeMismatch) as e:
        raise _bad_request(e)
    return MessageOut(message="OTP verified")


@router.post("/reset-password", response_model=MessageOut)
async def reset_password(payload: Optional[ResetPasswordIn] = None, svc: PasswordResetService = Depends(get_reset_service)):
    payload = payload or ResetPasswordIn()
    try:
        await svc.reset_password(payload.email, payload.new_password)
    except (ValidationError, Unauthorized, WeakPassword) as e:
        raise _bad_request(e)
    except CredentialStoreError:
        log.exception("reset password store error")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="could not update password; try again",
        )
    return MessageOut(message="Password reset")
