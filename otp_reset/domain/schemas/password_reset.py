from __future__ import annotations
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


# Fields are optional so a missing value reaches the service as empty
# and is reported as a 400, not a 422.
class SendOtpIn(BaseModel):
    email: Optional[str] = None


class VerifyOtpIn(BaseModel):
    email: Optional[str] = None
    otp: Optional[str] = None


class ResetPasswordIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    email: Optional[str] = None
    new_password: Optional[str] = Field(default=None, alias="newPassword")


class MessageOut(BaseModel):
    message: str
