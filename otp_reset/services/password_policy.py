from __future__ import annotations
import re

MIN_LENGTH = 8

POLICY_MESSAGE = "new password must be at least 8 characters with 1 uppercase letter and 1 digit"

_UPPER = re.compile(r"[A-Z]")
_DIGIT = re.compile(r"[0-9]")


def meets_password_policy(password: str) -> bool:
    return (
        len(password) >= MIN_LENGTH
        and _UPPER.search(password) is not None
        and _DIGIT.search(password) is not None
    )
