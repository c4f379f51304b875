"""One-time passcode and reset token generation."""

import secrets
from datetime import datetime

OTP_LENGTH = 6


def generate_otp() -> str:
    """Return a 6-digit numeric code, uniform over 000000-999999."""
    return str(secrets.randbelow(10**OTP_LENGTH)).zfill(OTP_LENGTH)


def generate_reset_token() -> str:
    """Return a 64-character lowercase hex token."""
    return secrets.token_hex(32)


def is_expired(expires_at: datetime | None, now: datetime | None = None) -> bool:
    """A missing expiry counts as expired."""
    if expires_at is None:
        return True
    return expires_at < (now or datetime.utcnow())
