"""Pydantic schemas for authentication endpoints."""

import re

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

_PHONE_RE = re.compile(r"^[0-9+\-\s()]+$")
_COUNTRY_RE = re.compile(r"^[a-zA-Z\s-]+$")
_OTP_RE = re.compile(r"^\d{6}$")

# bcrypt only hashes the first 72 bytes and refuses longer input.
MAX_PASSWORD_BYTES = 72
MAX_ID = 2**63 - 1


def _normalize_email(value: str) -> str:
    return value.strip().lower()


def _check_password(value: str) -> str:
    if len(value) < 6:
        raise ValueError("Password must be at least 6 characters")
    if len(value.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise ValueError(f"Password must not exceed {MAX_PASSWORD_BYTES} bytes")
    if not any(ch.isdigit() for ch in value):
        raise ValueError("Password must contain at least one number")
    return value


def _blank_to_none(value):
    if isinstance(value, str):
        value = value.strip()
        return value or None
    return value


class SignupRequest(BaseModel):
    name: str
    email: EmailStr
    password: str
    phone: str | None = None
    address: str | None = None
    country: str | None = None

    @field_validator("name")
    @classmethod
    def check_name(cls, v: str) -> str:
        v = v.strip()
        if not 2 <= len(v) <= 50:
            raise ValueError("Name must be between 2 and 50 characters")
        return v

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, v):
        return _normalize_email(v) if isinstance(v, str) else v

    @field_validator("password")
    @classmethod
    def check_password(cls, v: str) -> str:
        return _check_password(v)

    @field_validator("phone", "address", "country", mode="before")
    @classmethod
    def strip_optional(cls, v):
        return _blank_to_none(v)

    @field_validator("phone")
    @classmethod
    def check_phone(cls, v: str | None) -> str | None:
        if v is None:
            return v
        if not 6 <= len(v) <= 20:
            raise ValueError("Phone must be between 6 and 20 characters")
        if not _PHONE_RE.match(v):
            raise ValueError("Phone must contain only numbers, spaces, and valid characters (+, -, (), spaces)")
        return v

    @field_validator("address")
    @classmethod
    def check_address(cls, v: str | None) -> str | None:
        if v is not None and len(v) > 200:
            raise ValueError("Address must not exceed 200 characters")
        return v

    @field_validator("country")
    @classmethod
    def check_country(cls, v: str | None) -> str | None:
        if v is None:
            return v
        if len(v) > 100:
            raise ValueError("Country must not exceed 100 characters")
        if not _COUNTRY_RE.match(v):
            raise ValueError("Country must contain only letters, spaces, and hyphens")
        return v


class SigninRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1)

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, v):
        return _normalize_email(v) if isinstance(v, str) else v


class EmailRequest(BaseModel):
    """Body for forgot-password and generate-otp."""

    email: EmailStr

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, v):
        return _normalize_email(v) if isinstance(v, str) else v


class ResetPasswordRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    token: str = Field(min_length=1)
    new_password: str = Field(alias="newPassword")

    @field_validator("new_password")
    @classmethod
    def check_password(cls, v: str) -> str:
        return _check_password(v)


class VerifyOtpRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    user_id: int = Field(alias="userId", gt=0, le=MAX_ID)
    otp: str

    @field_validator("otp", mode="before")
    @classmethod
    def check_otp(cls, v):
        v = str(v).strip() if v is not None else ""
        if not _OTP_RE.match(v):
            raise ValueError("OTP must be a 6-digit number")
        return v

