"""User model."""

from datetime import datetime

from sqlalchemy import Boolean, Column, DateTime, Integer, LargeBinary, String
from sqlalchemy.orm import deferred

from authgate.database import Base

# Columns left out of default reads; load them with UserStore(select=...).
SECRET_FIELDS = (
    "password_hash",
    "otp",
    "otp_expires_at",
    "reset_password_token",
    "reset_password_expires_at",
)


class User(Base):
    """Application user."""

    __tablename__ = "user"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(50), nullable=False)
    email = Column(String(256), unique=True, nullable=False, index=True)
    password_hash = deferred(Column(String(256), nullable=False))
    phone = Column(String(20), nullable=True)
    address = Column(String(200), nullable=True)
    country = Column(String(100), nullable=True)
    display_picture = deferred(Column(LargeBinary, nullable=True))
    display_picture_content_type = Column(String(64), nullable=True)
    is_email_verified = Column(Boolean, nullable=False, default=False)
    otp = deferred(Column(String(6), nullable=True))
    otp_expires_at = deferred(Column(DateTime, nullable=True))
    reset_password_token = deferred(Column(String(128), nullable=True, index=True))
    reset_password_expires_at = deferred(Column(DateTime, nullable=True))
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)
