"""Authentication service.

Owns the signup / signin / OTP / password reset flows. A user moves between
these states through the ``otp`` and ``reset_password_token`` column pairs:

- unverified, OTP pending: right after signup
- verified, no OTP: after a successful ``verify_otp``
- verified, OTP pending: after ``signin``, until the login OTP is verified
- reset pending: after ``request_password_reset``, orthogonal to the above

Concurrent requests against the same user are last-write-wins; a second
signin simply replaces the pending OTP.
"""

import logging
import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any

from sqlalchemy.orm import Session

from authgate.config import Settings, get_settings
from authgate.errors import (
    EmailAlreadyExists,
    EmailSendFailed,
    InvalidCredentials,
    InvalidOtp,
    InvalidToken,
    OtpExpired,
    OtpNotFound,
    UserNotFound,
)
from authgate.models.user import User
from authgate.services.codes import generate_otp, generate_reset_token, is_expired
from authgate.services.jwt import JWTService
from authgate.services.mailer import Mailer
from authgate.services.user_store import UserStore, check_password

logger = logging.getLogger("authgate")


@dataclass
class DisplayPicture:
    data: bytes
    content_type: str


@dataclass
class AuthResult:
    """A user together with a freshly minted session token."""

    user: User
    token: str


@dataclass
class SigninResult:
    user_id: int
    otp: str


class AuthService:
    """Handles registration, login second factor, and password recovery."""

    def __init__(
        self,
        store: UserStore | None = None,
        mailer: Mailer | None = None,
        jwt_service: JWTService | None = None,
        settings: Settings | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.store = store or UserStore()
        self.mailer = mailer or Mailer(self.settings)
        self.jwt = jwt_service or JWTService(self.settings)

    def _issue_otp(self, db: Session, user: User, expires_minutes: int) -> str:
        otp = generate_otp()
        user.otp = otp
        user.otp_expires_at = datetime.utcnow() + timedelta(minutes=expires_minutes)
        self.store.save(db, user)
        return otp

    def _send_otp_quietly(self, email: str, otp: str, expires_minutes: int) -> None:
        try:
            self.mailer.send_otp_email(email, otp, expires_minutes)
        except EmailSendFailed:
            logger.warning("Failed to send OTP email to %s", email, exc_info=True)

    def signup(
        self,
        db: Session,
        name: str,
        email: str,
        password: str,
        phone: str | None = None,
        address: str | None = None,
        country: str | None = None,
        display_picture: DisplayPicture | None = None,
    ) -> AuthResult:
        """Create an unverified account, send its email OTP, and return a session token."""
        if self.store.find_by_email(db, email):
            raise EmailAlreadyExists()

        user = self.store.create(
            db,
            name=name,
            email=email,
            password=password,
            phone=phone,
            address=address,
            country=country,
            display_picture=display_picture.data if display_picture else None,
            display_picture_content_type=display_picture.content_type if display_picture else None,
        )

        window = self.settings.OTP_EXPIRES_MINUTES
        otp = self._issue_otp(db, user, window)
        self._send_otp_quietly(user.email, otp, window)

        logger.info("User %s registered", user.id)
        return AuthResult(user=user, token=self.jwt.create_token(user.id))

    def signin(self, db: Session, email: str, password: str) -> SigninResult:
        """Check the password and start the login second factor.

        Unknown email and wrong password raise the same error.
        """
        user = self.store.find_by_email(db, email, select=("password_hash",))
        if not user or not check_password(password, user.password_hash):
            raise InvalidCredentials()

        window = self.settings.SIGNIN_OTP_EXPIRES_MINUTES
        otp = self._issue_otp(db, user, window)
        self._send_otp_quietly(user.email, otp, window)

        return SigninResult(user_id=user.id, otp=otp)

    def verify_otp(self, db: Session, user_id: int, otp: str) -> AuthResult:
        """Consume the pending OTP, mark the email verified, and mint a token."""
        user = self.store.find_by_id(db, user_id, select=("otp", "otp_expires_at"))
        if not user:
            raise UserNotFound()

        if not user.otp or not user.otp_expires_at:
            raise OtpNotFound()

        if is_expired(user.otp_expires_at):
            raise OtpExpired()

        if not secrets.compare_digest(user.otp.encode(), otp.encode()):
            raise InvalidOtp()

        user.is_email_verified = True
        user.otp = None
        user.otp_expires_at = None
        self.store.save(db, user)

        token = self.jwt.create_token(user.id)

        try:
            self.mailer.send_welcome_email(user.email, user.name)
        except EmailSendFailed:
            logger.warning("Failed to send welcome email to %s", user.email, exc_info=True)

        return AuthResult(user=user, token=token)

    def request_password_reset(self, db: Session, email: str) -> None:
        """Issue a reset token and email it.

        Unknown emails return silently so callers cannot enumerate accounts.
        A failed send raises EmailSendFailed.
        """
        user = self.store.find_by_email(db, email)
        if not user:
            return

        token = generate_reset_token()
        user.reset_password_token = token
        user.reset_password_expires_at = datetime.utcnow() + timedelta(
            minutes=self.settings.RESET_TOKEN_EXPIRES_MINUTES
        )
        self.store.save(db, user)

        self.mailer.send_password_reset_email(user.email, token)

    def reset_password(self, db: Session, token: str, new_password: str) -> None:
        """Set a new password for the holder of an unexpired reset token."""
        user = self.store.find_by_reset_token(db, token)
        if not user:
            raise InvalidToken()

        self.store.set_password(db, user, new_password)
        user.reset_password_token = None
        user.reset_password_expires_at = None
        self.store.save(db, user)
        logger.info("Password reset for user %s", user.id)

    def generate_otp(self, db: Session, email: str) -> None:
        """Replace any pending OTP with a new one. A failed send raises EmailSendFailed."""
        user = self.store.find_by_email(db, email)
        if not user:
            raise UserNotFound()

        window = self.settings.OTP_EXPIRES_MINUTES
        otp = self._issue_otp(db, user, window)
        self.mailer.send_otp_email(user.email, otp, window)

    def get_user_by_id(self, db: Session, user_id: int) -> User | None:
        return self.store.find_by_id(db, user_id)

    def verify_token(self, token: str) -> dict[str, Any]:
        return self.jwt.decode_token(token)
