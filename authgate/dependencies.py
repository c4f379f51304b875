"""Request dependencies: service lookup and authentication guards."""

import logging

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from authgate.database import get_db
from authgate.errors import Forbidden, InvalidToken, TokenRequired, Unauthorized, UserNotFound
from authgate.models.user import User
from authgate.services.auth import AuthService

logger = logging.getLogger("authgate")


def get_auth_service(request: Request) -> AuthService:
    """Return the AuthService built by the application factory."""
    return request.app.state.auth_service


def get_current_user(
    request: Request,
    db: Session = Depends(get_db),
    auth_service: AuthService = Depends(get_auth_service),
) -> User:
    """Resolve the Bearer token to a stored user. Raises 401 if missing or invalid."""
    auth_header = request.headers.get("Authorization", "")
    if not auth_header.startswith("Bearer ") or not auth_header[7:].strip():
        raise TokenRequired()

    payload = auth_service.verify_token(auth_header[7:].strip())

    try:
        user_id = int(payload["userId"])
    except (TypeError, ValueError) as e:
        raise InvalidToken() from e

    user = auth_service.get_user_by_id(db, user_id)
    if not user:
        logger.warning("Token for unknown user %s", user_id)
        raise UserNotFound(status_code=401)

    request.state.user = user
    return user


def require_email_verification(request: Request) -> User:
    """Allow only users who completed email verification.

    Must run after get_current_user, which attaches the user to request.state.
    """
    current = getattr(request.state, "user", None)
    if current is None:
        raise Unauthorized()
    if not current.is_email_verified:
        raise Forbidden()
    return current
