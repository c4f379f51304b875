"""JWT Token Service."""

from datetime import datetime, timedelta
from typing import Any

from jose import JWTError, jwt

from authgate.config import Settings, get_settings
from authgate.errors import InvalidToken


class JWTService:
    """Handles JWT token creation and validation."""

    def __init__(self, settings: Settings | None = None) -> None:
        settings = settings or get_settings()
        self.secret_key = settings.JWT_SECRET_KEY
        self.algorithm = settings.JWT_ALGORITHM
        self.expire_minutes = settings.JWT_EXPIRE_MINUTES

    def create_token(self, user_id: int) -> str:
        """Create a signed session token bound to the given user."""
        issued_at = datetime.utcnow()
        payload = {
            "sub": str(user_id),
            "userId": user_id,
            "iat": issued_at,
            "exp": issued_at + timedelta(minutes=self.expire_minutes),
        }
        return jwt.encode(payload, self.secret_key, algorithm=self.algorithm)

    def decode_token(self, token: str) -> dict[str, Any]:
        """Decode and validate a JWT token. Raises InvalidToken if the signature or expiry is bad."""
        try:
            payload = jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
        except JWTError as e:
            raise InvalidToken() from e
        if "userId" not in payload:
            raise InvalidToken()
        return payload
