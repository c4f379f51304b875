"""Persistence adapter for user records.

Passwords are hashed here, on write, so callers never hand a plain password
to the ORM. Secret columns are deferred on the model and only loaded when a
lookup names them in ``select``.
"""

from collections.abc import Iterable
from datetime import datetime

import bcrypt
from sqlalchemy.orm import Query, Session, undefer

from authgate.models.user import User


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def check_password(password: str, password_hash: str | None) -> bool:
    if not password_hash:
        return False
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        return False


def normalize_email(email: str) -> str:
    return email.strip().lower()


class UserStore:
    """Find and save users in the relational store."""

    def _query(self, db: Session, select: Iterable[str] = ()) -> Query:
        query = db.query(User)
        for field in select:
            query = query.options(undefer(getattr(User, field)))
        return query

    def find_by_email(self, db: Session, email: str, select: Iterable[str] = ()) -> User | None:
        """Case-insensitive lookup by email."""
        return self._query(db, select).filter(User.email == normalize_email(email)).first()

    def find_by_id(self, db: Session, user_id: int, select: Iterable[str] = ()) -> User | None:
        return self._query(db, select).filter(User.id == user_id).first()

    def find_by_reset_token(self, db: Session, token: str, now: datetime | None = None) -> User | None:
        """Return the user holding ``token`` only while it is unexpired."""
        now = now or datetime.utcnow()
        return (
            self._query(db, ("reset_password_token", "reset_password_expires_at"))
            .filter(User.reset_password_token == token, User.reset_password_expires_at > now)
            .first()
        )

    def create(
        self,
        db: Session,
        *,
        name: str,
        email: str,
        password: str,
        phone: str | None = None,
        address: str | None = None,
        country: str | None = None,
        display_picture: bytes | None = None,
        display_picture_content_type: str | None = None,
    ) -> User:
        """Insert a new user, hashing the password before it is stored."""
        user = User(
            name=name.strip(),
            email=normalize_email(email),
            password_hash=hash_password(password),
            phone=phone,
            address=address,
            country=country,
            display_picture=display_picture,
            display_picture_content_type=display_picture_content_type if display_picture else None,
            is_email_verified=False,
        )
        db.add(user)
        return self.save(db, user)

    def set_password(self, db: Session, user: User, new_password: str) -> None:
        """Replace the stored hash; the caller saves."""
        user.password_hash = hash_password(new_password)

    def save(self, db: Session, user: User) -> User:
        db.commit()
        db.refresh(user)
        return user
