"""Public view of a user record."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from authgate.models.user import User


class DisplayPictureRef(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    url: str
    content_type: str


class UserPublic(BaseModel):
    """Fields safe to send to clients. Never carries the password or OTP/reset secrets."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: int
    name: str
    email: str
    phone: str | None = None
    address: str | None = None
    country: str | None = None
    is_email_verified: bool
    display_picture: DisplayPictureRef | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


def display_picture_url(base_url: str, user_id: int) -> str:
    return f"{base_url.rstrip('/')}/api/auth/display-picture/{user_id}"


def to_public_user(user: User, base_url: str) -> dict:
    """Project a stored user onto its client-facing JSON shape."""
    picture = None
    if user.display_picture_content_type:
        picture = DisplayPictureRef(
            url=display_picture_url(base_url, user.id),
            content_type=user.display_picture_content_type,
        )
    view = UserPublic(
        id=user.id,
        name=user.name,
        email=user.email,
        phone=user.phone,
        address=user.address,
        country=user.country,
        is_email_verified=bool(user.is_email_verified),
        display_picture=picture,
        created_at=user.created_at,
        updated_at=user.updated_at,
    )
    return view.model_dump(mode="json", by_alias=True)
