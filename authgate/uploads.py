"""Signup body parsing and display picture constraints."""

from dataclasses import dataclass

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError
from starlette.datastructures import UploadFile

from authgate import messages
from authgate.errors import UploadRejected, ValidationFailed
from authgate.schemas.auth import SignupRequest
from authgate.services.auth import DisplayPicture

ALLOWED_IMAGE_TYPES = {"image/jpeg", "image/jpg", "image/png"}
DISPLAY_PICTURE_FIELD = "displayPicture"


@dataclass
class SignupForm:
    body: SignupRequest
    display_picture: DisplayPicture | None = None


async def read_display_picture(file: UploadFile, max_mb: int) -> DisplayPicture:
    """Read an uploaded image, enforcing type and size limits."""
    if file.content_type not in ALLOWED_IMAGE_TYPES:
        raise UploadRejected(messages.DISPLAY_PICTURE_TYPE)

    max_bytes = max_mb * 1024 * 1024
    data = await file.read(max_bytes + 1)
    if len(data) > max_bytes:
        raise UploadRejected(messages.DISPLAY_PICTURE_SIZE.format(max_mb=max_mb))
    return DisplayPicture(data=data, content_type=file.content_type)


async def parse_signup_form(request: Request) -> SignupForm:
    """Accept signup fields as JSON or multipart/form-data with an optional picture."""
    content_type = request.headers.get("content-type", "")
    picture = None

    if content_type.startswith(("multipart/form-data", "application/x-www-form-urlencoded")):
        form = await request.form()
        raw = {k: v for k, v in form.items() if not isinstance(v, UploadFile)}
        upload = form.get(DISPLAY_PICTURE_FIELD)
        if isinstance(upload, UploadFile) and upload.filename:
            picture = await read_display_picture(upload, request.app.state.settings.MAX_DISPLAY_PICTURE_MB)
    else:
        try:
            raw = await request.json()
        except ValueError:
            raw = None
        if not isinstance(raw, dict):
            raise ValidationFailed(errors=[{"field": "body", "message": "Request body must be a JSON object"}])

    try:
        body = SignupRequest.model_validate(raw)
    except ValidationError as e:
        raise RequestValidationError(e.errors(include_url=False)) from None

    return SignupForm(body=body, display_picture=picture)
