"""Authentication API endpoints."""

import logging

from fastapi import APIRouter, Depends, Path, Request
from fastapi.responses import JSONResponse, Response
from sqlalchemy.orm import Session

from authgate import messages
from authgate.config import get_settings
from authgate.database import get_db
from authgate.dependencies import get_auth_service, get_current_user, require_email_verification
from authgate.errors import AuthError
from authgate.models.user import User
from authgate.rate_limit import limiter
from authgate.response import error_response, success_response
from authgate.schemas.auth import (
    MAX_ID,
    EmailRequest,
    ResetPasswordRequest,
    SigninRequest,
    SignupRequest,
    VerifyOtpRequest,
)
from authgate.schemas.user import to_public_user
from authgate.services.auth import AuthService
from authgate.uploads import SignupForm, parse_signup_form

logger = logging.getLogger("authgate")

settings = get_settings()

router = APIRouter(prefix="/api/auth", tags=["Authentication"])

_SIGNUP_BODY = {
    "requestBody": {
        "required": True,
        "content": {
            "application/json": {"schema": SignupRequest.model_json_schema()},
            "multipart/form-data": {
                "schema": {
                    "type": "object",
                    "required": ["name", "email", "password"],
                    "properties": {
                        "name": {"type": "string"},
                        "email": {"type": "string", "format": "email"},
                        "password": {"type": "string"},
                        "phone": {"type": "string"},
                        "address": {"type": "string"},
                        "country": {"type": "string"},
                        "displayPicture": {"type": "string", "format": "binary"},
                    },
                }
            },
        },
    }
}


def _base_url(request: Request) -> str:
    return request.app.state.settings.BASE_URL


def _fail(exc: AuthError, status_code: int) -> JSONResponse:
    return error_response(status_code, exc.message)


@router.post("/signup", status_code=201, openapi_extra=_SIGNUP_BODY)
@limiter.limit(settings.RATE_LIMIT_AUTH)
def signup(
    request: Request,
    form: SignupForm = Depends(parse_signup_form),
    db: Session = Depends(get_db),
    auth_service: AuthService = Depends(get_auth_service),
) -> JSONResponse:
    """Register a new user and email an OTP to verify the address."""
    body = form.body
    try:
        result = auth_service.signup(
            db,
            name=body.name,
            email=body.email,
            password=body.password,
            phone=body.phone,
            address=body.address,
            country=body.country,
            display_picture=form.display_picture,
        )
    except AuthError as e:
        logger.warning("Signup error: %s", e.message)
        return _fail(e, 400)

    return success_response(
        201,
        messages.USER_REGISTERED,
        {"user": to_public_user(result.user, _base_url(request)), "token": result.token},
    )


@router.post("/signin")
@limiter.limit(settings.RATE_LIMIT_AUTH)
def signin(
    request: Request,
    body: SigninRequest,
    db: Session = Depends(get_db),
    auth_service: AuthService = Depends(get_auth_service),
) -> JSONResponse:
    """Check credentials and start the login OTP step."""
    try:
        result = auth_service.signin(db, body.email, body.password)
    except AuthError as e:
        logger.warning("Signin error: %s", e.message)
        return _fail(e, 401)

    data: dict = {"userId": result.user_id}
    if request.app.state.settings.EXPOSE_SIGNIN_OTP:
        data["otp"] = result.otp
    return success_response(200, messages.OTP_GENERATED, data)


@router.post("/forgot-password")
@limiter.limit(settings.RATE_LIMIT_PASSWORD_RESET)
def forgot_password(
    request: Request,
    body: EmailRequest,
    db: Session = Depends(get_db),
    auth_service: AuthService = Depends(get_auth_service),
) -> JSONResponse:
    """Email a reset link. The response never reveals whether the account exists."""
    try:
        auth_service.request_password_reset(db, body.email)
    except AuthError as e:
        logger.error("Forgot password error: %s", e.message)
        return error_response(500, messages.PASSWORD_RESET_REQUEST_FAILED)

    return success_response(200, messages.PASSWORD_RESET_REQUESTED)


@router.post("/reset-password")
def reset_password(
    request: Request,
    body: ResetPasswordRequest,
    db: Session = Depends(get_db),
    auth_service: AuthService = Depends(get_auth_service),
) -> JSONResponse:
    """Set a new password using a valid reset token."""
    try:
        auth_service.reset_password(db, body.token, body.new_password)
    except AuthError as e:
        logger.warning("Reset password error: %s", e.message)
        return _fail(e, 400)

    return success_response(200, messages.PASSWORD_RESET_SUCCESS)


@router.post("/generate-otp")
@limiter.limit(settings.RATE_LIMIT_OTP)
def generate_otp(
    request: Request,
    body: EmailRequest,
    db: Session = Depends(get_db),
    auth_service: AuthService = Depends(get_auth_service),
) -> JSONResponse:
    """Issue a fresh OTP and email it."""
    try:
        auth_service.generate_otp(db, body.email)
    except AuthError as e:
        logger.warning("Generate OTP error: %s", e.message)
        return _fail(e, 400)

    return success_response(200, messages.OTP_SENT)


@router.post("/verify-otp")
def verify_otp(
    request: Request,
    body: VerifyOtpRequest,
    db: Session = Depends(get_db),
    auth_service: AuthService = Depends(get_auth_service),
) -> JSONResponse:
    """Verify the pending OTP and receive a session token."""
    try:
        result = auth_service.verify_otp(db, body.user_id, body.otp)
    except AuthError as e:
        logger.warning("Verify OTP error: %s", e.message)
        return _fail(e, 400)

    return success_response(
        200,
        messages.OTP_VERIFIED,
        {"token": result.token, "user": to_public_user(result.user, _base_url(request))},
    )


@router.get("/display-picture/{user_id}")
def get_display_picture(
    user_id: int = Path(gt=0, le=MAX_ID),
    db: Session = Depends(get_db),
    auth_service: AuthService = Depends(get_auth_service),
) -> Response:
    """Return the raw image bytes of a user's display picture."""
    user = auth_service.get_user_by_id(db, user_id)
    if not user or not user.display_picture_content_type or not user.display_picture:
        return error_response(404, messages.DISPLAY_PICTURE_NOT_FOUND)
    return Response(content=user.display_picture, media_type=user.display_picture_content_type)


@router.get("/me", dependencies=[Depends(get_current_user)])
def me(request: Request, user: User = Depends(require_email_verification)) -> JSONResponse:
    """Return the authenticated, email-verified caller."""
    return success_response(200, messages.USER_RETRIEVED, {"user": to_public_user(user, _base_url(request))})
