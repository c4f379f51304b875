"""Typed errors raised by the service layer and request guards."""

from authgate import messages


class AuthError(Exception):
    """Base error carrying a user-facing message and a default HTTP status."""

    status_code = 500
    default_message = messages.INTERNAL_SERVER_ERROR

    def __init__(self, message: str | None = None, status_code: int | None = None) -> None:
        self.message = message or self.default_message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.message)


class ValidationFailed(AuthError):
    status_code = 400
    default_message = messages.VALIDATION_FAILED

    def __init__(self, message: str | None = None, errors: list[dict] | None = None) -> None:
        super().__init__(message)
        self.errors = errors or []


class EmailAlreadyExists(AuthError):
    status_code = 400
    default_message = messages.EMAIL_ALREADY_EXISTS


class InvalidCredentials(AuthError):
    status_code = 401
    default_message = messages.INVALID_CREDENTIALS


class TokenRequired(AuthError):
    status_code = 401
    default_message = messages.TOKEN_REQUIRED


class InvalidToken(AuthError):
    status_code = 401
    default_message = messages.INVALID_TOKEN


class Unauthorized(AuthError):
    status_code = 401
    default_message = messages.UNAUTHORIZED


class Forbidden(AuthError):
    status_code = 403
    default_message = messages.FORBIDDEN


class UserNotFound(AuthError):
    status_code = 404
    default_message = messages.USER_NOT_FOUND


class OtpNotFound(AuthError):
    status_code = 400
    default_message = messages.OTP_NOT_FOUND


class OtpExpired(AuthError):
    status_code = 400
    default_message = messages.OTP_EXPIRED


class InvalidOtp(AuthError):
    status_code = 400
    default_message = messages.INVALID_OTP


class EmailSendFailed(AuthError):
    status_code = 500
    default_message = messages.EMAIL_SEND_FAILED


class UploadRejected(AuthError):
    status_code = 400
    default_message = messages.DISPLAY_PICTURE_TYPE
