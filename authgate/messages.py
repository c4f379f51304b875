"""User-facing response messages."""

# Success
USER_REGISTERED = "User registered successfully. Please verify your email with the OTP sent."
OTP_GENERATED = "OTP generated successfully. Please verify to complete login."
OTP_VERIFIED = "OTP verified successfully. Login complete."
OTP_SENT = "OTP sent to your email"
PASSWORD_RESET_REQUESTED = "If the email exists, a password reset link has been sent"
PASSWORD_RESET_SUCCESS = "Password reset successfully"
USER_RETRIEVED = "User retrieved successfully"
SERVER_RUNNING = "Server is running"

# Authentication
INVALID_CREDENTIALS = "Invalid email or password"
INVALID_TOKEN = "Invalid or expired token"
TOKEN_EXPIRED = "Token has expired"
UNAUTHORIZED = "Unauthorized access"
FORBIDDEN = "Please verify your email to access this resource"
TOKEN_REQUIRED = "Authentication token is required"
EMAIL_ALREADY_EXISTS = "Email already exists"
DUPLICATE_KEY = "email already exists"
USER_NOT_FOUND = "User not found"
INVALID_OTP = "Invalid OTP"
OTP_EXPIRED = "OTP has expired"
OTP_NOT_FOUND = "No OTP found for this user"

# Validation
VALIDATION_FAILED = "Validation failed"
DISPLAY_PICTURE_TYPE = "Display picture must be JPG, JPEG, or PNG only"
DISPLAY_PICTURE_SIZE = "Display picture must not exceed {max_mb}MB"
DISPLAY_PICTURE_NOT_FOUND = "Display picture not found"

# General
INTERNAL_SERVER_ERROR = "Internal server error"
TOO_MANY_REQUESTS = "Too many requests, please try again later"
REQUEST_TOO_LARGE = "Request body too large"
ROUTE_NOT_FOUND = "Route {path} not found"
METHOD_NOT_ALLOWED = "Method {method} not allowed for this endpoint. Use one of: {allowed}"

# Operation failures
PASSWORD_RESET_REQUEST_FAILED = "Failed to process password reset request"
EMAIL_SEND_FAILED = "Failed to send email"

API_NAME = "authgate"
API_VERSION = "1.0.0"
