"""authgate - signup, OTP-gated signin, and password reset API."""

import logging
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from jose import ExpiredSignatureError, JWTError
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from sqlalchemy.exc import IntegrityError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from authgate import messages
from authgate.config import Settings, get_settings
from authgate.errors import AuthError
from authgate.rate_limit import limiter
from authgate.response import error_response
from authgate.routers import auth_router
from authgate.routing import MethodNotAllowedMiddleware, RouteTable
from authgate.services.auth import AuthService
from authgate.services.jwt import JWTService
from authgate.services.mailer import Mailer
from authgate.services.user_store import UserStore

# Logging
logger = logging.getLogger("authgate")
logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

DOCS_URL = "/api-docs"


# --- Security headers middleware ---
class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next) -> Response:
        response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "no-referrer"
        response.headers["Cross-Origin-Resource-Policy"] = "same-site"
        if not request.url.path.startswith(DOCS_URL):
            response.headers["Content-Security-Policy"] = "default-src 'none'; frame-ancestors 'none'"
        return response


# --- Request size limit middleware ---
class RequestSizeLimitMiddleware(BaseHTTPMiddleware):
    """Reject bodies larger than the display picture limit plus room for form fields."""

    def __init__(self, app, max_body_size: int) -> None:
        super().__init__(app)
        self.max_body_size = max_body_size

    async def dispatch(self, request: Request, call_next) -> Response:
        content_length = request.headers.get("content-length")
        if content_length and content_length.isdigit() and int(content_length) > self.max_body_size:
            return error_response(413, messages.REQUEST_TOO_LARGE)
        return await call_next(request)


def _field_errors(exc: RequestValidationError) -> list[dict]:
    errors = []
    for err in exc.errors():
        loc = [str(p) for p in err.get("loc", ()) if p != "body"]
        errors.append({"field": ".".join(loc), "message": err.get("msg", "")})
    return errors


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(AuthError)
    async def auth_error_handler(request: Request, exc: AuthError) -> Response:
        return error_response(exc.status_code, exc.message, getattr(exc, "errors", None))

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError) -> Response:
        return error_response(400, messages.VALIDATION_FAILED, _field_errors(exc))

    @app.exception_handler(IntegrityError)
    async def integrity_error_handler(request: Request, exc: IntegrityError) -> Response:
        logger.warning("Integrity error on %s: %s", request.url.path, exc.orig)
        return error_response(400, messages.DUPLICATE_KEY)

    @app.exception_handler(ExpiredSignatureError)
    async def expired_token_handler(request: Request, exc: ExpiredSignatureError) -> Response:
        return error_response(401, messages.TOKEN_EXPIRED)

    @app.exception_handler(JWTError)
    async def jwt_error_handler(request: Request, exc: JWTError) -> Response:
        return error_response(401, messages.INVALID_TOKEN)

    @app.exception_handler(RateLimitExceeded)
    async def rate_limit_handler(request: Request, exc: RateLimitExceeded) -> Response:
        return error_response(429, messages.TOO_MANY_REQUESTS)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> Response:
        if exc.status_code == 404:
            return error_response(404, messages.ROUTE_NOT_FOUND.format(path=request.url.path))
        return error_response(exc.status_code, str(exc.detail), headers=exc.headers)

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception) -> Response:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return error_response(500, messages.INTERNAL_SERVER_ERROR)


def create_app(settings: Settings | None = None, mailer: Mailer | None = None) -> FastAPI:
    """Build the application with its AuthService and route table wired in."""
    settings = settings or get_settings()
    for warning in settings.validate():
        logger.warning(warning)

    app = FastAPI(
        title=messages.API_NAME,
        version=messages.API_VERSION,
        docs_url=DOCS_URL,
        redoc_url=None,
    )
    app.state.settings = settings
    app.state.limiter = limiter
    app.state.auth_service = AuthService(
        store=UserStore(),
        mailer=mailer or Mailer(settings),
        jwt_service=JWTService(settings),
        settings=settings,
    )

    # Added innermost first: the 405 check runs after rate limiting.
    app.add_middleware(MethodNotAllowedMiddleware)
    app.add_middleware(SlowAPIMiddleware)
    app.add_middleware(
        RequestSizeLimitMiddleware,
        max_body_size=(settings.MAX_DISPLAY_PICTURE_MB + 1) * 1024 * 1024,
    )
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.CORS_ORIGIN],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    app.include_router(auth_router)

    @app.get("/api/health")
    def health_check() -> dict:
        """Health check endpoint."""
        return {
            "success": True,
            "message": messages.SERVER_RUNNING,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }

    @app.get("/")
    def root(request: Request) -> dict:
        """API metadata and endpoint map."""
        base = str(request.base_url).rstrip("/")
        return {
            "success": True,
            "message": messages.API_NAME,
            "version": messages.API_VERSION,
            "documentation": f"{base}{DOCS_URL}",
            "endpoints": {
                "health": "GET /api/health",
                "auth": {
                    "signup": "POST /api/auth/signup",
                    "signin": "POST /api/auth/signin",
                    "forgotPassword": "POST /api/auth/forgot-password",
                    "resetPassword": "POST /api/auth/reset-password",
                    "generateOTP": "POST /api/auth/generate-otp",
                    "verifyOTP": "POST /api/auth/verify-otp",
                    "displayPicture": "GET /api/auth/display-picture/{userId}",
                    "me": "GET /api/auth/me",
                },
            },
        }

    # Routes are fixed from here on, so the table is built once.
    app.state.route_table = RouteTable.from_routes(app.routes)
    return app


app = create_app()
