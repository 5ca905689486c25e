"""Authentication error taxonomy and exception handlers with request_id in responses."""

from asgi_correlation_id import correlation_id
from fastapi import FastAPI, HTTPException, Request, status
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from src.gatekeeper.core.logging import get_logger

logger = get_logger(__name__)


class AuthError(Exception):
    """Recoverable, caller-facing outcome of an authentication operation.

    Subclasses carry a fixed HTTP status and a generic default message. The message
    is what callers see, so it must never distinguish sub-cases that would leak
    whether an account or tenant exists.
    """

    status_code: int = status.HTTP_400_BAD_REQUEST
    default_detail: str = "Bad request"

    def __init__(self, detail: str | None = None):
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


class InvalidCredentialsError(AuthError):
    """Unknown identifier, wrong password, or missing/soft-deleted account."""

    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = "Invalid credentials"


class InvalidTwoFactorCodeError(AuthError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = "Invalid 2FA code"


class TokenInvalidOrExpiredError(AuthError):
    """Bad signature, expiry, wrong token type, or principal no longer exists."""

    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = "Invalid or expired token"


class ForbiddenError(AuthError):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "You do not have permission to access this tenant"


class NotFoundError(AuthError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Not found"


class TwoFactorNotConfiguredError(AuthError):
    default_detail = "2FA is not configured for this account"


class EmailAlreadyVerifiedError(AuthError):
    default_detail = "Email is already verified"


class InvalidFlowTokenError(AuthError):
    default_detail = "Invalid or expired token"


class PasswordReuseError(AuthError):
    default_detail = "New password must be different from current password"


def _error_body(detail: object) -> dict[str, object]:
    return {"detail": detail, "request_id": correlation_id.get()}


def setup_exception_handlers(app: FastAPI) -> None:
    """Configure exception handlers that include request_id in responses."""

    @app.exception_handler(AuthError)
    async def auth_error_handler(request: Request, exc: AuthError) -> JSONResponse:
        logger.info(
            "Authentication request rejected",
            error=type(exc).__name__,
            status_code=exc.status_code,
            path=request.url.path,
        )
        headers = (
            {"WWW-Authenticate": "Bearer"}
            if exc.status_code == status.HTTP_401_UNAUTHORIZED
            else None
        )
        return JSONResponse(
            status_code=exc.status_code,
            content=_error_body(exc.detail),
            headers=headers,
        )

    @app.exception_handler(StarletteHTTPException)
    async def starlette_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        return JSONResponse(status_code=exc.status_code, content=_error_body(exc.detail))

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
        return JSONResponse(status_code=exc.status_code, content=_error_body(exc.detail))

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        # Infrastructure faults fail closed: no token, generic body
        request_id = correlation_id.get()
        logger.exception(
            "Unhandled exception",
            exc_info=exc,
            request_id=request_id,
            path=request.url.path,
        )
        return JSONResponse(
            status_code=500,
            content={
                "detail": "Internal server error",
                "request_id": request_id,
            },
        )
