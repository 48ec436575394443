"""
HTTP middleware for the Task Manager
Route gating by session and the top-level error boundary
"""
import logging
from typing import Sequence

from fastapi import Request, status
from fastapi.responses import JSONResponse, RedirectResponse
from starlette.middleware.base import BaseHTTPMiddleware

from ..services.auth_service import AuthService
from ..utils.errors import ErrorType, handle_database_error
from ..utils.logging import log_error
from .deps import extract_token

logger = logging.getLogger(__name__)

PROTECTED_PREFIXES = ("/dashboard",)
AUTH_PREFIX = "/auth"
LOGIN_PATH = "/auth/login"
HOME_PATH = "/dashboard"

FAILURE_ACTIONS = ["retry", "reload", "home"]


class SessionGateMiddleware(BaseHTTPMiddleware):
    """
    Redirect unauthenticated users away from protected views and
    authenticated users away from the sign-in/sign-up views.
    """

    def __init__(self, app, protected_prefixes: Sequence[str] = PROTECTED_PREFIXES):
        super().__init__(app)
        self.protected_prefixes = tuple(protected_prefixes)

    async def dispatch(self, request: Request, call_next):
        path = request.url.path
        gated = path.startswith(self.protected_prefixes) or (
            path.startswith(AUTH_PREFIX) and request.method == "GET"
        )
        if not gated:
            return await call_next(request)

        session, _ = AuthService.resolve_session(extract_token(request) or "")
        if session is not None and path.startswith(AUTH_PREFIX):
            return RedirectResponse(HOME_PATH, status_code=status.HTTP_303_SEE_OTHER)
        if session is None and path.startswith(self.protected_prefixes):
            return RedirectResponse(LOGIN_PATH, status_code=status.HTTP_303_SEE_OTHER)
        return await call_next(request)


class ErrorBoundaryMiddleware(BaseHTTPMiddleware):
    """
    Catch anything the routes did not handle and answer with a generic
    failure panel instead of a bare 500.
    """

    async def dispatch(self, request: Request, call_next):
        try:
            return await call_next(request)
        except Exception as e:
            app_error = handle_database_error(e, f"{request.method} {request.url.path}")
            log_error(e, f"Unhandled error at {request.method} {request.url.path}")
            body = {
                "error": ErrorType.UNKNOWN.value,
                "message": "Something went wrong",
                "detail": app_error.message,
                "actions": FAILURE_ACTIONS,
            }
            return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=body)
