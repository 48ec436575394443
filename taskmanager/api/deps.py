"""
Shared API dependencies for the Task Manager
Session resolution, ownership checks and error-to-HTTP mapping
"""
import uuid
from typing import NoReturn, Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from ..models.user import UserSession
from ..services.auth_service import AuthService
from ..utils.errors import AppError, ErrorType

SESSION_COOKIE = "access_token"

ERROR_STATUS = {
    ErrorType.AUTHENTICATION: status.HTTP_401_UNAUTHORIZED,
    ErrorType.AUTHORIZATION: status.HTTP_403_FORBIDDEN,
    ErrorType.VALIDATION: 422,
    ErrorType.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorType.NETWORK: status.HTTP_503_SERVICE_UNAVAILABLE,
    ErrorType.DATABASE: status.HTTP_500_INTERNAL_SERVER_ERROR,
    ErrorType.UNKNOWN: status.HTTP_500_INTERNAL_SERVER_ERROR,
}

bearer_scheme = HTTPBearer(auto_error=False)


def extract_token(request: Request, credentials: Optional[HTTPAuthorizationCredentials] = None) -> Optional[str]:
    """Bearer header first, then the session cookie."""
    if credentials and credentials.credentials:
        return credentials.credentials
    return request.cookies.get(SESSION_COOKIE)


def raise_for_error(error: AppError) -> NoReturn:
    """Raise the HTTPException matching an AppError's type."""
    headers = {"WWW-Authenticate": "Bearer"} if error.type == ErrorType.AUTHENTICATION else None
    raise HTTPException(
        status_code=ERROR_STATUS.get(error.type, status.HTTP_500_INTERNAL_SERVER_ERROR),
        detail=error.to_dict(),
        headers=headers,
    )


async def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> UserSession:
    """
    Resolve the session for this request.

    Raises:
        HTTPException 401: No session, or the session is expired/revoked/invalid
    """
    session, error = AuthService.resolve_session(extract_token(request, credentials) or "")
    if error:
        raise_for_error(error)
    return session


def ensure_owner(user_id: uuid.UUID, current_user: UserSession, action: str = "access") -> None:
    """Reject requests for another user's rows."""
    if current_user.user_id != user_id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail={"error": ErrorType.AUTHORIZATION.value, "message": f"You can only {action} your own data"},
        )
