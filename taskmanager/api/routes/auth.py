"""
Authentication API routes for the Task Manager
"""
from fastapi import APIRouter, Depends, Request, Response, status
from fastapi.security import HTTPAuthorizationCredentials
from sqlmodel import Session

from ...config import settings
from ...database.database import get_session
from ...models.user import UserCredentials, UserSession
from ...services.auth_service import AuthService
from ..deps import SESSION_COOKIE, bearer_scheme, extract_token, raise_for_error

router = APIRouter(prefix="/api/auth", tags=["auth"])


def _set_session_cookie(response: Response, user_session: UserSession) -> None:
    response.set_cookie(
        SESSION_COOKIE,
        user_session.access_token,
        max_age=settings.access_token_expire_minutes * 60,
        httponly=True,
        samesite="lax",
        secure=not settings.is_development,
    )


@router.post("/signup", response_model=UserSession, status_code=status.HTTP_201_CREATED)
async def sign_up(
    credentials: UserCredentials,
    response: Response,
    session: Session = Depends(get_session),
):
    """
    Create an account, its profile and the default categories, and sign in.

    Returns:
        The new session; the token is also set as an HTTP-only cookie
    """
    user_session, error = AuthService.sign_up(session, credentials)
    if error:
        raise_for_error(error)
    _set_session_cookie(response, user_session)
    return user_session


@router.post("/signin", response_model=UserSession)
async def sign_in(
    credentials: UserCredentials,
    response: Response,
    session: Session = Depends(get_session),
):
    """Sign in with email and password."""
    user_session, error = AuthService.sign_in(session, credentials)
    if error:
        raise_for_error(error)
    _set_session_cookie(response, user_session)
    return user_session


@router.post("/signout", status_code=status.HTTP_204_NO_CONTENT)
async def sign_out(
    request: Request,
    response: Response,
    credentials: HTTPAuthorizationCredentials = Depends(bearer_scheme),
):
    """End the current session."""
    _, error = AuthService.sign_out(extract_token(request, credentials) or "")
    if error:
        raise_for_error(error)
    response.delete_cookie(SESSION_COOKIE)
    response.status_code = status.HTTP_204_NO_CONTENT
    return None
