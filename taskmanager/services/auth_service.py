"""
Authentication service module for the Task Manager
Sign-up, sign-in, sign-out and session resolution with bcrypt passwords and JWT access tokens
"""
import logging
import threading
import uuid
from datetime import datetime, timedelta, timezone
from typing import Dict, Optional

import bcrypt
import jwt
from jwt.exceptions import ExpiredSignatureError, InvalidTokenError
from sqlmodel import Session, select

from ..config import settings
from ..models.profile import Profile
from ..models.user import User, UserCredentials, UserSession
from ..utils.errors import AuthenticationException, ErrorType, make_error
from ..utils.logging import log_error
from .category_service import CategoryService
from .result import TRANSPORT_ERRORS, ServiceResult, failure_result

logger = logging.getLogger(__name__)


def hash_password(password: str) -> str:
    """Hash a password using bcrypt."""
    if not password:
        raise ValueError("Password cannot be empty")
    salt = bcrypt.gensalt(rounds=settings.bcrypt_rounds)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(password: str, hashed: str) -> bool:
    """Verify a password against its bcrypt hash."""
    if not password or not hashed:
        return False
    try:
        return bcrypt.checkpw(password.encode("utf-8"), hashed.encode("utf-8"))
    except ValueError as e:
        logger.error("Password verification error: %s", e)
        return False


class TokenRevocationList:
    """In-process list of signed-out token ids, pruned once the tokens expire"""

    def __init__(self):
        self._revoked: Dict[str, datetime] = {}
        self.lock = threading.Lock()

    def revoke(self, jti: str, expires_at: datetime) -> None:
        with self.lock:
            self._prune()
            self._revoked[jti] = expires_at

    def is_revoked(self, jti: str) -> bool:
        with self.lock:
            return jti in self._revoked

    def clear(self) -> None:
        with self.lock:
            self._revoked.clear()

    def _prune(self) -> None:
        now = datetime.now(timezone.utc)
        for jti in [j for j, exp in self._revoked.items() if exp <= now]:
            del self._revoked[jti]


revoked_tokens = TokenRevocationList()


def create_access_token(user: User, expires_delta: Optional[timedelta] = None) -> UserSession:
    """Issue a signed access token for a user and wrap it in a UserSession."""
    now = datetime.now(timezone.utc)
    expires_at = now + (expires_delta or timedelta(minutes=settings.access_token_expire_minutes))
    payload = {
        "sub": str(user.id),
        "email": user.email,
        "jti": uuid.uuid4().hex,
        "iat": now,
        "exp": expires_at,
    }
    token = jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)
    return UserSession(
        user_id=user.id,
        email=user.email,
        access_token=token,
        expires_at=expires_at.replace(tzinfo=None),
    )


def decode_access_token(token: str) -> dict:
    """
    Decode and validate an access token.

    Raises:
        AuthenticationException: If the token is expired, revoked, or invalid
    """
    if not token:
        raise AuthenticationException("Please sign in to continue")
    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[settings.jwt_algorithm],
            options={"require": ["sub", "exp", "jti"]},
        )
    except ExpiredSignatureError:
        raise AuthenticationException("Your session has expired. Please sign in again")
    except InvalidTokenError:
        raise AuthenticationException("Invalid session token")

    if revoked_tokens.is_revoked(payload["jti"]):
        raise AuthenticationException("Your session has ended. Please sign in again")
    return payload


class AuthService:
    """Service class for authentication"""

    @staticmethod
    def sign_up(db: Session, credentials: UserCredentials) -> ServiceResult[UserSession]:
        """
        Register a new user.

        Creates the user, its profile and the default categories in one
        transaction, then signs the user in.
        """
        context = "AuthService.sign_up"
        try:
            existing = db.exec(select(User).where(User.email == credentials.email)).first()
            if existing:
                return ServiceResult.failure(
                    make_error(ErrorType.VALIDATION, "An account with this email already exists")
                )

            user = User(email=credentials.email, hashed_password=hash_password(credentials.password))
            db.add(user)
            db.flush()

            db.add(Profile(id=user.id, email=user.email, full_name=""))
            db.flush()
            CategoryService.seed_default_categories(db, user.id)

            db.commit()
            db.refresh(user)
            logger.info("User signed up id=%s", user.id)
            return ServiceResult.success(create_access_token(user))
        except TRANSPORT_ERRORS as e:
            log_error(e, context)
            db.rollback()
            raise
        except Exception as e:
            return failure_result(db, e, context)

    @staticmethod
    def sign_in(db: Session, credentials: UserCredentials) -> ServiceResult[UserSession]:
        """Verify credentials and issue a session."""
        context = "AuthService.sign_in"
        try:
            user = db.exec(select(User).where(User.email == credentials.email)).first()
            if user is None or not verify_password(credentials.password, user.hashed_password):
                return ServiceResult.failure(make_error(ErrorType.AUTHENTICATION, "Invalid email or password"))
            logger.info("User signed in id=%s", user.id)
            return ServiceResult.success(create_access_token(user))
        except TRANSPORT_ERRORS as e:
            log_error(e, context)
            raise
        except Exception as e:
            return failure_result(db, e, context)

    @staticmethod
    def sign_out(token: str) -> ServiceResult[bool]:
        """Revoke a session token. Signing out an already-ended session fails with AUTHENTICATION."""
        try:
            payload = decode_access_token(token)
        except AuthenticationException as e:
            return ServiceResult.failure(make_error(ErrorType.AUTHENTICATION, str(e)))

        revoked_tokens.revoke(payload["jti"], datetime.fromtimestamp(payload["exp"], tz=timezone.utc))
        logger.info("User signed out id=%s", payload["sub"])
        return ServiceResult.success(True)

    @staticmethod
    def resolve_session(token: str) -> ServiceResult[UserSession]:
        """Turn a bearer token back into the UserSession it was issued as."""
        try:
            payload = decode_access_token(token)
            return ServiceResult.success(UserSession(
                user_id=uuid.UUID(payload["sub"]),
                email=payload.get("email", ""),
                access_token=token,
                expires_at=datetime.fromtimestamp(payload["exp"], tz=timezone.utc).replace(tzinfo=None),
            ))
        except AuthenticationException as e:
            return ServiceResult.failure(make_error(ErrorType.AUTHENTICATION, str(e)))
        except ValueError:
            return ServiceResult.failure(make_error(ErrorType.AUTHENTICATION, "Invalid session token"))
