"""Authentication service: registration, login, logout and the session gate."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta

import structlog
from passlib.context import CryptContext
from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from alliswell.core.config import get_settings
from alliswell.domain import SessionRecord, User
from alliswell.infrastructure.db.models import UserModel
from alliswell.infrastructure.repositories.session_store import SessionStore, SessionStoreError

logger = structlog.get_logger()

# Password hashing context with bcrypt
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

# Single message for unknown name and wrong password alike.
INVALID_CREDENTIALS_MESSAGE = "Either name or password is incorrect."


class AuthError(Exception):
    """Base exception for authentication errors."""

    pass


class UserExistsError(AuthError):
    """Raised when registering with an email or name that is already taken."""

    pass


class InvalidCredentialsError(AuthError):
    """Raised when login credentials are invalid."""

    def __init__(self, message: str = INVALID_CREDENTIALS_MESSAGE) -> None:
        super().__init__(message)


class UnauthorizedError(AuthError):
    """Raised when a protected operation is attempted without a valid session."""

    pass


class SessionUnavailableError(AuthError):
    """Raised when a session cannot be created after the credentials checked out."""

    def __init__(self, message: str = "Could not sign you in. Please try again.") -> None:
        super().__init__(message)


class LogoutError(AuthError):
    """Raised when the session backing store fails during logout."""

    pass


@dataclass(slots=True)
class AuthResult:
    user: User
    session: SessionRecord


def hash_password(password: str) -> str:
    """Hash a password using bcrypt."""
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash."""
    return pwd_context.verify(plain_password, hashed_password)


class AuthService:
    """Service for authentication operations."""

    def __init__(self, session: AsyncSession, sessions: SessionStore) -> None:
        self.session = session
        self.sessions = sessions

    async def register(self, *, name: str, email: str, password: str) -> AuthResult:
        """
        Register a new user and sign them in.

        Raises:
            UserExistsError: the email or name is already registered
            SessionUnavailableError: the session store failed
        """
        email = email.lower()
        await logger.ainfo("register_attempt", name=name)

        stmt = select(UserModel).where(or_(UserModel.email == email, UserModel.name == name))
        existing = (await self.session.execute(stmt)).scalars().first()
        if existing is not None:
            await logger.awarning("register_duplicate", name=name)
            if existing.email == email:
                raise UserExistsError("Email already registered.")
            raise UserExistsError("Name already taken.")

        user = UserModel(name=name, email=email, hashed_password=hash_password(password))

        try:
            self.session.add(user)
            await self.session.commit()
            await self.session.refresh(user)
        except IntegrityError as exc:
            # Concurrent registration won the unique constraint
            await self.session.rollback()
            await logger.awarning("register_duplicate", name=name)
            raise UserExistsError("Email already registered.") from exc

        new_user = self._to_domain(user)
        try:
            record = await self.sessions.create(new_user.user_id, self._session_ttl())
        except SessionStoreError as exc:
            # Drop the account so a retry can register again
            await logger.aerror(
                "register_session_failed", user_id=new_user.user_id, error=str(exc)
            )
            await self.session.delete(user)
            await self.session.commit()
            raise SessionUnavailableError() from exc
        await logger.ainfo("register_success", user_id=new_user.user_id)

        return AuthResult(user=new_user, session=record)

    async def login(self, *, name: str, password: str) -> AuthResult:
        """
        Authenticate by display name and password.

        Raises:
            InvalidCredentialsError: unknown name or wrong password (same message)
            SessionUnavailableError: the session store failed
        """
        await logger.ainfo("login_attempt", name=name)

        stmt = select(UserModel).where(UserModel.name == name)
        user = (await self.session.execute(stmt)).scalar_one_or_none()

        if user is None:
            await logger.awarning("login_user_not_found", name=name)
            raise InvalidCredentialsError()

        if not verify_password(password, user.hashed_password):
            await logger.awarning("login_invalid_password", user_id=user.id)
            raise InvalidCredentialsError()

        signed_in = self._to_domain(user)
        try:
            record = await self.sessions.create(signed_in.user_id, self._session_ttl())
        except SessionStoreError as exc:
            await logger.aerror("login_session_failed", user_id=signed_in.user_id, error=str(exc))
            raise SessionUnavailableError() from exc
        await logger.ainfo("login_success", user_id=signed_in.user_id)

        return AuthResult(user=signed_in, session=record)

    async def logout(self, session_id: str | None) -> None:
        """Destroy a session. Absent sessions are ignored."""
        if not session_id:
            return
        try:
            await self.sessions.destroy(session_id)
        except SessionStoreError as exc:
            await logger.aerror("logout_failed", error=str(exc))
            raise LogoutError("Could not log out.") from exc
        await logger.ainfo("logout_success")

    async def require_session(self, session_id: str | None) -> User:
        """
        Resolve the user behind a session id.

        Raises:
            UnauthorizedError: missing, expired or orphaned session
        """
        if not session_id:
            raise UnauthorizedError("Missing session")

        record = await self.sessions.get(session_id)
        if record is None:
            raise UnauthorizedError("Session expired or unknown")

        user = await self.session.get(UserModel, record.user_id)
        if user is None:
            await logger.awarning("session_user_missing", user_id=record.user_id)
            await self.sessions.destroy(session_id)
            raise UnauthorizedError("Session user no longer exists")

        return self._to_domain(user)

    def _session_ttl(self) -> timedelta:
        return timedelta(seconds=get_settings().session_ttl_seconds)

    def _to_domain(self, user: UserModel) -> User:
        return User(user_id=user.id, name=user.name, email=user.email)
