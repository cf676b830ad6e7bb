"""Authentication and account management."""
from dataclasses import dataclass
from typing import List, Optional

from ..models.base import utcnow
from ..models.user import User, UserRole
from ..services.directory import UserDirectory
from .exceptions import (
    AlreadyExistsError,
    InvalidCredentialsError,
    NotFoundError,
    UnauthenticatedError,
    ValidationError,
)
from .logging import SecurityLogger
from .passwords import burn_verification_async, hash_password_async, verify_password_async
from .reset_tokens import issue_reset_token
from .sessions import Principal, SessionManager, SessionToken


@dataclass(frozen=True)
class AuthResult:
    """A freshly authenticated user and the session issued for them."""

    user: User
    session: SessionToken


class AuthService:
    """Authentication service.

    Holds no per-user state; every call reads the directory afresh.
    """

    def __init__(
        self,
        directory: UserDirectory,
        sessions: SessionManager,
        min_password_length: int = 6,
    ):
        self.directory = directory
        self.sessions = sessions
        self.min_password_length = min_password_length

    def _check_password(self, password: str) -> None:
        if not password or len(password) < self.min_password_length:
            raise ValidationError(
                f"Password must be at least {self.min_password_length} characters"
            )

    async def _authenticate(self, email: str, password: str, require_admin: bool) -> User:
        user = await self.directory.find_by_email(email)

        if user is None or not user.password_hash:
            # Same cost as a real comparison so timing does not tell the cases apart.
            valid = await burn_verification_async(password)
        else:
            valid = await verify_password_async(password, user.password_hash)

        if not valid or (require_admin and not user.is_admin):
            SecurityLogger.log_login_attempt(email=email, success=False, elevated=require_admin)
            if require_admin:
                raise InvalidCredentialsError("Invalid admin credentials")
            raise InvalidCredentialsError()

        user = await self.directory.update(user.id, last_signed_in=utcnow())
        if user is None:
            # Deleted between the lookup and the update.
            raise InvalidCredentialsError()

        SecurityLogger.log_login_attempt(
            email=email, success=True, elevated=require_admin, user_id=user.id
        )
        return user

    async def register(self, email: str, password: str, name: Optional[str] = None) -> User:
        """Create a user account. No session is issued."""
        self._check_password(password)

        if await self.directory.find_by_email(email) is not None:
            raise AlreadyExistsError()

        password_hash = await hash_password_async(password)
        user = await self.directory.create(
            email=email,
            password_hash=password_hash,
            name=name or email.split("@")[0],
            login_method="email",
            role=UserRole.USER,
        )

        SecurityLogger.log_registration(email=email, user_id=user.id)
        return user

    async def login(self, email: str, password: str, remember_me: bool = False) -> AuthResult:
        """Authenticate a user and issue a session.

        Admins signing in here get an elevated session as well; the role is
        read from the directory record just verified.
        """
        user = await self._authenticate(email, password, require_admin=False)
        session = self.sessions.issue(user, elevated=user.is_admin, remember_me=remember_me)
        return AuthResult(user=user, session=session)

    async def admin_login(self, email: str, password: str) -> AuthResult:
        """Authenticate an existing admin and issue an elevated session."""
        user = await self._authenticate(email, password, require_admin=True)
        session = self.sessions.issue(user, elevated=True)
        return AuthResult(user=user, session=session)

    async def get_user(self, user_id: int) -> Optional[User]:
        return await self.directory.find_by_id(user_id)

    async def list_users(self) -> List[User]:
        return await self.directory.list_all()

    async def request_password_reset(self, email: str) -> None:
        """Start a password reset.

        The outcome is the same whether or not the email is known. The token
        is not persisted or delivered anywhere.
        """
        user = await self.directory.find_by_email(email)
        if user is not None:
            issue_reset_token()
        SecurityLogger.log_password_reset_requested(email=email, known=user is not None)

    async def reset_password(self, email: str, new_password: str) -> User:
        """Overwrite the password of the account with this email.

        No reset token is required.
        """
        self._check_password(new_password)

        user = await self.directory.find_by_email(email)
        if user is None:
            raise ValidationError("User not found")

        password_hash = await hash_password_async(new_password)
        user = await self.directory.update(user.id, password_hash=password_hash)
        if user is None:
            raise ValidationError("User not found")

        SecurityLogger.log_password_reset(email=email, user_id=user.id)
        return user

    async def update_profile(
        self,
        principal: Principal,
        name: Optional[str] = None,
        email: Optional[str] = None,
        password: Optional[str] = None,
    ) -> User:
        """Update the caller's own name, email or password. Role is not editable here."""
        if not principal.is_authenticated:
            raise UnauthenticatedError()

        updates = {}
        if name:
            updates["name"] = name
        if email:
            existing = await self.directory.find_by_email(email)
            if existing is not None and existing.id != principal.user_id:
                raise AlreadyExistsError()
            updates["email"] = email
        if password:
            self._check_password(password)
            updates["password_hash"] = await hash_password_async(password)

        user = await self.directory.update(principal.user_id, **updates)
        if user is None:
            raise UnauthenticatedError()
        return user

    async def set_role(self, actor: Principal, user_id: int, role: UserRole) -> User:
        """Administrative role update. Sessions already issued keep their claims."""
        user = await self.directory.find_by_id(user_id)
        if user is None:
            raise NotFoundError("User not found")

        old_role = user.role
        user = await self.directory.update(user_id, role=role)
        if user is None:
            raise NotFoundError("User not found")

        SecurityLogger.log_role_changed(
            user_id=user_id,
            old_role=old_role.value,
            new_role=role.value,
            changed_by=actor.user_id,
        )
        return user

    async def ensure_admin(self, email: str, password: str) -> User:
        """Make sure an account exists for ``email``, creating it as admin.

        An existing account is returned untouched, whatever its role.
        Concurrent callers are arbitrated by the unique email index.
        """
        existing = await self.directory.find_by_email(email)
        if existing is not None:
            SecurityLogger.log_admin_bootstrap(email=email, created=False)
            return existing

        password_hash = await hash_password_async(password)
        try:
            user = await self.directory.create(
                email=email,
                password_hash=password_hash,
                name="Admin",
                login_method="email",
                role=UserRole.ADMIN,
            )
        except AlreadyExistsError:
            user = await self.directory.find_by_email(email)
            if user is None:
                raise
            SecurityLogger.log_admin_bootstrap(email=email, created=False)
            return user

        SecurityLogger.log_admin_bootstrap(email=email, created=True)
        return user
