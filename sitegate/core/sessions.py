"""Stateless cookie sessions.

A session is a signed JWT carried in a cookie. There is no server-side
store: the claims are exactly what was embedded at issuance, so a later role
change does not affect sessions already handed out.
"""
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import Response
from jose import JWTError, jwt

from ..config import AuthSettings
from ..models.user import User


@dataclass(frozen=True)
class Principal:
    """Identity attached to a request after reading its session."""

    user_id: Optional[int] = None
    is_admin: bool = False

    @classmethod
    def anonymous(cls) -> "Principal":
        return cls()

    @classmethod
    def authenticated(cls, user_id: int, is_admin: bool = False) -> "Principal":
        return cls(user_id=user_id, is_admin=is_admin)

    @property
    def is_authenticated(self) -> bool:
        return self.user_id is not None


@dataclass(frozen=True)
class SessionToken:
    """Encoded session value and the cookie lifetime that goes with it."""

    value: str
    max_age: int


class SessionManager:
    """Issues, reads and clears session cookies."""

    def __init__(self, auth_settings: AuthSettings):
        self.secret_key = auth_settings.secret_key
        self.algorithm = auth_settings.algorithm
        self.cookie_name = auth_settings.cookie_name
        self.cookie_path = auth_settings.cookie_path
        self.cookie_secure = auth_settings.cookie_secure
        self.cookie_samesite = auth_settings.cookie_samesite
        self.session_max_age = auth_settings.session_max_age
        self.remember_me_max_age = auth_settings.remember_me_max_age

    def issue(self, user: User, elevated: bool, remember_me: bool = False) -> SessionToken:
        """Create a session for a user who just authenticated.

        ``elevated`` is decided by the caller from the user's role; the
        directory is not consulted here.
        """
        max_age = self.remember_me_max_age if remember_me else self.session_max_age
        now = datetime.now(timezone.utc)
        claims = {
            "userId": user.id,
            "isAdmin": bool(elevated),
            "iat": now,
            "exp": now + timedelta(seconds=max_age),
        }
        value = jwt.encode(claims, self.secret_key, algorithm=self.algorithm)
        return SessionToken(value=value, max_age=max_age)

    def read(self, cookie: Optional[str]) -> Principal:
        """Resolve a cookie value to a principal.

        Anything absent, unsigned, tampered, expired or oddly shaped is
        anonymous. Never raises.
        """
        if not cookie or not isinstance(cookie, str):
            return Principal.anonymous()

        try:
            payload = jwt.decode(cookie, self.secret_key, algorithms=[self.algorithm])
        except JWTError:
            return Principal.anonymous()

        user_id = payload.get("userId")
        # bool is an int subclass; a boolean user id is not a user id
        if not isinstance(user_id, int) or isinstance(user_id, bool):
            return Principal.anonymous()

        is_admin = payload.get("isAdmin", False)
        if not isinstance(is_admin, bool):
            return Principal.anonymous()

        return Principal.authenticated(user_id, is_admin=is_admin)

    def set_cookie(self, response: Response, token: SessionToken) -> None:
        response.set_cookie(
            key=self.cookie_name,
            value=token.value,
            max_age=token.max_age,
            path=self.cookie_path,
            secure=self.cookie_secure,
            httponly=True,
            samesite=self.cookie_samesite,
        )

    def clear_cookie(self, response: Response) -> None:
        """Overwrite the session cookie with one that is already expired."""
        response.set_cookie(
            key=self.cookie_name,
            value="",
            max_age=0,
            expires=0,
            path=self.cookie_path,
            secure=self.cookie_secure,
            httponly=True,
            samesite=self.cookie_samesite,
        )
