"""Tests for the authentication service."""
import pytest

from sitegate.core import auth as auth_module
from sitegate.core.auth import AuthService
from sitegate.core.exceptions import (
    AlreadyExistsError,
    InvalidCredentialsError,
    NotFoundError,
    UnauthenticatedError,
    ValidationError,
)
from sitegate.core.passwords import verify_password
from sitegate.core.sessions import Principal
from sitegate.models.user import UserRole


@pytest.mark.asyncio
async def test_register_creates_user(auth_service):
    user = await auth_service.register("u@x.com", "secret1")

    assert user.id is not None
    assert user.email == "u@x.com"
    assert user.name == "u"
    assert user.role == UserRole.USER
    assert user.password_hash != "secret1"
    assert verify_password("secret1", user.password_hash)


@pytest.mark.asyncio
async def test_register_duplicate_email(auth_service, directory):
    first = await auth_service.register("u@x.com", "secret1", name="First")
    original_hash = first.password_hash

    with pytest.raises(AlreadyExistsError):
        await auth_service.register("u@x.com", "other-secret")

    stored = await directory.find_by_email("u@x.com")
    assert stored.password_hash == original_hash
    assert stored.name == "First"


@pytest.mark.asyncio
async def test_register_short_password(auth_service, directory):
    with pytest.raises(ValidationError):
        await auth_service.register("u@x.com", "12345")

    assert await directory.find_by_email("u@x.com") is None


@pytest.mark.asyncio
async def test_login_scenario(auth_service, session_manager):
    await auth_service.register("u@x.com", "secret1")

    result = await auth_service.login("u@x.com", "secret1")
    principal = session_manager.read(result.session.value)
    assert principal == Principal.authenticated(result.user.id, is_admin=False)

    with pytest.raises(InvalidCredentialsError):
        await auth_service.login("u@x.com", "wrong")


@pytest.mark.asyncio
async def test_login_updates_last_signed_in(auth_service):
    user = await auth_service.register("u@x.com", "secret1")
    before = user.last_signed_in

    result = await auth_service.login("u@x.com", "secret1")

    assert result.user.last_signed_in >= before


@pytest.mark.asyncio
async def test_unknown_email_and_wrong_password_look_the_same(auth_service, monkeypatch):
    await auth_service.register("u@x.com", "secret1")

    burned = []

    async def fake_burn(password):
        burned.append(password)
        return False

    monkeypatch.setattr(auth_module, "burn_verification_async", fake_burn)

    with pytest.raises(InvalidCredentialsError) as wrong_password:
        await auth_service.login("u@x.com", "wrong")
    with pytest.raises(InvalidCredentialsError) as unknown_email:
        await auth_service.login("nobody@x.com", "wrong")

    assert wrong_password.value.error_code == unknown_email.value.error_code
    assert wrong_password.value.message == unknown_email.value.message
    # Unknown email still pays for a hash comparison.
    assert burned == ["wrong"]


@pytest.mark.asyncio
async def test_user_without_password_cannot_login(auth_service, directory):
    await directory.create(email="oauth@x.com", password_hash=None, login_method="oauth")

    with pytest.raises(InvalidCredentialsError):
        await auth_service.login("oauth@x.com", "anything")


@pytest.mark.asyncio
async def test_remember_me_session(auth_service, session_manager):
    await auth_service.register("u@x.com", "secret1")

    result = await auth_service.login("u@x.com", "secret1", remember_me=True)

    assert result.session.max_age == session_manager.remember_me_max_age


@pytest.mark.asyncio
async def test_admin_login_requires_admin_role(auth_service):
    await auth_service.register("u@x.com", "secret1")

    with pytest.raises(InvalidCredentialsError):
        await auth_service.admin_login("u@x.com", "secret1")


@pytest.mark.asyncio
async def test_admin_login_issues_elevated_session(auth_service, session_manager):
    admin = await auth_service.ensure_admin("a@x.com", "adminpass")

    result = await auth_service.admin_login("a@x.com", "adminpass")

    assert result.user.id == admin.id
    assert session_manager.read(result.session.value).is_admin

    with pytest.raises(InvalidCredentialsError):
        await auth_service.admin_login("a@x.com", "wrong-pass")


@pytest.mark.asyncio
async def test_reset_password_scenario(auth_service):
    await auth_service.register("u@x.com", "secret1")

    await auth_service.reset_password("u@x.com", "newsecret")

    with pytest.raises(InvalidCredentialsError):
        await auth_service.login("u@x.com", "secret1")
    result = await auth_service.login("u@x.com", "newsecret")
    assert result.user.email == "u@x.com"


@pytest.mark.asyncio
async def test_reset_password_unknown_email(auth_service):
    with pytest.raises(ValidationError):
        await auth_service.reset_password("nobody@x.com", "newsecret")


@pytest.mark.asyncio
async def test_reset_password_short_password(auth_service):
    await auth_service.register("u@x.com", "secret1")

    with pytest.raises(ValidationError):
        await auth_service.reset_password("u@x.com", "short")


@pytest.mark.asyncio
async def test_request_password_reset_is_silent(auth_service):
    await auth_service.register("u@x.com", "secret1")

    assert await auth_service.request_password_reset("u@x.com") is None
    assert await auth_service.request_password_reset("nobody@x.com") is None


@pytest.mark.asyncio
async def test_ensure_admin_is_idempotent(auth_service, directory):
    first = await auth_service.ensure_admin("a@x.com", "p")
    second = await auth_service.ensure_admin("a@x.com", "p")

    assert first.id == second.id
    assert first.role == UserRole.ADMIN
    assert first.name == "Admin"
    assert len(await directory.list_all()) == 1


@pytest.mark.asyncio
async def test_ensure_admin_does_not_promote(auth_service):
    user = await auth_service.register("u@x.com", "secret1")

    result = await auth_service.ensure_admin("u@x.com", "whatever")

    assert result.id == user.id
    assert result.role == UserRole.USER


class RacingDirectory:
    """Directory where another bootstrap wins between lookup and create."""

    def __init__(self, winner):
        self.winner = winner
        self.lookups = 0

    async def find_by_email(self, email):
        self.lookups += 1
        return None if self.lookups == 1 else self.winner

    async def create(self, **fields):
        raise AlreadyExistsError()


@pytest.mark.asyncio
async def test_ensure_admin_race_loser_returns_winner(session_manager):
    winner = object()
    service = AuthService(RacingDirectory(winner), session_manager)

    assert await service.ensure_admin("a@x.com", "p") is winner


@pytest.mark.asyncio
async def test_update_profile(auth_service):
    user = await auth_service.register("u@x.com", "secret1")
    principal = Principal.authenticated(user.id)

    updated = await auth_service.update_profile(
        principal, name="New Name", email="new@x.com", password="another1"
    )

    assert updated.name == "New Name"
    assert updated.email == "new@x.com"
    assert updated.role == UserRole.USER
    assert verify_password("another1", updated.password_hash)


@pytest.mark.asyncio
async def test_update_profile_email_taken(auth_service):
    await auth_service.register("a@x.com", "secret1")
    user = await auth_service.register("b@x.com", "secret1")

    with pytest.raises(AlreadyExistsError):
        await auth_service.update_profile(Principal.authenticated(user.id), email="a@x.com")


@pytest.mark.asyncio
async def test_update_profile_requires_session(auth_service):
    with pytest.raises(UnauthenticatedError):
        await auth_service.update_profile(Principal.anonymous(), name="x")


@pytest.mark.asyncio
async def test_set_role_does_not_touch_live_sessions(auth_service, session_manager):
    await auth_service.register("u@x.com", "secret1")
    result = await auth_service.login("u@x.com", "secret1")
    admin = Principal.authenticated(999, is_admin=True)

    promoted = await auth_service.set_role(admin, result.user.id, UserRole.ADMIN)

    assert promoted.role == UserRole.ADMIN
    assert not session_manager.read(result.session.value).is_admin
    fresh = await auth_service.login("u@x.com", "secret1")
    assert session_manager.read(fresh.session.value).is_admin


@pytest.mark.asyncio
async def test_set_role_unknown_user(auth_service):
    with pytest.raises(NotFoundError):
        await auth_service.set_role(Principal.authenticated(1, is_admin=True), 12345, UserRole.ADMIN)
