"""Tests for account registration, login and bootstrap."""

import bcrypt
import pytest

from daylog.core.errors import AuthError, ConflictError, ValidationError


class TestRegister:
    @pytest.mark.asyncio
    async def test_register_hashes_password(self, auth_service, accounts):
        account = await auth_service.register("alice", "secret")

        stored = await accounts.get_by_username("alice")
        assert account.username == "alice"
        assert stored.password_hash != "secret"
        assert stored.password_hash.startswith("$2")
        assert bcrypt.checkpw(b"secret", stored.password_hash.encode("utf-8"))

    @pytest.mark.asyncio
    async def test_username_is_trimmed(self, auth_service):
        account = await auth_service.register("  alice  ", "secret")
        assert account.username == "alice"

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "username,password,field",
        [
            ("ab", "secret", "username"),
            ("   ab ", "secret", "username"),
            ("alice", "abc", "password"),
            ("", "secret", "username"),
            ("alice", "", "username"),
            (None, None, "username"),
        ],
    )
    async def test_rejects_short_or_missing_credentials(
        self, auth_service, accounts, username, password, field
    ):
        with pytest.raises(ValidationError) as exc_info:
            await auth_service.register(username, password)
        assert exc_info.value.field == field
        assert await accounts.count() == 0

    @pytest.mark.asyncio
    @pytest.mark.parametrize("password", ["x" * 73, "\u00e9" * 37])
    async def test_rejects_password_beyond_bcrypt_limit(self, auth_service, accounts, password):
        with pytest.raises(ValidationError) as exc_info:
            await auth_service.register("alice", password)

        assert exc_info.value.field == "password"
        assert await accounts.count() == 0

    @pytest.mark.asyncio
    async def test_accepts_password_at_bcrypt_limit(self, auth_service):
        await auth_service.register("alice", "x" * 72)

        account = await auth_service.authenticate("alice", "x" * 72)
        assert account.username == "alice"

    @pytest.mark.asyncio
    async def test_duplicate_username_conflicts(self, auth_service):
        await auth_service.register("alice", "first-pass")

        with pytest.raises(ConflictError):
            await auth_service.register("alice", "second-pass")

        account = await auth_service.authenticate("alice", "first-pass")
        assert account.username == "alice"
        with pytest.raises(AuthError):
            await auth_service.authenticate("alice", "second-pass")

    @pytest.mark.asyncio
    async def test_usernames_are_case_sensitive(self, auth_service, accounts):
        await auth_service.register("alice", "secret")
        await auth_service.register("Alice", "secret")

        assert await accounts.count() == 2


class TestAuthenticate:
    @pytest.mark.asyncio
    async def test_valid_credentials(self, auth_service):
        await auth_service.register("alice", "secret")

        account = await auth_service.authenticate("alice", "secret")

        assert account.username == "alice"

    @pytest.mark.asyncio
    async def test_unknown_user_and_wrong_password_look_the_same(self, auth_service):
        await auth_service.register("alice", "secret")

        with pytest.raises(AuthError) as unknown:
            await auth_service.authenticate("mallory", "secret")
        with pytest.raises(AuthError) as wrong:
            await auth_service.authenticate("alice", "not-it")

        assert type(unknown.value) is type(wrong.value)
        assert unknown.value.public_message == wrong.value.public_message
        assert unknown.value.status_code == wrong.value.status_code

    @pytest.mark.asyncio
    async def test_overlong_password_is_invalid_credentials(self, auth_service):
        await auth_service.register("alice", "secret")

        with pytest.raises(AuthError):
            await auth_service.authenticate("alice", "x" * 80)
        with pytest.raises(AuthError):
            await auth_service.authenticate("mallory", "x" * 80)

    @pytest.mark.asyncio
    async def test_missing_fields_rejected(self, auth_service):
        with pytest.raises(ValidationError):
            await auth_service.authenticate("", "secret")


class TestBootstrap:
    @pytest.mark.asyncio
    async def test_creates_account_once(self, auth_service, accounts):
        assert await auth_service.bootstrap_default_account("admin", "admin-pass") is True
        assert await auth_service.bootstrap_default_account("admin", "other-pass") is False

        assert await accounts.count() == 1
        account = await auth_service.authenticate("admin", "admin-pass")
        assert account.username == "admin"

    @pytest.mark.asyncio
    async def test_leaves_registered_account_alone(self, auth_service):
        await auth_service.register("admin", "mine")

        assert await auth_service.bootstrap_default_account("admin", "admin-pass") is False
        await auth_service.authenticate("admin", "mine")

    @pytest.mark.asyncio
    async def test_overlong_default_password_rejected(self, auth_service, accounts):
        with pytest.raises(ValidationError) as exc_info:
            await auth_service.bootstrap_default_account("admin", "x" * 100)

        assert exc_info.value.field == "password"
        assert await accounts.count() == 0
