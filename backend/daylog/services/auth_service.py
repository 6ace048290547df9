import asyncio
import logging

import bcrypt

from daylog.core.errors import AuthError, ValidationError
from daylog.db.repositories.account_repository import AccountRepository
from daylog.models.account import Account

logger = logging.getLogger(__name__)

MIN_USERNAME_LENGTH = 3
MIN_PASSWORD_LENGTH = 4
# bcrypt only hashes the first 72 bytes and 5.x rejects anything longer
MAX_PASSWORD_BYTES = 72


class AuthenticationService:
    """Account creation and password verification"""

    def __init__(self, accounts: AccountRepository, bcrypt_rounds: int = 12):
        self.accounts = accounts
        self.bcrypt_rounds = bcrypt_rounds
        # Compared against when the username is unknown so both failure paths
        # pay for one bcrypt check
        self._dummy_hash = bcrypt.hashpw(
            b"daylog-dummy-password", bcrypt.gensalt(bcrypt_rounds)
        ).decode("utf-8")

    def _hash_password(self, password: str) -> str:
        """Hash password using bcrypt"""
        salt = bcrypt.gensalt(self.bcrypt_rounds)
        hashed = bcrypt.hashpw(password.encode("utf-8"), salt)
        return hashed.decode("utf-8")

    def _verify_password(self, password: str, hashed: str) -> bool:
        """Verify password against hash"""
        if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
            return False
        try:
            return bcrypt.checkpw(password.encode("utf-8"), hashed.encode("utf-8"))
        except ValueError:
            # Malformed stored hash
            return False

    @staticmethod
    def _check_password_length(password: str):
        if len(password) < MIN_PASSWORD_LENGTH:
            raise ValidationError(
                "password", f"Password must be at least {MIN_PASSWORD_LENGTH} characters"
            )
        if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
            raise ValidationError(
                "password", f"Password must be at most {MAX_PASSWORD_BYTES} bytes"
            )

    @staticmethod
    def _clean_username(username) -> str:
        return username.strip() if isinstance(username, str) else ""

    async def register(self, username: str, password: str) -> Account:
        """Create a new account"""
        username = self._clean_username(username)

        if not username or not password:
            raise ValidationError("username", "Username and password are required")
        if len(username) < MIN_USERNAME_LENGTH:
            raise ValidationError(
                "username", f"Username must be at least {MIN_USERNAME_LENGTH} characters"
            )
        self._check_password_length(password)

        password_hash = await asyncio.to_thread(self._hash_password, password)
        account = await self.accounts.create(username, password_hash)

        logger.info(f"Registered new user {username!r}")
        return account

    async def authenticate(self, username: str, password: str) -> Account:
        """Return the account if the password matches, AuthError otherwise"""
        username = self._clean_username(username)
        if not username or not password:
            raise ValidationError("username", "Username and password are required")

        account = await self.accounts.get_by_username(username)
        stored_hash = account.password_hash if account else self._dummy_hash

        is_valid = await asyncio.to_thread(self._verify_password, password, stored_hash)
        if not account or not is_valid:
            logger.info(f"Failed login for {username!r}")
            raise AuthError()

        logger.info(f"User {username!r} logged in")
        return account

    async def bootstrap_default_account(self, username: str, password: str) -> bool:
        """Create the default account on first boot; no-op when it exists"""
        if await self.accounts.exists(username):
            return False

        self._check_password_length(password)
        password_hash = await asyncio.to_thread(self._hash_password, password)
        created = await self.accounts.create_if_missing(username, password_hash)
        if created:
            logger.info(f"Created initial user {username!r}")
        return created
