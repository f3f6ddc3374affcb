"""User service — the credential store.

Learn: Owns user records and password verification. Emails are
normalized (trimmed, lower-cased) before every lookup and insert, so
uniqueness is case-insensitive. Raw passwords never leave this module
except as bcrypt hashes.
"""

import structlog
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from sketchroom.auth.password import DUMMY_PASSWORD_HASH, hash_password, verify_password
from sketchroom.db.models import ROLE_ADMIN, ROLE_USER, User
from sketchroom.errors import AuthenticationError, DuplicateEmailError, UserNotFoundError

logger = structlog.get_logger()


def normalize_email(email: str) -> str:
    return email.strip().lower()


class UserService:
    """Business logic for user accounts."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_by_email(self, email: str) -> User | None:
        result = await self.db.execute(
            select(User).where(User.email == normalize_email(email))
        )
        return result.scalars().first()

    async def get_user(self, user_id: int) -> User | None:
        return await self.db.get(User, user_id)

    # ─── Login ──────────────────────────────────────────

    async def authenticate(self, email: str, password: str) -> User:
        """Return the user for valid credentials.

        Learn: Unknown email and wrong password raise the same error, and
        both pay for one bcrypt comparison, so neither the response nor
        its timing reveals whether the account exists.
        """
        user = await self.get_by_email(email)
        if user is None:
            verify_password(password, DUMMY_PASSWORD_HASH)
            raise AuthenticationError("Invalid credentials")
        if not verify_password(password, user.password_hash):
            raise AuthenticationError("Invalid credentials")
        return user

    # ─── Administration ─────────────────────────────────

    async def list_users(self) -> list[User]:
        result = await self.db.execute(
            select(User).order_by(User.created_at.desc(), User.id.desc())
        )
        return list(result.scalars().all())

    async def create_user(
        self,
        email: str,
        password: str,
        full_name: str,
        role: str = ROLE_USER,
    ) -> User:
        email = normalize_email(email)
        if await self.get_by_email(email) is not None:
            raise DuplicateEmailError(email)

        user = User(
            email=email,
            password_hash=hash_password(password),
            full_name=full_name.strip(),
            role=role,
        )
        self.db.add(user)
        try:
            await self.db.commit()
        except IntegrityError:
            # Lost a race with a concurrent insert of the same email
            await self.db.rollback()
            raise DuplicateEmailError(email)
        await self.db.refresh(user)

        logger.info("user.created", user_id=user.id, role=role)
        return user

    async def delete_user(self, user_id: int) -> None:
        """Delete an account. Self-deletion is rejected by the caller."""
        user = await self.db.get(User, user_id)
        if user is None:
            raise UserNotFoundError(user_id)

        await self.db.delete(user)
        await self.db.commit()
        logger.info("user.deleted", user_id=user_id)

    # ─── Provisioning ───────────────────────────────────

    async def ensure_admin(
        self, email: str, password: str, full_name: str
    ) -> tuple[User, bool]:
        """Create the bootstrap admin unless the email is already taken.

        Returns (user, created). Safe to run on every deploy.
        """
        existing = await self.get_by_email(email)
        if existing is not None:
            return existing, False
        user = await self.create_user(email, password, full_name, role=ROLE_ADMIN)
        return user, True
