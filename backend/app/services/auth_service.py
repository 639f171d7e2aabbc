"""Authentication helpers — bcrypt password hashing, registration and login checks."""

from datetime import datetime, timezone

import bcrypt
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.user import User

MIN_PASSWORD_LENGTH = 8
# bcrypt only looks at the first 72 bytes and bcrypt>=5 rejects anything longer
MAX_PASSWORD_BYTES = 72


class RegistrationError(Exception):
    """Registration input rejected (weak password, duplicate email)."""


class EmailAlreadyRegistered(RegistrationError):
    pass


class AccountDeactivated(Exception):
    """Credentials are valid but the account is disabled."""


def hash_password(password: str) -> str:
    """Hash a plaintext password using bcrypt."""
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, hashed: str) -> bool:
    """Check a plaintext password against a bcrypt hash."""
    return bcrypt.checkpw(password.encode("utf-8"), hashed.encode("utf-8"))


def normalize_email(email: str) -> str:
    return email.strip().lower()


async def register_user(db: AsyncSession, email: str, display_name: str, password: str) -> User:
    """Create an account. Raises RegistrationError subclasses on bad input."""
    if len(password) < MIN_PASSWORD_LENGTH:
        raise RegistrationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters.")
    if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise RegistrationError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes.")

    user = User(
        email=normalize_email(email),
        display_name=display_name.strip(),
        hashed_password=hash_password(password),
        last_login_at=datetime.now(timezone.utc),
    )
    db.add(user)

    try:
        await db.flush()
    except IntegrityError:
        await db.rollback()
        raise EmailAlreadyRegistered("Email already registered.")

    return user


async def authenticate_user(db: AsyncSession, email: str, password: str) -> User | None:
    """Return the user for valid credentials, None otherwise.

    Raises AccountDeactivated when the password is right but the account is off.
    """
    result = await db.execute(select(User).where(User.email == normalize_email(email)))
    user = result.scalar_one_or_none()

    if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
        return None
    if not user or not verify_password(password, user.hashed_password):
        return None
    if not user.is_active:
        raise AccountDeactivated("This account has been deactivated.")

    user.last_login_at = datetime.now(timezone.utc)
    return user
