"""Security utilities for password hashing and verification."""

import logging

from passlib.context import CryptContext
from passlib.exc import PasswordValueError

from tasktrack.config import Settings
from tasktrack.core.errors import HashingFailure, UnacceptablePassword

logger = logging.getLogger(__name__)

# Password hashing context using bcrypt. Each hash embeds its own random
# salt and cost factor, so verification needs nothing but the hash itself.
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=12)


def configure_password_hashing(settings: Settings) -> None:
    """Apply the configured bcrypt cost factor. Called once at startup."""
    pwd_context.update(bcrypt__rounds=settings.bcrypt_rounds)
    logger.debug(f"Password hashing configured with bcrypt cost {settings.bcrypt_rounds}")


def hash_password(password: str) -> str:
    """
    Hash a password using bcrypt.

    Args:
        password: Plaintext password

    Returns:
        Salted one-way hash

    Raises:
        HashingFailure: If the system cannot supply entropy or memory
        UnacceptablePassword: If bcrypt refuses the password, e.g. a NUL byte
    """
    try:
        return pwd_context.hash(password)
    except PasswordValueError as e:
        raise UnacceptablePassword() from e
    except (OSError, MemoryError) as e:
        logger.error(f"Password hashing failed: {e}")
        raise HashingFailure() from e


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash. Never raises on mismatch."""
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except (ValueError, TypeError):
        logger.warning("Password could not be checked against the stored hash")
        return False


def dummy_verify() -> None:
    """Spend the same time as a real verification when there is no user to check."""
    pwd_context.dummy_verify()
