"""Authentication utilities: registration, login and token resolution."""
import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from tasktrack.config import Settings
from tasktrack.core.errors import DuplicateEmail, InvalidCredentials, UnknownSubject
from tasktrack.core.scope import Scope
from tasktrack.core.security import dummy_verify, hash_password, verify_password
from tasktrack.core.tokens import IssuedToken, issue_token, validate_token
from tasktrack.models import User

logger = logging.getLogger(__name__)


def normalize_email(email: str) -> str:
    """Normalize an email address for storage and lookup."""
    return email.strip().lower()


def find_user_by_email(db: Session, email: str) -> User | None:
    """
    Get a user by email address.

    Args:
        db: Database session
        email: Email address, in any case

    Returns:
        User if found, None otherwise
    """
    stmt = select(User).where(User.email == normalize_email(email))
    return db.execute(stmt).scalar_one_or_none()


def get_user_by_id(db: Session, user_id: str) -> User | None:
    """
    Get a user by ID.

    Args:
        db: Database session
        user_id: User ID

    Returns:
        User if found, None otherwise
    """
    stmt = select(User).where(User.id == user_id)
    return db.execute(stmt).scalar_one_or_none()


def create_user(
    db: Session,
    first_name: str,
    last_name: str,
    email: str,
    password: str,
) -> User:
    """
    Create a new user.

    The email is checked up front, but the unique index on ``users.email``
    is the final authority: a concurrent registration that slips past the
    check is reported the same way.

    Args:
        db: Database session
        first_name: First name
        last_name: Last name
        email: Email address
        password: Plaintext password

    Returns:
        Created user object

    Raises:
        DuplicateEmail: If the email is already registered
    """
    email = normalize_email(email)
    if find_user_by_email(db, email):
        raise DuplicateEmail()

    user = User(
        first_name=first_name.strip(),
        last_name=last_name.strip(),
        email=email,
        hashed_password=hash_password(password),
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        logger.info("Concurrent registration detected for an existing email")
        raise DuplicateEmail() from e
    db.refresh(user)

    return user


def create_access_token(user: User, settings: Settings) -> IssuedToken:
    """Issue a bearer token for a user using the configured secret and lifetime."""
    return issue_token(
        user.id,
        settings.secret_key,
        settings.access_token_lifetime,
        algorithm=settings.algorithm,
    )


def register_user(
    db: Session,
    settings: Settings,
    first_name: str,
    last_name: str,
    email: str,
    password: str,
) -> tuple[User, IssuedToken]:
    """
    Register a user and issue their first token.

    Returns:
        Tuple of (User, IssuedToken)

    Raises:
        DuplicateEmail: If the email is already registered
    """
    user = create_user(db, first_name, last_name, email, password)
    logger.info(f"Registered user {user.id}")
    return user, create_access_token(user, settings)


def authenticate_user(db: Session, email: str, password: str) -> User:
    """
    Authenticate a user by email and password.

    Unknown emails and wrong passwords raise the same error, and an unknown
    email still costs one hash verification.

    Args:
        db: Database session
        email: Email address
        password: Plaintext password

    Returns:
        The authenticated user

    Raises:
        InvalidCredentials: If the email is unknown or the password is wrong
    """
    user = find_user_by_email(db, email)

    if not user:
        dummy_verify()
        logger.info("Login failed: unknown email")
        raise InvalidCredentials()

    if not verify_password(password, user.hashed_password):
        logger.info(f"Login failed: wrong password for user {user.id}")
        raise InvalidCredentials()

    return user


def login_user(
    db: Session, settings: Settings, email: str, password: str
) -> tuple[User, IssuedToken]:
    """
    Log a user in and issue a token.

    Returns:
        Tuple of (User, IssuedToken)

    Raises:
        InvalidCredentials: If the email is unknown or the password is wrong
    """
    user = authenticate_user(db, email, password)
    logger.info(f"User {user.id} logged in")
    return user, create_access_token(user, settings)


def create_scope(db: Session, token: str, settings: Settings) -> Scope:
    """
    Resolve a bearer token to an authorization scope.

    Args:
        db: Database session
        token: Encoded bearer token
        settings: Application settings

    Returns:
        Scope object for the token's user

    Raises:
        TokenError: If the token is malformed, badly signed, expired,
            or names a user that no longer exists
    """
    user_id = validate_token(token, settings.secret_key, algorithm=settings.algorithm)

    user = get_user_by_id(db, user_id)
    if not user:
        raise UnknownSubject()

    return Scope(user=user)
