"""Authentication routes."""
from fastapi import APIRouter, status

from tasktrack.api.deps import AppSettings, CurrentScope, DatabaseSession
from tasktrack.core.auth import login_user, register_user
from tasktrack.core.errors import InvalidCredentials
from tasktrack.core.tokens import IssuedToken
from tasktrack.models import User
from tasktrack.schemas.user import AuthResponse, UserCreate, UserLogin, UserResponse
from tasktrack.telemetry import record_login_failure

router = APIRouter(prefix="/auth", tags=["auth"])


def _auth_response(user: User, issued: IssuedToken) -> AuthResponse:
    return AuthResponse(
        user=UserResponse.model_validate(user),
        access_token=issued.token,
        expires_at=issued.expires_at,
    )


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register(user_data: UserCreate, db: DatabaseSession, settings: AppSettings):
    """
    Register a new user.

    Args:
        user_data: User registration data
        db: Database session
        settings: Application settings

    Returns:
        Created user and an access token
    """
    user, issued = register_user(
        db,
        settings,
        first_name=user_data.first_name,
        last_name=user_data.last_name,
        email=user_data.email,
        password=user_data.password,
    )
    return _auth_response(user, issued)


@router.post("/login", response_model=AuthResponse)
def login(credentials: UserLogin, db: DatabaseSession, settings: AppSettings):
    """
    Login and get an access token.

    Unknown emails and wrong passwords get the same 401 response.
    """
    try:
        user, issued = login_user(db, settings, credentials.email, credentials.password)
    except InvalidCredentials:
        record_login_failure()
        raise
    return _auth_response(user, issued)


@router.get("/me", response_model=UserResponse)
def get_current_user(scope: CurrentScope):
    """Get current authenticated user."""
    return scope.user
