"""FastAPI dependencies for authentication and database."""
import logging
from typing import Annotated

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from tasktrack.config import Settings, get_settings
from tasktrack.core.auth import create_scope
from tasktrack.core.errors import TokenError
from tasktrack.core.scope import Scope
from tasktrack.database import get_db
from tasktrack.telemetry import record_token_rejection

logger = logging.getLogger(__name__)

# HTTP Bearer token authentication
bearer_scheme = HTTPBearer(auto_error=False)

UNAUTHENTICATED_HEADERS = {"WWW-Authenticate": "Bearer"}


def get_current_user_from_token(
    token: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> Scope:
    """
    Get current user from Bearer token.

    Every kind of token rejection produces the same 401 response; the
    specific kind is only logged and counted.

    Args:
        token: Bearer token from Authorization header
        db: Database session
        settings: Application settings

    Returns:
        Scope object with current user

    Raises:
        HTTPException: If token is invalid or missing
    """
    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers=UNAUTHENTICATED_HEADERS,
        )

    try:
        return create_scope(db, token.credentials, settings)
    except TokenError as e:
        logger.info(f"Rejected bearer token ({e.kind}): {e}")
        record_token_rejection(e.kind)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authentication credentials",
            headers=UNAUTHENTICATED_HEADERS,
        ) from e


# Type aliases for cleaner dependency injection
CurrentScope = Annotated[Scope, Depends(get_current_user_from_token)]
DatabaseSession = Annotated[Session, Depends(get_db)]
AppSettings = Annotated[Settings, Depends(get_settings)]
