"""Signed, time-bound bearer tokens (JWT, HMAC)."""

import logging
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

import jwt

from tasktrack.core.duration import parse_duration
from tasktrack.core.errors import (
    ConfigurationError,
    ExpiredToken,
    InvalidSignature,
    MalformedToken,
)

logger = logging.getLogger(__name__)

DEFAULT_ALGORITHM = "HS256"
HMAC_ALGORITHMS = frozenset({"HS256", "HS384", "HS512"})
REQUIRED_CLAIMS = ["sub", "iat", "exp"]
EXPIRY_LEEWAY = timedelta(seconds=1)


@dataclass(frozen=True)
class IssuedToken:
    """A freshly minted token together with the claims it carries."""

    token: str
    subject: str
    issued_at: datetime
    expires_at: datetime


def issue_token(
    subject: str,
    secret: str | bytes,
    ttl: str | timedelta,
    algorithm: str = DEFAULT_ALGORITHM,
    now: datetime | None = None,
) -> IssuedToken:
    """
    Issue a signed token asserting ``subject``.

    Args:
        subject: User ID the token identifies
        secret: Server signing secret
        ttl: Token lifetime, as a timedelta or a duration string like ``24h``
        algorithm: HMAC algorithm to sign with
        now: Issuance time, defaults to the current UTC time

    Returns:
        The encoded token with its issued/expiry timestamps

    Raises:
        ConfigurationError: If ``ttl`` is not a positive duration or the
            expiry falls outside the datetime range
    """
    lifetime = parse_duration(ttl)
    issued_at = (now or datetime.now(UTC)).replace(microsecond=0)
    try:
        expires_at = issued_at + lifetime
    except OverflowError as e:
        raise ConfigurationError(f"Token lifetime {lifetime} overflows from {issued_at}") from e

    payload = {
        "sub": subject,
        "iat": issued_at,
        "exp": expires_at,
    }
    token = jwt.encode(payload, secret, algorithm=algorithm)

    return IssuedToken(
        token=token,
        subject=subject,
        issued_at=issued_at,
        expires_at=expires_at,
    )


def validate_token(
    token: str,
    secret: str | bytes,
    algorithm: str = DEFAULT_ALGORITHM,
) -> str:
    """
    Validate a token and return its subject.

    Only ``algorithm`` is accepted. A token whose header names any other
    algorithm, including ``none`` or another HMAC size, is rejected as an
    invalid signature rather than verified with it.

    Args:
        token: Encoded token
        secret: Server signing secret
        algorithm: Expected HMAC algorithm

    Returns:
        The token subject (user ID)

    Raises:
        MalformedToken: If the token cannot be decoded or lacks required claims
        InvalidSignature: If the signature or algorithm does not match
        ExpiredToken: If the token is past its expiry time
    """
    if algorithm not in HMAC_ALGORITHMS:
        raise InvalidSignature(f"Unsupported signing algorithm: {algorithm}")

    try:
        # exp is in whole seconds and PyJWT expires at exp <= now; the
        # one-second leeway keeps the token valid through its expiry second.
        claims = jwt.decode(
            token,
            secret,
            algorithms=[algorithm],
            leeway=EXPIRY_LEEWAY,
            options={
                "verify_signature": True,
                "verify_exp": True,
                "verify_iat": True,
                "require": REQUIRED_CLAIMS,
            },
        )
    except jwt.ExpiredSignatureError as e:
        raise ExpiredToken() from e
    except (jwt.InvalidSignatureError, jwt.InvalidAlgorithmError) as e:
        raise InvalidSignature() from e
    except jwt.InvalidTokenError as e:
        raise MalformedToken(f"Token is malformed: {e}") from e

    subject = claims.get("sub")
    if not isinstance(subject, str) or not subject:
        raise MalformedToken("Token subject is missing")

    return subject
