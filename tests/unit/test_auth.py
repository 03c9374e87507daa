"""Unit tests for registration, login and token resolution."""
from datetime import UTC, datetime, timedelta
from unittest.mock import patch

import pytest

from tasktrack.core.auth import (
    authenticate_user,
    create_scope,
    create_user,
    find_user_by_email,
    login_user,
    register_user,
)
from tasktrack.core.errors import (
    DuplicateEmail,
    ExpiredToken,
    InvalidCredentials,
    InvalidSignature,
    UnknownSubject,
)
from tasktrack.core.tokens import issue_token, validate_token


def test_register_user(db_session, test_settings):
    """Registration stores a hashed password and returns a valid token."""
    user, issued = register_user(
        db_session, test_settings, "Alice", "Smith", "alice@x.com", "secret1"
    )

    assert user.id
    assert user.email == "alice@x.com"
    assert user.hashed_password != "secret1"
    assert validate_token(issued.token, test_settings.secret_key) == user.id
    assert issued.expires_at - issued.issued_at == timedelta(hours=1)


def test_register_duplicate_email(db_session, test_settings):
    """A second registration with the same email fails."""
    register_user(db_session, test_settings, "Alice", "Smith", "alice@x.com", "secret1")

    with pytest.raises(DuplicateEmail):
        register_user(db_session, test_settings, "Other", "Alice", "alice@x.com", "secret2")


def test_register_duplicate_email_ignores_case(db_session, test_settings):
    """Emails are compared case-insensitively."""
    register_user(db_session, test_settings, "Alice", "Smith", "alice@x.com", "secret1")

    with pytest.raises(DuplicateEmail):
        register_user(db_session, test_settings, "Alice", "Smith", "ALICE@X.com", "secret1")


def test_create_user_late_collision(db_session, make_user):
    """A unique-index violation that slips past the lookup is a duplicate email."""
    make_user("alice@x.com")

    with patch("tasktrack.core.auth.find_user_by_email", return_value=None):
        with pytest.raises(DuplicateEmail):
            create_user(db_session, "Alice", "Smith", "alice@x.com", "secret1")

    # Session is usable again after the rollback
    assert find_user_by_email(db_session, "alice@x.com") is not None


def test_login_user(db_session, test_settings, make_user):
    """Correct credentials issue a token for the user."""
    alice = make_user("alice@x.com", "secret1")

    user, issued = login_user(db_session, test_settings, "alice@x.com", "secret1")

    assert user.id == alice.id
    assert validate_token(issued.token, test_settings.secret_key) == alice.id


def test_login_wrong_password_and_unknown_email_look_the_same(db_session, make_user):
    """Both failures raise the same error with the same message."""
    make_user("alice@x.com", "secret1")

    with pytest.raises(InvalidCredentials) as wrong_password:
        authenticate_user(db_session, "alice@x.com", "wrong")
    with pytest.raises(InvalidCredentials) as unknown_email:
        authenticate_user(db_session, "nobody@x.com", "secret1")

    assert type(wrong_password.value) is type(unknown_email.value)
    assert str(wrong_password.value) == str(unknown_email.value)


def test_login_unknown_email_still_verifies_a_hash(db_session):
    """An unknown email spends a dummy verification."""
    with patch("tasktrack.core.auth.dummy_verify") as dummy:
        with pytest.raises(InvalidCredentials):
            authenticate_user(db_session, "nobody@x.com", "secret1")
    dummy.assert_called_once()


def test_create_scope(db_session, test_settings, make_user):
    """A valid token resolves to its user."""
    alice = make_user("alice@x.com")
    issued = issue_token(alice.id, test_settings.secret_key, "1h")

    scope = create_scope(db_session, issued.token, test_settings)
    assert scope.user.id == alice.id


def test_create_scope_unknown_subject(db_session, test_settings):
    """A valid token for a user that does not exist is rejected."""
    issued = issue_token("ghost", test_settings.secret_key, "1h")

    with pytest.raises(UnknownSubject):
        create_scope(db_session, issued.token, test_settings)


def test_create_scope_propagates_token_errors(db_session, test_settings, make_user):
    """Expired and foreign tokens keep their specific kinds."""
    alice = make_user("alice@x.com")
    expired = issue_token(
        alice.id, test_settings.secret_key, "1h", now=datetime.now(UTC) - timedelta(days=1)
    )
    foreign = issue_token(alice.id, "some-other-secret-that-is-32-chars-long", "1h")

    with pytest.raises(ExpiredToken):
        create_scope(db_session, expired.token, test_settings)
    with pytest.raises(InvalidSignature):
        create_scope(db_session, foreign.token, test_settings)
