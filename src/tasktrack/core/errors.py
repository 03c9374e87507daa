"""Domain exceptions raised by the identity and access-control core.

The web layer maps each of these to an HTTP response in
``tasktrack.api.errors``; nothing here knows about HTTP.
"""


class TaskTrackError(Exception):
    """Base class for all domain errors."""

    message = "Application error"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.message)


class HashingFailure(TaskTrackError):
    """Password hashing could not be performed (entropy or resource exhaustion)."""

    message = "Password hashing failed"


class ConfigurationError(TaskTrackError):
    """Invalid process-wide configuration, such as a malformed token lifetime."""

    message = "Invalid configuration"


class TokenError(TaskTrackError):
    """Base class for bearer token rejections.

    Subclasses are kept distinct for server-side logging and metrics, but
    clients only ever see a single "unauthenticated" response.
    """

    message = "Invalid token"
    kind = "invalid"


class MalformedToken(TokenError):
    message = "Token is malformed"
    kind = "malformed"


class InvalidSignature(TokenError):
    """Signature does not verify with the server secret and algorithm."""

    message = "Token signature is invalid"
    kind = "invalid_signature"


class ExpiredToken(TokenError):
    message = "Token has expired"
    kind = "expired"


class UnknownSubject(TokenError):
    """Token verifies but its subject no longer maps to a user."""

    message = "Token subject does not exist"
    kind = "unknown_subject"


class InvalidCredentials(TaskTrackError):
    """Login failed. Raised for unknown emails and wrong passwords alike."""

    message = "Invalid email or password"


class UnacceptablePassword(TaskTrackError):
    """Password contains something the hash algorithm cannot represent."""

    message = "Password contains unsupported characters"


class DuplicateEmail(TaskTrackError):
    message = "Email is already registered"


class AssigneeNotFound(TaskTrackError):
    message = "Assignee does not exist"

    def __init__(self, assignee_id: str):
        self.assignee_id = assignee_id
        super().__init__(f"Assignee {assignee_id} does not exist")


class NotVisible(TaskTrackError):
    """Task is missing or the actor has no relation to it."""

    message = "Task not found"


class NotPermitted(TaskTrackError):
    """Actor can see the task but is not its creator."""

    message = "Only the task creator can modify this task"
