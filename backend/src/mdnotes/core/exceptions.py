"""Domain errors raised by repositories and services.

Every error carries an ``ErrorKind`` tag plus the identifier that caused it, so
the API layer can map it to a status code with a single handler.
"""

from enum import Enum
from typing import Any, Optional


class ErrorKind(str, Enum):
    """Error categories exposed to clients."""

    NOT_FOUND = "not_found"
    ALIAS_CONFLICT = "alias_conflict"
    AUTHORIZATION_DENIED = "authorization_denied"
    VALIDATION = "validation"


class MdNotesError(Exception):
    """Base class for all domain errors."""

    kind: ErrorKind = ErrorKind.VALIDATION

    def __init__(self, message: str, identifier: Optional[Any] = None) -> None:
        self.message = message
        self.identifier = identifier
        super().__init__(message)

    def to_details(self) -> dict[str, Any]:
        details: dict[str, Any] = {"kind": self.kind.value}
        if self.identifier is not None:
            details["identifier"] = str(self.identifier)
        return details


class NotFoundError(MdNotesError):
    """Raised when a note, revision, user, group or history entry does not exist."""

    kind = ErrorKind.NOT_FOUND


class AliasConflictError(MdNotesError):
    """Raised when a note is created with an alias that is already taken."""

    kind = ErrorKind.ALIAS_CONFLICT

    def __init__(self, alias: str) -> None:
        super().__init__(f"Alias '{alias}' is already in use", identifier=alias)


class AuthorizationDeniedError(MdNotesError):
    """Raised when the actor lacks the permission required for an action.

    ``anonymous`` tells the API layer whether to answer 401 (no identity) or
    403 (known identity without the grant).
    """

    kind = ErrorKind.AUTHORIZATION_DENIED

    def __init__(self, action: str, identifier: Optional[Any] = None, anonymous: bool = False) -> None:
        self.action = action
        self.anonymous = anonymous
        super().__init__(f"{action.capitalize()} denied!", identifier=identifier)


class InvalidInputError(MdNotesError):
    """Raised for malformed content, aliases or access lists."""

    kind = ErrorKind.VALIDATION
