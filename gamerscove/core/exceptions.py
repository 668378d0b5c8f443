"""Errors raised by the friendship manager and its Relationship Stores.

Every error here is recoverable at the API boundary: the HTTP layer maps
them to a client-visible status and never retries.
"""


class FriendshipError(Exception):
    """Base exception for all friendship errors."""

    code = "friendship_error"

    def __init__(self, message: str, details: dict | None = None):
        """Initialize exception with message and optional details.

        Args:
            message: Human-readable error message
            details: Optional dictionary with additional error context
        """
        super().__init__(message)
        self.message = message
        self.details = details


class InvalidArgumentError(FriendshipError):
    """Raised for malformed or self-referential input (e.g. befriending yourself)."""

    code = "invalid_argument"


class ConflictError(FriendshipError):
    """Raised when a relationship already exists for the unordered user pair.

    Attributes:
        existing_status: Status of the record that blocked the request, when known
    """

    code = "conflict"

    def __init__(self, message: str, existing_status: str | None = None):
        super().__init__(message, details={"existing_status": existing_status})
        self.existing_status = existing_status


class NotFoundError(FriendshipError):
    """Raised when no relationship exists with the requested id."""

    code = "not_found"


class ForbiddenError(FriendshipError):
    """Raised when the acting user has no authority over the relationship."""

    code = "forbidden"


class InvalidStateError(FriendshipError):
    """Raised when a transition is attempted from a non-pending status."""

    code = "invalid_state"
