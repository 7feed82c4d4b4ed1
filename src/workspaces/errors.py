"""Error taxonomy for workspace provisioning and membership governance.

Every failure surfaces as a distinct type; the HTTP layer maps each one to
a status code.
"""


class WorkspaceError(Exception):
    """Base error for the workspace core."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class NotFoundError(WorkspaceError):
    """A referenced workspace, user, or hostname does not exist."""


class ValidationFailedError(WorkspaceError):
    """Malformed input, or an owner-invariant violation."""


class PermissionDeniedError(WorkspaceError):
    """The acting user may not perform this role change."""


class ConflictError(WorkspaceError):
    """The store rejected a write on a uniqueness constraint."""


class AllocationExhaustedError(WorkspaceError):
    """No unused hostname was found within the attempt budget."""
