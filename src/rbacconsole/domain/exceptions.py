"""Domain exceptions."""


class RBACConsoleError(Exception):
    """Base exception for RBAC Console."""

    pass


class ValidationError(RBACConsoleError):
    """Validation failed for input data."""

    pass


class NotFound(RBACConsoleError):
    """Requested resource was not found."""

    def __init__(self, entity: str, key: object) -> None:
        self.entity = entity
        self.key = key
        super().__init__(f'{entity} "{key}" not found')


class AlreadyExists(RBACConsoleError):
    """Store rejected the write because of a uniqueness constraint."""

    pass


class AlreadyAssigned(AlreadyExists):
    """Permission is already assigned to the role."""

    pass


class RemoteStoreError(RBACConsoleError):
    """Remote store call failed (network or database error)."""

    pass


class RefreshFailed(RemoteStoreError):
    """One of the reads of a full refresh failed; the mirror was kept."""

    pass


class Busy(RBACConsoleError):
    """Another call targeting the same id is still outstanding."""

    pass
