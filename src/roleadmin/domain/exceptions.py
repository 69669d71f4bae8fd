"""Domain exceptions."""


class RoleAdminError(Exception):
    """Base exception for role administration."""

    pass


class InvalidArgument(RoleAdminError):
    """A required argument was missing."""

    pass


class NotFound(RoleAdminError):
    """Requested resource was not found."""

    def __init__(self, entity: str, key: object) -> None:
        super().__init__(f"{entity} not found: {key}")
        self.entity = entity
        self.key = key


class DuplicateRole(RoleAdminError):
    """A live role with the same role code already exists."""

    pass


class OptimisticLockFailure(RoleAdminError):
    """Role was changed by someone else since it was read."""

    pass


class PermissionDenied(RoleAdminError):
    """User does not hold the authority required for the action."""

    pass
