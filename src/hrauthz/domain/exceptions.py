"""Domain exceptions."""


class HRAuthzError(Exception):
    """Base exception for hrauthz."""

    pass


class ConfigurationError(HRAuthzError):
    """Catalog or role hierarchy is malformed. Raised at load time only."""

    pass


class InvalidRequest(HRAuthzError):
    """Caller asked about an unknown resource or an action the resource does not declare."""

    pass


class DuplicateOverride(HRAuthzError):
    """An active override already exists for the same user, resource and action."""

    pass


class PermissionDenied(HRAuthzError):
    """User does not have permission for the requested action."""

    pass


class NotFound(HRAuthzError):
    """Requested resource was not found."""

    pass


class ValidationError(HRAuthzError):
    """Validation failed for input data."""

    pass
