"""Role names for RBAC."""

from enum import StrEnum


class RoleName(StrEnum):
    """Roles ordered from least to most privileged."""

    EMPLOYEE = "employee"
    MANAGER = "manager"
    HR = "hr"
    ADMIN = "admin"

    @classmethod
    def parse(cls, value: "str | RoleName | None") -> "RoleName | None":
        """Return the role for value, or None if it is not a known role."""
        if value is None:
            return None
        try:
            return cls(value)
        except ValueError:
            return None
