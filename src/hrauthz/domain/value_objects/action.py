"""Actions that can be performed on a resource."""

from enum import StrEnum


class Action(StrEnum):
    """Global action enumeration. Validity per resource is declared in the catalog."""

    VIEW = "view"
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"
    APPROVE = "approve"
    ASSIGN = "assign"
    ADMIN = "admin"
