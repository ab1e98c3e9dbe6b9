"""Default HR permission matrix: resources, role inheritance and direct grants."""

from hrauthz.domain.catalog import ResourceDefinition

RESOURCES: list[ResourceDefinition] = [
    ResourceDefinition(
        name="users",
        label="User Management",
        description="Manage user accounts, profiles, and access",
        actions=("view", "create", "update", "delete", "admin"),
    ),
    ResourceDefinition(
        name="departments",
        label="Department Management",
        description="Manage organizational departments",
        actions=("view", "create", "update", "delete"),
    ),
    ResourceDefinition(
        name="teams",
        label="Team Management",
        description="Manage teams within departments",
        actions=("view", "create", "update", "delete", "assign"),
    ),
    ResourceDefinition(
        name="performance_reviews",
        label="Performance Reviews",
        description="Manage performance review cycles and evaluations",
        actions=("view", "create", "update", "delete", "approve", "assign"),
    ),
    ResourceDefinition(
        name="goals",
        label="Goal Management",
        description="Manage individual and team goals",
        actions=("view", "create", "update", "delete", "assign"),
    ),
    ResourceDefinition(
        name="meetings",
        label="1:1 Meetings",
        description="Schedule and manage one-on-one meetings",
        actions=("view", "create", "update", "delete"),
    ),
    ResourceDefinition(
        name="surveys",
        label="Survey Management",
        description="Create and manage employee surveys",
        actions=("view", "create", "update", "delete", "assign"),
    ),
    ResourceDefinition(
        name="analytics",
        label="Analytics & Reporting",
        description="Access analytics dashboards and reports",
        actions=("view", "create", "update", "delete"),
    ),
    ResourceDefinition(
        name="feedback",
        label="Feedback System",
        description="Give and receive feedback",
        actions=("view", "create", "update", "delete"),
    ),
    ResourceDefinition(
        name="settings",
        label="System Settings",
        description="Configure system settings and permissions",
        actions=("view", "update", "admin"),
    ),
]

# Single chain: employee < manager < hr < admin
ROLE_PARENTS: dict[str, list[str]] = {
    "employee": [],
    "manager": ["employee"],
    "hr": ["manager"],
    "admin": ["hr"],
}

# Direct grants only; inherited permissions are resolved from ROLE_PARENTS.
ROLE_GRANTS: dict[str, dict[str, list[str]]] = {
    "employee": {
        "users": ["view"],
        "departments": ["view"],
        "teams": ["view"],
        "performance_reviews": ["view", "update"],
        "goals": ["view", "create", "update"],
        "meetings": ["view", "create", "update"],
        "surveys": ["view", "update"],
        "feedback": ["view", "create", "update"],
    },
    "manager": {
        "users": ["update"],
        "teams": ["update"],
        "performance_reviews": ["create", "approve", "assign"],
        "goals": ["assign"],
        "meetings": ["delete"],
        "analytics": ["view"],
        "feedback": ["delete"],
    },
    "hr": {
        "users": ["create", "delete"],
        "departments": ["create", "update", "delete"],
        "teams": ["create", "delete", "assign"],
        "performance_reviews": ["delete"],
        "goals": ["delete"],
        "surveys": ["create", "delete", "assign"],
        "analytics": ["create", "update"],
        "settings": ["view", "update"],
    },
    "admin": {
        "users": ["admin"],
        "analytics": ["delete"],
        "settings": ["admin"],
    },
}
