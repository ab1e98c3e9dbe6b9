"""hrauthz - role-based access control for the HR application."""

__version__ = "0.1.0"
