"""Reason codes attached to permission decisions."""

from enum import StrEnum


class DecisionReason(StrEnum):
    """Why a decision was allowed or denied."""

    ROLE_GRANTED = "role_granted"
    OVERRIDE_GRANTED = "override_granted"
    OVERRIDE_DENIED = "override_denied"
    NO_GRANT = "no_grant"
    INVALID_REQUEST = "invalid_request"
