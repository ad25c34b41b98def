"""Domain enums — pure Python, no external dependencies."""

from enum import Enum

# Sentinel authority id written when no authority could be resolved.
UNASSIGNED = "UNASSIGNED"


class AssignmentMethod(str, Enum):
    PINCODE = "pincode"
    POLYGON = "polygon"
    DISTANCE = "distance"
    JURISDICTION_FALLBACK = "jurisdiction_fallback"
    ERROR = "error"
    UNASSIGNED = "unassigned"


class ResolutionState(str, Enum):
    RECEIVED = "received"
    RESOLVING = "resolving"
    ASSIGNED = "assigned"
    UNASSIGNED = "unassigned"
    ERROR = "error"
    NOTIFYING = "notifying"
    LOGGED = "logged"
