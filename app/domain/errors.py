"""Domain error taxonomy for authority routing."""


class RoutingError(Exception):
    """Base class for all routing errors."""


class PreconditionMissingError(RoutingError):
    """The issue cannot be resolved at all (e.g. no coordinates)."""


class LookupFailureError(RoutingError):
    """The authority store was unreachable or returned unusable data."""


class GeometryMalformedError(RoutingError):
    """A stored boundary ring cannot be interpreted as a polygon."""


class IssueNotFoundError(RoutingError):
    def __init__(self, issue_id: str):
        super().__init__(f"Issue {issue_id} not found")
        self.issue_id = issue_id


class AdminPermissionDeniedError(RoutingError):
    """Caller does not hold the administrative credential."""


class AdminInvalidArgumentError(RoutingError):
    """Admin request is missing arguments or references unknown data."""
