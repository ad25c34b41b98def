"""Issue entity — a civic problem reported at a location."""

import math
from dataclasses import dataclass
from datetime import datetime

from app.domain.value_objects.enums import AssignmentMethod
from app.domain.value_objects.geo_point import GeoPoint


@dataclass
class Issue:
    id: str | None
    latitude: float | None
    longitude: float | None
    pincode: str | None = None
    address: str | None = None
    image_url: str | None = None
    created_at: datetime | None = None

    # Written by the assignment flow
    assigned_to: str | None = None
    assigned_at: datetime | None = None
    assignment_method: AssignmentMethod | None = None
    assignment_error: str | None = None

    # Written only by admin reassignment
    reassigned_at: datetime | None = None
    reassigned_by: str | None = None

    def has_coordinates(self) -> bool:
        return all(
            isinstance(c, (int, float)) and not isinstance(c, bool) and math.isfinite(c)
            for c in (self.latitude, self.longitude)
        )

    @property
    def location(self) -> GeoPoint | None:
        if not self.has_coordinates():
            return None
        return GeoPoint(latitude=float(self.latitude), longitude=float(self.longitude))

    def normalized_pincode(self) -> str | None:
        if self.pincode is None:
            return None
        code = self.pincode.strip()
        return code or None

    def is_pending(self) -> bool:
        return self.assignment_method is None
