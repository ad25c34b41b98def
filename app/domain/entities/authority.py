"""Authority entity — an administrative body that can own an issue."""

from dataclasses import dataclass, field

from app.domain.value_objects.geo_point import GeoPoint


@dataclass
class Authority:
    id: str
    name: str
    pincodes: set[str] = field(default_factory=set)
    # Raw ring as stored: [[lat, lon], ...]. Parsed lazily, may be malformed.
    polygon: list | None = None
    center: GeoPoint | None = None
    jurisdiction_code: str | None = None
    endpoint_tokens: list[str] = field(default_factory=list)

    def has_endpoints(self) -> bool:
        return bool(self.endpoint_tokens)
