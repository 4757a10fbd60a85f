from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional

from ..core.constants import MAX_LATITUDE, MAX_LONGITUDE, MIN_LATITUDE, MIN_LONGITUDE
from ..core.enums import FailureReason
from ..core.exceptions import ValidationError


@dataclass(frozen=True)
class Coordinate:
    """A geographic point in decimal degrees.

    Out-of-range values are rejected at construction, never clamped.
    """

    latitude: float
    longitude: float

    def __post_init__(self) -> None:
        for name, value, low, high in (
            ("latitude", self.latitude, MIN_LATITUDE, MAX_LATITUDE),
            ("longitude", self.longitude, MIN_LONGITUDE, MAX_LONGITUDE),
        ):
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise ValidationError(f"{name} must be a number, got {value!r}")
            if not math.isfinite(value):
                raise ValidationError(f"{name} must be finite, got {value!r}")
            if value < low or value > high:
                raise ValidationError(f"{name} must be between {low:g} and {high:g}, got {value!r}")

    def to_dict(self) -> dict:
        return {"latitude": self.latitude, "longitude": self.longitude}


@dataclass(frozen=True)
class ReferenceZone:
    """The school's admissible check-in area: a circle around ``center``.

    ``radius_meters`` is checked by the validator rather than here so that a
    misconfigured stored zone surfaces as a ConfigurationError at check-in.
    """

    center: Coordinate
    radius_meters: float
    name: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "latitude": self.center.latitude,
            "longitude": self.center.longitude,
            "radius_meters": self.radius_meters,
        }


@dataclass(frozen=True)
class ValidationOutcome:
    """Result of one validation attempt. Built fresh per call, never mutated.

    ``admitted`` is decided on the unrounded distance; ``distance_meters`` is
    rounded half up, so a point 100.4m from a 100m zone is rejected while
    reporting 100.
    """

    admitted: bool
    distance_meters: int
    failure_reason: Optional[FailureReason] = None

    @classmethod
    def failure(cls, reason: FailureReason) -> "ValidationOutcome":
        return cls(admitted=False, distance_meters=0, failure_reason=reason)

    def to_dict(self) -> dict:
        return {
            "admitted": self.admitted,
            "distance_meters": self.distance_meters,
            "failure_reason": self.failure_reason.value if self.failure_reason else None,
        }
