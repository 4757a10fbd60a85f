from __future__ import annotations

import asyncio
import logging
import math

from ..core.constants import EARTH_RADIUS_METERS
from ..core.enums import FailureReason
from ..core.exceptions import (
    ConfigurationError,
    PositionPermissionDenied,
    PositionTimeout,
    PositionUnavailable,
)
from .model import Coordinate, ReferenceZone, ValidationOutcome
from .sources import PositionSource, ZoneSource

logger = logging.getLogger(__name__)


def compute_distance(a: Coordinate, b: Coordinate) -> float:
    """Great-circle distance in meters between two coordinates (Haversine)."""

    phi1 = math.radians(a.latitude)
    phi2 = math.radians(b.latitude)
    d_phi = math.radians(b.latitude - a.latitude)
    d_lambda = math.radians(b.longitude - a.longitude)

    h = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    # Rounding can push h slightly outside [0, 1] near antipodes.
    h = min(1.0, max(0.0, h))

    return 2 * EARTH_RADIUS_METERS * math.atan2(math.sqrt(h), math.sqrt(1 - h))


class GeofenceValidator:
    """Decides whether an observed position lies inside a reference zone.

    ``validate`` is pure. ``validate_current_position`` is a thin async
    wrapper that acquires the position and the zone, translating acquisition
    failures into ``ValidationOutcome.failure_reason`` instead of raising.
    """

    def validate(self, observed: Coordinate, zone: ReferenceZone) -> ValidationOutcome:
        radius = zone.radius_meters
        if isinstance(radius, bool) or not isinstance(radius, (int, float)) or not math.isfinite(radius) or radius <= 0:
            raise ConfigurationError(f"Reference zone radius must be a positive number of meters, got {radius!r}")

        distance = compute_distance(observed, zone.center)
        return ValidationOutcome(
            admitted=distance <= radius,
            distance_meters=int(math.floor(distance + 0.5)),
        )

    async def validate_current_position(
        self,
        position_source: PositionSource,
        zone_source: ZoneSource,
    ) -> ValidationOutcome:
        position_result, zone_result = await asyncio.gather(
            position_source.get_position(),
            zone_source.get_zone(),
            return_exceptions=True,
        )

        if isinstance(position_result, BaseException):
            reason = _position_failure_reason(position_result)
            if reason is None:
                raise position_result
            logger.warning("Position unavailable for geofence check: %s", reason.value)
            return ValidationOutcome.failure(reason)

        if isinstance(zone_result, BaseException):
            raise zone_result
        if zone_result is None:
            logger.warning("Geofence check requested but no reference zone is configured")
            return ValidationOutcome.failure(FailureReason.ZONE_NOT_CONFIGURED)

        return self.validate(position_result, zone_result)


def _position_failure_reason(exc: BaseException) -> FailureReason | None:
    if isinstance(exc, PositionPermissionDenied):
        return FailureReason.POSITION_PERMISSION_DENIED
    if isinstance(exc, PositionTimeout):
        return FailureReason.POSITION_TIMEOUT
    if isinstance(exc, PositionUnavailable):
        return FailureReason.POSITION_UNAVAILABLE
    return None
