from __future__ import annotations

import logging
from typing import Optional

from ..common.validators import require_float
from ..core.constants import RECOMMENDED_MAX_RADIUS_METERS, RECOMMENDED_MIN_RADIUS_METERS
from ..core.exceptions import ValidationError
from ..geofence.model import Coordinate, ReferenceZone
from ..geofence.sources import RepositoryZoneSource, ZoneSource
from .repository import ZoneRepository

logger = logging.getLogger(__name__)


class ZoneService:
    """Use case: administrators configure the school's check-in zone."""

    def __init__(self, zones: ZoneRepository):
        self._zones = zones

    def get_zone(self) -> Optional[ReferenceZone]:
        return self._zones.get_current()

    def zone_source(self) -> ZoneSource:
        return RepositoryZoneSource(self._zones)

    def update_zone(self, *, latitude, longitude, radius_meters, name: Optional[str] = None) -> ReferenceZone:
        center = Coordinate(
            latitude=require_float(latitude, "latitude"),
            longitude=require_float(longitude, "longitude"),
        )
        radius = require_float(radius_meters, "radius_meters")
        if radius <= 0:
            raise ValidationError("radius_meters must be greater than 0")

        if not RECOMMENDED_MIN_RADIUS_METERS <= radius <= RECOMMENDED_MAX_RADIUS_METERS:
            logger.warning(
                "Zone radius %.0fm is outside the recommended %d-%dm range",
                radius,
                RECOMMENDED_MIN_RADIUS_METERS,
                RECOMMENDED_MAX_RADIUS_METERS,
            )

        zone = ReferenceZone(center=center, radius_meters=radius, name=(name or "").strip() or None)
        self._zones.save(zone)
        logger.info(
            "Reference zone updated: center=(%.6f, %.6f) radius=%.0fm",
            center.latitude,
            center.longitude,
            radius,
        )
        return zone
