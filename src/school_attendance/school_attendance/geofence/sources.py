from __future__ import annotations

import asyncio
from typing import Optional, Protocol

from ..common.validators import require_float
from ..core.exceptions import PositionPermissionDenied, PositionTimeout, PositionUnavailable
from .model import Coordinate, ReferenceZone


class PositionSource(Protocol):
    """Supplies the caller's current coordinates.

    Fails with PositionPermissionDenied, PositionUnavailable or PositionTimeout.
    """

    async def get_position(self) -> Coordinate:
        raise NotImplementedError


class ZoneSource(Protocol):
    """Supplies the configured reference zone, or None when unset."""

    async def get_zone(self) -> Optional[ReferenceZone]:
        raise NotImplementedError


# W3C GeolocationPositionError codes as reported by the browser.
GEOLOCATION_PERMISSION_DENIED = 1
GEOLOCATION_POSITION_UNAVAILABLE = 2
GEOLOCATION_TIMEOUT = 3

_ERRORS_BY_CODE = {
    GEOLOCATION_PERMISSION_DENIED: PositionPermissionDenied,
    GEOLOCATION_POSITION_UNAVAILABLE: PositionUnavailable,
    GEOLOCATION_TIMEOUT: PositionTimeout,
}


class ReportedPositionSource:
    """Position reported by the client along with its check-in request.

    The browser either sends coordinates, or the error code it got from
    ``navigator.geolocation.getCurrentPosition``; the latter is raised as the
    matching PositionError. Unknown codes count as unavailable.
    """

    def __init__(self, coordinate: Optional[Coordinate] = None, *, error_code: Optional[int] = None, message: str = ""):
        if coordinate is None and error_code is None:
            error_code = GEOLOCATION_POSITION_UNAVAILABLE
        self._coordinate = coordinate
        self._error_code = error_code
        self._message = message

    @classmethod
    def from_payload(cls, payload: dict) -> "ReportedPositionSource":
        """Build from a JSON body: ``{"latitude", "longitude"}`` or ``{"error_code"}``."""

        error_code = payload.get("error_code")
        if error_code is not None:
            try:
                code = int(error_code)
            except (TypeError, ValueError):
                code = GEOLOCATION_POSITION_UNAVAILABLE
            return cls(error_code=code, message=str(payload.get("error_message") or ""))

        if payload.get("latitude") is None or payload.get("longitude") is None:
            return cls(error_code=GEOLOCATION_POSITION_UNAVAILABLE, message="No position reported")

        return cls(
            Coordinate(
                latitude=require_float(payload.get("latitude"), "latitude"),
                longitude=require_float(payload.get("longitude"), "longitude"),
            )
        )

    async def get_position(self) -> Coordinate:
        if self._error_code is not None:
            error_cls = _ERRORS_BY_CODE.get(self._error_code, PositionUnavailable)
            raise error_cls(self._message or error_cls.__doc__)
        return self._coordinate


class StaticZoneSource:
    """Zone source returning a fixed zone (or None)."""

    def __init__(self, zone: Optional[ReferenceZone]):
        self._zone = zone

    async def get_zone(self) -> Optional[ReferenceZone]:
        return self._zone


class RepositoryZoneSource:
    """Adapts a synchronous ZoneRepository to the async ZoneSource protocol."""

    def __init__(self, zones):
        self._zones = zones

    async def get_zone(self) -> Optional[ReferenceZone]:
        return await asyncio.to_thread(self._zones.get_current)
