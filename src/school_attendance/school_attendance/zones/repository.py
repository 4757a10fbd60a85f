from __future__ import annotations

from typing import Optional, Protocol

from ..geofence.model import ReferenceZone


class ZoneRepository(Protocol):
    """Storage for the single authoritative reference zone."""

    def get_current(self) -> Optional[ReferenceZone]:
        raise NotImplementedError

    def save(self, zone: ReferenceZone) -> None:
        """Replace the current zone. No history is kept."""

        raise NotImplementedError
