from __future__ import annotations

from typing import Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_float, db_cursor, fetchone
from ..geofence.model import Coordinate, ReferenceZone
from .repository import ZoneRepository

_ZONE_ID = 1


class MySQLZoneRepository(ZoneRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_current(self) -> Optional[ReferenceZone]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT name, center_lat, center_lng, radius_meters
                FROM reference_zone
                WHERE zone_id=%s
                """,
                (_ZONE_ID,),
            )
            r = fetchone(cur)
            if not r:
                return None
            return ReferenceZone(
                center=Coordinate(latitude=as_float(r["center_lat"]), longitude=as_float(r["center_lng"])),
                radius_meters=as_float(r["radius_meters"]),
                name=r.get("name"),
            )

    def save(self, zone: ReferenceZone) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO reference_zone(zone_id, name, center_lat, center_lng, radius_meters)
                VALUES(%s,%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE
                    name=VALUES(name),
                    center_lat=VALUES(center_lat),
                    center_lng=VALUES(center_lng),
                    radius_meters=VALUES(radius_meters)
                """,
                (_ZONE_ID, zone.name, zone.center.latitude, zone.center.longitude, float(zone.radius_meters)),
            )
