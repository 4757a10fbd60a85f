from __future__ import annotations

import asyncio
import math

import pytest

from src.school_attendance.school_attendance.core.constants import EARTH_RADIUS_METERS
from src.school_attendance.school_attendance.core.enums import FailureReason
from src.school_attendance.school_attendance.core.exceptions import (
    ConfigurationError,
    PositionPermissionDenied,
    PositionTimeout,
    PositionUnavailable,
)
from src.school_attendance.school_attendance.geofence.model import Coordinate, ReferenceZone
from src.school_attendance.school_attendance.geofence import validator as validator_module
from src.school_attendance.school_attendance.geofence.sources import StaticZoneSource
from src.school_attendance.school_attendance.geofence.validator import GeofenceValidator, compute_distance

CENTER = Coordinate(latitude=-6.2088, longitude=106.8456)
ZONE = ReferenceZone(center=CENTER, radius_meters=100)


class FixedPosition:
    def __init__(self, coordinate: Coordinate):
        self._coordinate = coordinate

    async def get_position(self) -> Coordinate:
        return self._coordinate


class FailingPosition:
    def __init__(self, exc: Exception):
        self._exc = exc

    async def get_position(self) -> Coordinate:
        raise self._exc


def test_center_is_admitted_at_zero_distance():
    outcome = GeofenceValidator().validate(CENTER, ZONE)

    assert outcome.admitted is True
    assert outcome.distance_meters == 0
    assert outcome.failure_reason is None


def test_22m_south_is_admitted():
    outcome = GeofenceValidator().validate(Coordinate(-6.2090, 106.8456), ZONE)

    assert outcome.admitted is True
    assert outcome.distance_meters == 22


def test_about_1km_south_is_rejected_without_failure_reason():
    outcome = GeofenceValidator().validate(Coordinate(-6.2180, 106.8456), ZONE)

    assert outcome.admitted is False
    assert outcome.failure_reason is None
    assert 1015 <= outcome.distance_meters <= 1030


@pytest.mark.parametrize("radius", [0, -5, float("nan")])
def test_non_positive_radius_is_a_configuration_error(radius):
    with pytest.raises(ConfigurationError):
        GeofenceValidator().validate(CENTER, ReferenceZone(center=CENTER, radius_meters=radius))


def test_antipodal_distance_is_finite():
    antipode = Coordinate(latitude=6.2088, longitude=-73.1544)

    distance = compute_distance(CENTER, antipode)

    assert math.isfinite(distance)
    assert distance == pytest.approx(math.pi * EARTH_RADIUS_METERS, abs=1.0)


def test_distance_is_symmetric():
    pairs = [
        (CENTER, Coordinate(-6.2180, 106.8456)),
        (Coordinate(51.5007, -0.1246), Coordinate(40.6892, -74.0445)),
        (Coordinate(89.9, 0.0), Coordinate(-89.9, 179.9)),
    ]
    for a, b in pairs:
        assert compute_distance(a, b) == pytest.approx(compute_distance(b, a), rel=1e-6)


def test_distance_to_itself_is_zero():
    for point in (CENTER, Coordinate(90, 180), Coordinate(-90, -180), Coordinate(0, 0)):
        assert compute_distance(point, point) == 0


def test_distance_grows_along_a_fixed_bearing():
    distances = [compute_distance(CENTER, Coordinate(CENTER.latitude - step * 0.001, CENTER.longitude)) for step in range(50)]

    assert distances == sorted(distances)
    assert all(d >= 0 for d in distances)


def test_boundary_distance_is_admitted():
    edge = Coordinate(-6.2095, 106.8461)
    exact = compute_distance(edge, CENTER)

    outcome = GeofenceValidator().validate(edge, ReferenceZone(center=CENTER, radius_meters=exact))

    assert outcome.admitted is True
    assert outcome.distance_meters == math.floor(exact + 0.5)


def test_current_position_inside_zone():
    outcome = asyncio.run(
        GeofenceValidator().validate_current_position(FixedPosition(Coordinate(-6.2090, 106.8456)), StaticZoneSource(ZONE))
    )

    assert outcome.admitted is True
    assert outcome.distance_meters == 22


def test_current_position_without_zone():
    outcome = asyncio.run(GeofenceValidator().validate_current_position(FixedPosition(CENTER), StaticZoneSource(None)))

    assert outcome.admitted is False
    assert outcome.distance_meters == 0
    assert outcome.failure_reason == FailureReason.ZONE_NOT_CONFIGURED


@pytest.mark.parametrize(
    "exc, reason",
    [
        (PositionPermissionDenied("denied"), FailureReason.POSITION_PERMISSION_DENIED),
        (PositionTimeout("slow"), FailureReason.POSITION_TIMEOUT),
        (PositionUnavailable("no gps"), FailureReason.POSITION_UNAVAILABLE),
    ],
)
def test_position_failures_become_failure_reasons(exc, reason):
    outcome = asyncio.run(GeofenceValidator().validate_current_position(FailingPosition(exc), StaticZoneSource(ZONE)))

    assert outcome.admitted is False
    assert outcome.distance_meters == 0
    assert outcome.failure_reason == reason


def test_unexpected_position_errors_propagate():
    with pytest.raises(RuntimeError):
        asyncio.run(GeofenceValidator().validate_current_position(FailingPosition(RuntimeError("boom")), StaticZoneSource(ZONE)))


def test_position_and_zone_are_awaited_concurrently():
    events: list[str] = []

    class SlowPosition:
        async def get_position(self):
            events.append("position:start")
            await asyncio.sleep(0.01)
            events.append("position:end")
            return CENTER

    class SlowZone:
        async def get_zone(self):
            events.append("zone:start")
            await asyncio.sleep(0.01)
            events.append("zone:end")
            return ZONE

    outcome = asyncio.run(GeofenceValidator().validate_current_position(SlowPosition(), SlowZone()))

    assert outcome.admitted is True
    assert events[:2] == ["position:start", "zone:start"]


@pytest.mark.parametrize("raw, reported", [(22.5, 23), (22.49, 22), (0.5, 1), (99.5, 100)])
def test_reported_distance_rounds_half_up(monkeypatch, raw, reported):
    monkeypatch.setattr(validator_module, "compute_distance", lambda a, b: raw)

    outcome = GeofenceValidator().validate(CENTER, ZONE)

    assert outcome.distance_meters == reported


def test_admission_uses_unrounded_distance(monkeypatch):
    monkeypatch.setattr(validator_module, "compute_distance", lambda a, b: 100.4)

    outcome = GeofenceValidator().validate(CENTER, ZONE)

    assert outcome.admitted is False
    assert outcome.distance_meters == 100
