from __future__ import annotations

from flask import Flask, current_app, jsonify, request

from ..common.web import admin_required, error_response, login_required
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/zone", methods=["GET"], endpoint="get_zone")
    @login_required
    def get_zone():
        try:
            zone = container.zone_service.get_zone()
        except Exception as e:
            return error_response(e)
        return jsonify({"success": True, "configured": zone is not None, "zone": zone.to_dict() if zone else None})

    @app.route("/api/zone", methods=["PUT"], endpoint="update_zone")
    @admin_required
    def update_zone():
        data = request.get_json(silent=True) or {}
        try:
            zone = container.zone_service.update_zone(
                latitude=data.get("latitude"),
                longitude=data.get("longitude"),
                radius_meters=data.get("radius_meters"),
                name=data.get("name"),
            )
        except Exception as e:
            return error_response(e)
        return jsonify({"success": True, "zone": zone.to_dict()})

    @app.route("/api/geolocation/options", methods=["GET"], endpoint="geolocation_options")
    def geolocation_options():
        """Options the browser passes to navigator.geolocation.getCurrentPosition."""
        cfg = current_app.config
        return jsonify(
            {
                "enableHighAccuracy": bool(cfg["GEOLOCATION_HIGH_ACCURACY"]),
                "timeout": int(cfg["GEOLOCATION_TIMEOUT_MS"]),
                "maximumAge": int(cfg["GEOLOCATION_MAX_AGE_MS"]),
            }
        )
