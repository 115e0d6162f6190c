from __future__ import annotations

from flask import Flask, g, jsonify, request

from ..container import Container
from ..devices.auth import device_required
from .model import CheckinRequest, DailyCheckoutRequest


def register(app: Flask, container: Container) -> None:
    authenticated = device_required(container.device_service)

    @app.route("/api/iot/checkin", methods=["POST"], endpoint="iot_checkin")
    @authenticated
    def checkin():
        body = CheckinRequest.from_payload(request.get_json(silent=True))
        result = container.checkin_service.process_scan(g.device_ctx, body)
        return jsonify(result.to_dict()), 200

    @app.route("/api/iot/checkin/daily-checkout", methods=["POST"], endpoint="iot_daily_checkout")
    @authenticated
    def daily_checkout():
        body = DailyCheckoutRequest.from_payload(request.get_json(silent=True))
        result = container.checkin_service.confirm_daily_checkout(g.device_ctx, body)
        return jsonify(result.to_dict()), 200
