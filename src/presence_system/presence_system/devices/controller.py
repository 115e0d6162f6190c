from __future__ import annotations

from flask import Flask, g, jsonify

from ..container import Container
from .auth import device_required


def register(app: Flask, container: Container) -> None:
    authenticated = device_required(container.device_service)

    @app.route("/api/iot/ping", methods=["POST"], endpoint="iot_ping")
    @authenticated
    def ping():
        result = container.device_service.ping(g.device_ctx.device)
        return jsonify(result.to_dict()), 200

    @app.route("/api/iot/status", methods=["GET"], endpoint="iot_status")
    @authenticated
    def status():
        return jsonify(container.device_service.status(g.device_ctx.device)), 200
