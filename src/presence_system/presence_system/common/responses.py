from __future__ import annotations

import logging

from flask import Flask, jsonify

from ..core.enums import ErrorKind
from ..core.exceptions import DomainError

STATUS_BY_KIND = {
    ErrorKind.INVALID_REQUEST: 400,
    ErrorKind.UNAUTHORIZED: 401,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.CONFLICT: 409,
    ErrorKind.INTERNAL: 500,
}


def error_body(message: str, details=None) -> dict:
    body = {"status": "error", "error": message}
    if details:
        body["details"] = details
    return body


def register_error_handlers(app: Flask) -> None:
    log = logging.getLogger("presence_system.http")

    @app.errorhandler(DomainError)
    def handle_domain_error(e: DomainError):
        status = STATUS_BY_KIND.get(e.kind, 500)
        if status >= 500:
            log.error("[HTTP] %s", e.message)
        return jsonify(error_body(e.message, e.details())), status

    @app.errorhandler(404)
    def handle_not_found(_e):
        return jsonify(error_body("resource not found")), 404

    @app.errorhandler(405)
    def handle_method_not_allowed(_e):
        return jsonify(error_body("method not allowed")), 405

    @app.errorhandler(500)
    def handle_internal_error(_e):
        return jsonify(error_body("internal server error")), 500
