from __future__ import annotations

from functools import wraps

from flask import g, request

from .service import DeviceService


def device_required(devices: DeviceService):
    """Authenticate the calling RFID reader and expose it as ``g.device_ctx``.

    Expects ``X-Device-ID`` and ``Authorization: Bearer <api key>``;
    ``X-Staff-ID`` optionally names the supervising staff member.
    """

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            auth = request.headers.get("Authorization", "")
            api_key = auth[len("Bearer "):].strip() if auth.startswith("Bearer ") else ""
            g.device_ctx = devices.authenticate(
                request.headers.get("X-Device-ID", "").strip(),
                api_key,
                staff_id=request.headers.get("X-Staff-ID", "").strip() or None,
            )
            return view(*args, **kwargs)

        return wrapper

    return decorator
