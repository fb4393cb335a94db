from __future__ import annotations

import logging
import uuid


logger = logging.getLogger(__name__)

DEVICE_ID_HEADER = "X-Device-ID"
MAX_DEVICE_ID_LENGTH = 128


class DeviceIdMiddleware:
    """
    Attaches the client's X-Device-ID to the request and echoes it back.

    The value is an opaque correlation id. It is never used to authenticate
    or authorize a request.
    """

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        device_id = (request.headers.get(DEVICE_ID_HEADER) or "").strip()[:MAX_DEVICE_ID_LENGTH]
        if not device_id:
            device_id = str(uuid.uuid4())
            logger.debug("Issued device id %s for %s %s", device_id, request.method, request.path)

        request.device_id = device_id
        response = self.get_response(request)
        response[DEVICE_ID_HEADER] = device_id
        return response
