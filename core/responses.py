from rest_framework import status as http_status
from rest_framework.response import Response


def success_response(data=None, *, status=http_status.HTTP_200_OK, message=None, **extra):
    """Wrap a payload in the ``{"success": true, "data": ...}`` envelope."""
    body = {"success": True}
    if data is not None:
        body["data"] = data
    if message:
        body["message"] = message
    body.update(extra)
    return Response(body, status=status)
