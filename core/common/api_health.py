import logging

from django.db import connection
from rest_framework.decorators import api_view
from rest_framework.response import Response

logger = logging.getLogger(__name__)


@api_view(["GET"])
def db_health(request):
    """
    GET /v1/health/db
    Response 200: { "ok": true }   Response 503: { "ok": false }
    """
    try:
        connection.ensure_connection()
        with connection.cursor() as c:
            c.execute("SELECT 1")
    except Exception:
        logger.exception("Database health check failed")
        return Response({"ok": False}, status=503)
    return Response({"ok": True})
