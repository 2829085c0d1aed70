import logging

from django.core.cache import cache
from django.db import connection
from django.http import JsonResponse

logger = logging.getLogger(__name__)


def health_check(request):
    status = {"db": False, "cache": False}

    # DB
    try:
        with connection.cursor() as c:
            c.execute("SELECT 1")
        status["db"] = True
    except Exception:
        logger.warning("health: database unreachable", exc_info=True)

    # Cache (Redis in production; holds OTP + analysis state)
    try:
        cache.set("health:ping", "1", timeout=5)
        status["cache"] = cache.get("health:ping") == "1"
    except Exception:
        logger.warning("health: cache unreachable", exc_info=True)

    http_status = 200 if all(status.values()) else 503
    return JsonResponse(status, status=http_status)
