import logging

from django.conf import settings
from django.http import JsonResponse
from django.db import connection

logger = logging.getLogger(__name__)


def health_check(request):
    status = {"db": "unknown"}
    try:
        # Check DB
        with connection.cursor() as cursor:
            cursor.execute("SELECT 1")
        status["db"] = "ok"

        if settings.REDIS_URL:
            from django_redis import get_redis_connection

            status["redis"] = "unknown"
            get_redis_connection("default").ping()
            status["redis"] = "ok"

        return JsonResponse({"status": "ok", "components": status}, status=200)
    except Exception:
        logger.exception("Health check failed")
        return JsonResponse(
            {"status": "error", "components": status},
            status=503
        )
