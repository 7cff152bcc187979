"""Liveness and readiness probes for the camp tracker."""

import logging

from django.conf import settings
from django.db import DatabaseError, connection
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny
from rest_framework.response import Response

from camp.models import Beneficiary, Event

logger = logging.getLogger(__name__)


def _probe_response(checks):
    healthy = all(value == "ok" for value in checks.values())
    body = {"status": "healthy" if healthy else "unhealthy", "checks": checks}
    code = status.HTTP_200_OK if healthy else status.HTTP_503_SERVICE_UNAVAILABLE
    return Response(body, status=code)


def check_database():
    try:
        connection.ensure_connection()
    except DatabaseError as e:
        logger.error(f"Database connection check failed: {str(e)}")
        return "error"
    return "ok"


def check_camp_tables():
    """Run one cheap query against each camp table."""
    try:
        Event.objects.exists()
        Beneficiary.objects.exists()
    except DatabaseError as e:
        logger.error(f"Camp tables not reachable: {str(e)}")
        return "error"
    return "ok"


def check_object_store_config():
    missing = [
        name
        for name in ("OBJECT_STORE_URL", "OBJECT_STORE_BUCKET", "OBJECT_STORE_KEY")
        if not getattr(settings, name, "")
    ]
    if missing:
        logger.warning(f"Object store not configured: {', '.join(missing)} missing")
        return "missing " + ", ".join(missing)
    return "ok"


@api_view(["GET"])
@permission_classes([AllowAny])
def health_check(request):
    """
    Liveness: the process is up and can reach its database.

    Returns:
        200 OK: Database connection works
        503 Service Unavailable: Database unreachable
    """
    return _probe_response({"database": check_database()})


@api_view(["GET"])
@permission_classes([AllowAny])
def readiness_check(request):
    """
    Readiness: volunteers can register beneficiaries and upload photos.

    Returns:
        200 OK: Camp tables are queryable and the photo store is configured
        503 Service Unavailable: Otherwise, with the failing check named
    """
    checks = {
        "camp_tables": check_camp_tables(),
        "object_store": check_object_store_config(),
    }
    return _probe_response(checks)
