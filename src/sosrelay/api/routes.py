"""
API routes.

Endpoints (each also served under the `/api` prefix used by older clients):
- GET  `/health`: liveness + active resolver strategy + cache stats.
- POST `/sos`: send (`sos_alert`) or resolve (`stop`) an SOS to the sender's district topic.
- POST `/get-district`: resolve a coordinate to its district/topic (location-based strategies only).
- POST `/test-sos`, `/test-push`: send a canned alert through the `/sos` path for manual checks.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Any

from fastapi import APIRouter, Body, HTTPException

from sosrelay.alerts.dispatcher import FirebasePublisher, NotificationDispatcher
from sosrelay.alerts.normalizer import topic_for
from sosrelay.alerts.service import AlertOutcome, AlertService, build_test_alert
from sosrelay.alerts.validation import parse_coordinate
from sosrelay.config.settings import get_settings
from sosrelay.core.time import utc_now_iso
from sosrelay.domain.models import AlertKind
from sosrelay.resolver.base import DistrictQuery, DistrictResolver
from sosrelay.resolver.factory import build_resolver

router = APIRouter()


@lru_cache
def _resolver() -> DistrictResolver:
    return build_resolver(get_settings())


@lru_cache
def _dispatcher() -> NotificationDispatcher:
    return NotificationDispatcher(FirebasePublisher(get_settings().messaging))


def _service() -> AlertService:
    return AlertService(
        _resolver(),
        _dispatcher(),
        topic_prefix=get_settings().messaging.topic_prefix,
    )


def available_endpoints() -> list[str]:
    endpoints = ["GET /health", "POST /sos", "POST /api/sos"]
    if _resolver().requires_location:
        endpoints += ["POST /get-district", "POST /api/get-district"]
    endpoints += ["POST /test-sos", "POST /api/test-sos", "POST /test-push"]
    return endpoints


def _sos_response(outcome: AlertOutcome) -> dict[str, Any]:
    stopped = outcome.request.kind is AlertKind.RESOLVED
    return {
        "success": True,
        "message": "SOS alert stopped successfully" if stopped else "SOS alert sent successfully",
        "messageId": outcome.message_id,
        "topic": outcome.topic,
        "sosId": outcome.request.sos_id,
        "district": outcome.district,
        "timestamp": utc_now_iso(),
    }


@router.get("/health")
@router.get("/api/health", include_in_schema=False)
def get_health() -> dict:
    """Report liveness and which district strategy is active."""
    resolver = _resolver()
    cache = getattr(resolver, "cache", None)
    return {
        "status": "ok",
        "timestamp": utc_now_iso(),
        "firebase": _dispatcher().publisher_status,
        "resolver": resolver.name,
        "cache": {**cache.stats.as_dict(), "size": len(cache)} if cache is not None else None,
    }


@router.post("/sos")
@router.post("/api/sos", include_in_schema=False)
def post_sos(body: Any = Body(None)) -> dict:
    """Validate, resolve, and fan out an SOS (or its resolution) to the district topic."""
    outcome = _service().handle_body({} if body is None else body)
    return _sos_response(outcome)


@router.post("/get-district")
@router.post("/api/get-district", include_in_schema=False)
def post_get_district(body: Any = Body(None)) -> dict:
    """Resolve a coordinate to its district and FCM topic."""
    resolver = _resolver()
    if not resolver.requires_location:
        raise HTTPException(status_code=404)

    point = parse_coordinate({} if body is None else body)
    resolution = resolver.resolve(DistrictQuery(location=point))
    return {
        "success": True,
        "district": resolution.district,
        "fcm_topic": topic_for(resolution.district, get_settings().messaging.topic_prefix),
        "source": resolution.provenance,
        "coordinates": point.as_dict(),
        "timestamp": utc_now_iso(),
    }


@router.post("/test-sos")
@router.post("/api/test-sos", include_in_schema=False)
@router.post("/test-push", include_in_schema=False)
def post_test_sos() -> dict:
    """Send a canned alert through the regular `/sos` path (manual verification only)."""
    body = build_test_alert(get_settings().test_alert)
    return _sos_response(_service().handle_body(body))
