# src/sosrelay/api/app.py
"""
FastAPI application wiring.

This file creates the `FastAPI` instance, installs CORS and the JSON error handlers.
Request handling lives in `sosrelay.api.routes`; business logic in `sosrelay.alerts`
and `sosrelay.resolver`.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError as BodyParseError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.cors import CORSMiddleware

from sosrelay.config.settings import get_settings
from sosrelay.core.logging import configure_logging
from sosrelay.core.time import utc_now_iso
from sosrelay.domain.errors import DeliveryError, RequestValidationError

from .routes import available_endpoints, router

configure_logging()
logger = logging.getLogger(__name__)

app = FastAPI(title="SOS Relay API", version="0.1.0")

# Mobile and web clients call this API directly; origins come from settings
# (`SOSRELAY_CORS_ORIGINS="https://a.example,https://b.example"`).
cors_origins = get_settings().app.cors_origins
if cors_origins:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

app.include_router(router)


@app.exception_handler(RequestValidationError)
def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.info("Rejected %s %s: %s", request.method, request.url.path, exc.error)
    return JSONResponse(status_code=exc.status_code, content=exc.as_response())


@app.exception_handler(BodyParseError)
def handle_body_parse_error(request: Request, exc: BodyParseError) -> JSONResponse:
    return JSONResponse(
        status_code=400,
        content={"error": "Invalid request body", "message": "Request body must be valid JSON"},
    )


@app.exception_handler(DeliveryError)
def handle_delivery_error(request: Request, exc: DeliveryError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": "Failed to send SOS alert", "message": exc.message, "timestamp": utc_now_iso()},
    )


@app.exception_handler(StarletteHTTPException)
def handle_http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if exc.status_code in (404, 405):
        return JSONResponse(
            status_code=404,
            content={"error": "Endpoint not found", "availableEndpoints": available_endpoints()},
        )
    return JSONResponse(status_code=exc.status_code, content={"error": str(exc.detail)})


@app.exception_handler(Exception)
def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"error": "Internal server error", "message": str(exc)})
