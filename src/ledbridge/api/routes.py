"""HTTP routes for the lighting operations."""

import logging
from typing import Annotated

from fastapi import APIRouter, Form, Request
from fastapi.responses import JSONResponse

from ledbridge.dispatcher import CommandDispatcher, DispatchResult, Outcome

logger = logging.getLogger(__name__)

STATUS_CODES = {
    Outcome.SUCCESS: 200,
    Outcome.BAD_REQUEST: 400,
    Outcome.SERVICE_UNAVAILABLE: 503,
}

# Seconds a client should wait before retrying a recoverable 503
RETRY_AFTER_SECONDS = 1

router = APIRouter()

# Routes are plain `def` so they run in the server's worker thread pool.
# A blocked send holds one worker, never the event loop.


def _dispatcher(request: Request) -> CommandDispatcher:
    return request.app.state.dispatcher


def to_response(result: DispatchResult) -> JSONResponse:
    """Render a dispatch result as `{"status": category, "message": ...}`."""
    body = {"status": result.category, "message": result.message}
    if result.detail:
        body["detail"] = list(result.detail)
    headers = None
    if result.outcome is Outcome.SERVICE_UNAVAILABLE and result.retryable:
        headers = {"Retry-After": str(RETRY_AFTER_SECONDS)}
    return JSONResponse(status_code=STATUS_CODES[result.outcome], content=body, headers=headers)


@router.post("/brightness")
def set_brightness(request: Request, brightness_percent: Annotated[str | None, Form()] = None):
    return to_response(_dispatcher(request).set_brightness(brightness_percent))


@router.post("/effect")
def set_effect(request: Request, effect_id: Annotated[str | None, Form()] = None):
    return to_response(_dispatcher(request).set_effect(effect_id))


@router.post("/color")
def set_color(request: Request, color: Annotated[str | None, Form()] = None):
    return to_response(_dispatcher(request).set_color(color))


@router.post("/fire_palette")
def set_fire_palette(request: Request, palette_id: Annotated[str | None, Form()] = None):
    return to_response(_dispatcher(request).set_fire_palette(palette_id))


@router.post("/debugging")
def set_debugging(request: Request, enabled: Annotated[str | None, Form()] = None):
    return to_response(_dispatcher(request).set_debugging(enabled))


@router.get("/version")
def get_version(request: Request):
    return to_response(_dispatcher(request).get_version())


@router.get("/status")
def get_status(request: Request):
    return to_response(_dispatcher(request).get_status())
