"""
Readings Ingest Router
======================

Devices (ESPHome / ESP32 boards) POST one reading at a time here.

Endpoint:
  POST /create  - Store a reading. Body: {"key", "temperature", "humidity", "light"?, "moisture"?}

Auth: the "key" field in the body must equal `espkey` from config.yaml.

Responses are plain text so the tiny HTTP clients on the devices can log them:

    200  Success
    400  (empty)   body is not JSON / not a valid reading
    401  Key is not provided or incorrect
    405  API only can be called by POST Request
    500  (empty)   the insert failed

With `legacystatuscodes: true` every response above is sent as 200.
"""
import json
import logging
import secrets

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import PlainTextResponse
from pydantic import ValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from soil_sensor_api.context import AppContext
from soil_sensor_api.models import Reading
from soil_sensor_api.services import StorageError

logger = logging.getLogger(__name__)

router = APIRouter(tags=["readings"])

SUCCESS_MESSAGE = "Success"
BAD_KEY_MESSAGE = "Key is not provided or incorrect"
POST_ONLY_MESSAGE = "API only can be called by POST Request"

# Methods routed to the handler; anything else on /create goes through method_not_allowed_handler
ACCEPTED_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE", "HEAD", "OPTIONS"]


# -----------------------------------------------------------------------------
# Dependency injection
# -----------------------------------------------------------------------------


def get_context(request: Request) -> AppContext:
    """Hand endpoints the context that create_app() attached to the app."""
    context = getattr(request.app.state, "context", None)
    if context is None:
        raise HTTPException(status_code=500, detail="Server not fully started yet")
    return context


def _reply(context: AppContext, body: str, status_code: int) -> PlainTextResponse:
    if context.settings.legacy_status_codes:
        status_code = 200
    return PlainTextResponse(body, status_code=status_code)


# -----------------------------------------------------------------------------
# Endpoint
# -----------------------------------------------------------------------------


@router.api_route("/create", methods=ACCEPTED_METHODS, response_class=PlainTextResponse)
async def create_reading(request: Request, context: AppContext = Depends(get_context)):
    """
    Store one reading from a device.

    The key is checked as soon as the body parses as a JSON object, before
    the measurements are looked at, and the row is written only after the
    key matches. Nothing here raises: every failure is logged and answered
    with a status code.
    """
    if request.method != "POST":
        return _reject_method(request, context)

    body = await request.body()
    try:
        payload = json.loads(body)
    except ValueError as e:
        # json.JSONDecodeError and UnicodeDecodeError are ValueErrors
        logger.warning(f"Unreadable reading from {_client(request)}: {e}")
        return _reply(context, "", 400)

    if not isinstance(payload, dict) or not isinstance(payload.get("key", ""), str):
        logger.warning(f"Reading from {_client(request)} is not a JSON object with a string key")
        return _reply(context, "", 400)

    key = payload.get("key", "")
    if not secrets.compare_digest(key.encode(), context.settings.esp_key.encode()):
        logger.warning(f"Key is not provided or incorrect, request from {_client(request)}")
        return _reply(context, BAD_KEY_MESSAGE, 401)

    try:
        reading = Reading.model_validate(payload)
    except ValidationError as e:
        logger.warning(f"Invalid reading from {_client(request)}: {e}")
        return _reply(context, "", 400)

    try:
        await run_in_threadpool(context.store.insert_reading, reading)
    except StorageError as e:
        logger.error(f"Storing reading failed: {e}")
        return _reply(context, "", 500)

    logger.info(
        f"Stored reading temperature={reading.temperature} humidity={reading.humidity} "
        f"from {_client(request)}"
    )
    return _reply(context, SUCCESS_MESSAGE, 200)


async def method_not_allowed_handler(request: Request, exc: StarletteHTTPException):
    """
    Starlette answers methods outside ACCEPTED_METHODS (TRACE, PROPFIND, ...)
    itself; route those on /create to the same reply as any other non-POST.
    """
    if exc.status_code == 405 and request.url.path == "/create":
        return _reject_method(request, get_context(request))
    return await http_exception_handler(request, exc)


def _reject_method(request: Request, context: AppContext) -> PlainTextResponse:
    logger.info(f"Rejected {request.method} /create from {_client(request)}")
    return _reply(context, POST_ONLY_MESSAGE, 405)


def _client(request: Request) -> str:
    return request.client.host if request.client else "unknown"
