# reporter/handlers/errors.py
"""Error responses in the {"error": message} shape."""

import logging
from typing import Any, Awaitable, Callable

from aiohttp import web

from reporter.exceptions import ReporterError, ValidationError

logger = logging.getLogger(__name__)

Handler = Callable[[web.Request], Awaitable[web.StreamResponse]]


def error_response(message: str, status: int) -> web.Response:
    return web.json_response({"error": message}, status=status)


async def read_json(request: web.Request) -> Any:
    """
    Decode the request body as JSON.

    Raises:
        ValidationError: If the body is not valid JSON
    """
    try:
        return await request.json()
    except ValueError as e:
        raise ValidationError("Request body must be valid JSON") from e


@web.middleware
async def json_error_middleware(request: web.Request, handler: Handler) -> web.StreamResponse:
    """Render errors raised by handlers or the router as JSON."""
    try:
        return await handler(request)
    except ReporterError as e:
        return error_response(e.message, e.status_code)
    except web.HTTPMethodNotAllowed:
        return error_response("Method not allowed", 405)
    except web.HTTPNotFound:
        return error_response("Not found", 404)
    except web.HTTPException:
        raise
    except Exception as e:
        logger.error(f"Unhandled error on {request.method} {request.path}: {e}", exc_info=True)
        return error_response(str(e) or "Unknown error", 500)
