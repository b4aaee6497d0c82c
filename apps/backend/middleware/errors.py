import logging

from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse

from apps.backend.services.errors import CoreError

log = logging.getLogger("points.errors")


async def core_error_handler(request: Request, exc: CoreError) -> PlainTextResponse:
    log.warning("%s %s -> %s: %s", request.method, request.url.path, exc.status_code, exc.message)
    return PlainTextResponse(exc.message, status_code=exc.status_code)


def install_error_handlers(app: FastAPI) -> None:
    # Stable plain-text messages, no stack leaks
    app.add_exception_handler(CoreError, core_error_handler)
