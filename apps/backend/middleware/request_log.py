import logging
import time
from typing import Any, Dict

from fastapi import FastAPI, Request, Response

log = logging.getLogger("points.access")

# Only forwarded credentials; the points API itself reads no auth headers
MASKED_HEADERS = {
    "authorization",
    "proxy-authorization",
    "cookie",
}


def _mask_headers(headers: Dict[str, str]) -> Dict[str, str]:
    return {k: ("***" if k.lower() in MASKED_HEADERS else v) for k, v in headers.items()}


def access_entry(request: Request, response: Response, elapsed: float) -> Dict[str, Any]:
    return {
        "method": request.method,
        "path": request.url.path,
        "query": request.url.query or None,
        "status_code": response.status_code,
        "elapsed_ms": round(elapsed * 1000, 2),
        "headers": _mask_headers(dict(request.headers)),
    }


def install_request_logging(app: FastAPI) -> None:
    @app.middleware("http")
    async def _access_log(request: Request, call_next):
        start = time.perf_counter()
        response = await call_next(request)
        entry = access_entry(request, response, time.perf_counter() - start)
        if response.status_code >= 400:
            log.warning(entry)
        else:
            log.info(entry)
        return response
