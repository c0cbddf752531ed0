from __future__ import annotations

import re
import time
import uuid
from typing import Optional

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from voicerouter.utils.logger import get_logger

logger = get_logger("voicerouter.api")

# webhook senders pass their own delivery ids; anything else is replaced
_SAFE_ID = re.compile(r"^[A-Za-z0-9._:-]{1,128}$")


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Tags each request with an id (echoed on the response) and logs one access line."""

    def __init__(self, app, header_name: str = "X-Request-Id") -> None:
        super().__init__(app)
        self.header_name = header_name

    async def dispatch(self, request: Request, call_next) -> Response:
        incoming = request.headers.get(self.header_name)
        rid = incoming if incoming and _SAFE_ID.match(incoming) else uuid.uuid4().hex
        request.state.request_id = rid

        t0 = time.perf_counter()
        resp: Response = await call_next(request)
        elapsed_ms = (time.perf_counter() - t0) * 1000.0

        resp.headers[self.header_name] = rid
        logger.info(
            f"HTTP {request.method} {request.url.path} status={resp.status_code} "
            f"rid={rid} ms={elapsed_ms:.1f}"
        )
        return resp


def get_request_id(request: Request) -> Optional[str]:
    return getattr(request.state, "request_id", None)
