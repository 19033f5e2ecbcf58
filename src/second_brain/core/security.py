"""Security headers middleware."""

from typing import Any

from fastapi import Request
from starlette.responses import Response

from second_brain.config import get_settings

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Referrer-Policy": "no-referrer",
}

HSTS_HEADER = "max-age=63072000; includeSubDomains"


async def security_headers_middleware(request: Request, call_next: Any) -> Response:
    """Add security headers to every response, HSTS only in production.

    Streamed answers get ``Cache-Control: no-store`` so proxies pass chunks through.
    """
    response = await call_next(request)

    for name, value in SECURITY_HEADERS.items():
        response.headers.setdefault(name, value)

    if get_settings().environment == "production":
        response.headers["Strict-Transport-Security"] = HSTS_HEADER

    if response.headers.get("content-type", "").startswith("text/plain"):
        response.headers["Cache-Control"] = "no-store"

    return response
