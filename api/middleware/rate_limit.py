"""
Rate limiting middleware for the FinChat API.

Sliding-window counter per client (API key or IP).
"""

import logging
import time
from collections import defaultdict
from typing import Dict, List

from fastapi import Request, status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger(__name__)


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Sliding-window rate limiter."""

    def __init__(self, app, max_requests: int = 100, window_seconds: int = 15 * 60):
        super().__init__(app)
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._requests: Dict[str, List[float]] = defaultdict(list)

    async def dispatch(self, request: Request, call_next):
        # Skip rate limiting for health and docs
        if request.url.path in ("/", "/health", "/docs", "/openapi.json"):
            return await call_next(request)

        client_id = self._get_client_id(request)
        now = time.time()

        # Clean old entries
        window_start = now - self.window_seconds
        self._requests[client_id] = [
            t for t in self._requests[client_id] if t > window_start
        ]

        if len(self._requests[client_id]) >= self.max_requests:
            logger.warning(f"Rate limit exceeded for {client_id}")
            minutes = max(1, self.window_seconds // 60)
            return JSONResponse(
                status_code=status.HTTP_429_TOO_MANY_REQUESTS,
                content={
                    "error": (
                        "Too many requests from this IP, please try again "
                        f"after {minutes} minutes."
                    )
                },
                headers={"Retry-After": str(self.window_seconds)},
            )

        self._requests[client_id].append(now)
        response = await call_next(request)

        # Add rate limit headers
        remaining = self.max_requests - len(self._requests[client_id])
        response.headers["X-RateLimit-Limit"] = str(self.max_requests)
        response.headers["X-RateLimit-Remaining"] = str(max(0, remaining))

        return response

    def _get_client_id(self, request: Request) -> str:
        """Identify client by API key or IP."""
        api_key = request.headers.get("X-API-Key")
        if api_key:
            return f"key:{api_key[:8]}"

        return f"ip:{request.client.host}" if request.client else "ip:unknown"
