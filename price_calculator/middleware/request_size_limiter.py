"""
Request size limiting middleware for FastAPI.
Protects the MCP endpoints from oversized payloads and batches.
"""
from typing import Any, Dict, Optional, Set
import json
import logging
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse
from starlette.types import ASGIApp

from price_calculator.core.config import config

logger = logging.getLogger(__name__)


# Endpoints that take a resource or pricing-data batch
BATCH_ENDPOINTS: Dict[str, str] = {
    "/mcp/get-pricing": "resources",
    "/mcp/estimate-cost": "resources",
    "/mcp/calculate-cost": "pricingData",
}

# Endpoints that require size limiting
PROTECTED_ENDPOINTS: Set[str] = set(BATCH_ENDPOINTS) | {"/mcp/extract-resources"}


def _too_large(message: str) -> JSONResponse:
    return JSONResponse(
        status_code=413,
        content={
            "status": "error",
            "error": "request_too_large",
            "message": message,
        }
    )


class RequestSizeLimiterMiddleware(BaseHTTPMiddleware):
    """
    FastAPI middleware for request size limiting.

    Applies size limits only to configured endpoints.
    Other routes pass through untouched.
    """

    def __init__(
        self,
        app: ASGIApp,
        max_body_size: Optional[int] = None,
        max_batch_size: Optional[int] = None
    ):
        super().__init__(app)
        self.max_body_size = max_body_size or config.MAX_REQUEST_BODY_SIZE
        self.max_batch_size = max_batch_size or config.MAX_RESOURCES_PER_REQUEST

    async def dispatch(self, request: Request, call_next):
        """
        Process request and apply size limits if applicable.

        Args:
            request: FastAPI request object
            call_next: Next middleware or route handler

        Returns:
            Response object
        """
        path = request.url.path

        if path not in PROTECTED_ENDPOINTS:
            return await call_next(request)

        # Check Content-Length header if present
        content_length = request.headers.get("Content-Length")
        if content_length:
            try:
                if int(content_length) > self.max_body_size:
                    logger.info(
                        f"Request body size exceeded for {path}: "
                        f"{content_length} bytes (limit: {self.max_body_size})"
                    )
                    return _too_large(
                        f"Request body size exceeds allowed limit of {self.max_body_size} bytes."
                    )
            except ValueError:
                # Invalid Content-Length header, continue to body reading
                pass

        body_bytes = await request.body()
        if len(body_bytes) > self.max_body_size:
            logger.info(
                f"Request body size exceeded for {path}: "
                f"{len(body_bytes)} bytes (limit: {self.max_body_size})"
            )
            return _too_large(
                f"Request body size exceeds allowed limit of {self.max_body_size} bytes."
            )

        if body_bytes and path in BATCH_ENDPOINTS:
            try:
                body_json = json.loads(body_bytes.decode("utf-8"))
            except (json.JSONDecodeError, UnicodeDecodeError):
                # Invalid JSON - let FastAPI report the validation error
                body_json = None

            validation_error = self._validate_batch(path, body_json)
            if validation_error:
                logger.info(f"Payload validation failed for {path}: {validation_error}")
                return _too_large(validation_error)

        # Body read here is cached by Starlette and replayed to the route handler
        return await call_next(request)

    def _validate_batch(self, path: str, body_json: Any) -> Optional[str]:
        """
        Validate the batch size of a resources or pricing-data request.

        Both a bare JSON array and a wrapping object are accepted.

        Args:
            path: Request path
            body_json: Parsed JSON body

        Returns:
            Error message if validation fails, None if valid
        """
        if isinstance(body_json, list):
            batch = body_json
        elif isinstance(body_json, dict):
            key = BATCH_ENDPOINTS[path]
            snake_key = "pricing_data" if key == "pricingData" else key
            batch = body_json.get(key, body_json.get(snake_key))
        else:
            return None

        if isinstance(batch, list) and len(batch) > self.max_batch_size:
            return (
                f"Too many resources: {len(batch)} "
                f"(limit: {self.max_batch_size})"
            )

        return None
