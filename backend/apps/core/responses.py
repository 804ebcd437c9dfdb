"""
Response envelope helpers and API-wide exception handlers.

Every response, successful or not, has the shape:

    {"success": bool, "message": str, "data"?: ..., "errors"?: [...], "timestamp": iso8601}

Only validation failures and invalid/expired codes are described precisely to
callers. Anything else collapses to an opaque message; details stay in logs.
"""

from typing import Any

from django.http import HttpRequest, HttpResponse
from django.utils import timezone
from ninja import NinjaAPI
from ninja.errors import AuthenticationError, HttpError, ValidationError

from apps.core.logging import get_logger

logger = get_logger(__name__)

DEFAULT_ERROR_MESSAGE = "Internal server error"
VALIDATION_ERROR_MESSAGE = "Validation failed"
UNAUTHORIZED_MESSAGE = "Unauthorized access"


def success_response(data: Any = None, message: str = "Success") -> dict[str, Any]:
    """Build a success envelope."""
    return {
        "success": True,
        "message": message,
        "data": data,
        "timestamp": timezone.now(),
    }


def error_body(
    message: str = DEFAULT_ERROR_MESSAGE, errors: list[dict[str, Any]] | None = None
) -> dict[str, Any]:
    """Build an error envelope; ``errors`` is included only when given."""
    body: dict[str, Any] = {
        "success": False,
        "message": message,
        "timestamp": timezone.now(),
    }
    if errors:
        body["errors"] = errors
    return body


def _clean_validation_errors(raw_errors: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """Reduce pydantic error dicts to JSON-safe field/message pairs."""
    cleaned = []
    for error in raw_errors:
        loc = [str(part) for part in error.get("loc", ())]
        # ninja prefixes the location with the parameter source ("body", "payload")
        field = ".".join(part for part in loc if part not in ("body", "payload", "query"))
        cleaned.append(
            {
                "field": field,
                "message": str(error.get("msg", "")),
                "type": str(error.get("type", "")),
            }
        )
    return cleaned


def register_exception_handlers(api: NinjaAPI) -> None:
    """Install envelope-producing handlers on a NinjaAPI instance."""

    @api.exception_handler(ValidationError)
    def handle_validation_error(request: HttpRequest, exc: ValidationError) -> HttpResponse:
        errors = _clean_validation_errors(exc.errors)
        logger.info("request_validation_failed", errors=errors)
        return api.create_response(
            request, error_body(VALIDATION_ERROR_MESSAGE, errors), status=400
        )

    @api.exception_handler(AuthenticationError)
    def handle_authentication_error(
        request: HttpRequest, exc: AuthenticationError
    ) -> HttpResponse:
        return api.create_response(request, error_body(UNAUTHORIZED_MESSAGE), status=401)

    @api.exception_handler(HttpError)
    def handle_http_error(request: HttpRequest, exc: HttpError) -> HttpResponse:
        message = getattr(exc, "message", None) or DEFAULT_ERROR_MESSAGE
        return api.create_response(request, error_body(str(message)), status=exc.status_code)

    @api.exception_handler(Exception)
    def handle_unexpected_error(request: HttpRequest, exc: Exception) -> HttpResponse:
        logger.exception("unhandled_api_error", error_type=type(exc).__name__)
        return api.create_response(request, error_body(DEFAULT_ERROR_MESSAGE), status=500)
