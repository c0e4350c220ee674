"""Storefront error taxonomy and the DRF exception handler.

Services raise subclasses of ``DomainError``; views never catch them.
``api_exception_handler`` (wired through ``REST_FRAMEWORK["EXCEPTION_HANDLER"]``)
renders every failure with the same envelope::

    {
        "success": false,
        "type": "insufficient_stock",
        "message": "Insufficient stock for Classic Tee.",
        "errors": [{"code": "insufficient_stock", "detail": "...", ...}]
    }
"""

from __future__ import annotations

from typing import Any, Dict, List

import structlog
from pydantic import ValidationError as PydanticValidationError
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = structlog.get_logger(__name__)


class DomainError(Exception):
    """Base class for business-rule failures raised by the service layer."""

    status_code: int = status.HTTP_400_BAD_REQUEST
    code: str = "error"
    default_message: str = "Request could not be processed."

    def __init__(self, message: str | None = None, **details: Any) -> None:
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)


class NotFound(DomainError):
    status_code = status.HTTP_404_NOT_FOUND
    code = "not_found"
    default_message = "Resource not found."


class ValidationFailed(DomainError):
    status_code = status.HTTP_400_BAD_REQUEST
    code = "validation_error"
    default_message = "Invalid input."


class Forbidden(DomainError):
    status_code = status.HTTP_403_FORBIDDEN
    code = "forbidden"
    default_message = "Not authorized."


class Conflict(DomainError):
    status_code = status.HTTP_409_CONFLICT
    code = "conflict"
    default_message = "Resource conflicts with an existing one."


class InsufficientStock(DomainError):
    """Requested quantity exceeds the tracked stock of a product.

    ``details`` always carries ``product_id``, ``product_name``,
    ``requested`` and ``available`` so clients can tell which line failed.
    """

    status_code = status.HTTP_409_CONFLICT
    code = "insufficient_stock"
    default_message = "Insufficient stock."


# ---------------------------------------------------------------------------
# DRF integration
# ---------------------------------------------------------------------------


def _envelope(code: str, message: str, errors: List[Dict[str, Any]]) -> Dict[str, Any]:
    return {"success": False, "type": code, "message": message, "errors": errors}


def _flatten_drf_errors(data: Any, field: str | None = None) -> List[Dict[str, Any]]:
    """Turn DRF's nested ``{field: [ErrorDetail]}`` payloads into a flat list."""
    if isinstance(data, dict):
        errors: List[Dict[str, Any]] = []
        for key, value in data.items():
            if key == "detail" and field is None:
                errors.extend(_flatten_drf_errors(value))
            else:
                nested = f"{field}.{key}" if field else str(key)
                errors.extend(_flatten_drf_errors(value, nested))
        return errors
    if isinstance(data, list):
        errors = []
        for index, value in enumerate(data):
            if isinstance(value, (dict, list)):
                errors.extend(_flatten_drf_errors(value, f"{field}.{index}" if field else str(index)))
            else:
                errors.extend(_flatten_drf_errors(value, field))
        return errors
    entry: Dict[str, Any] = {
        "code": getattr(data, "code", "error"),
        "detail": str(data),
    }
    if field:
        entry["field"] = field
    return [entry]


def api_exception_handler(exc: Exception, context: Dict[str, Any]) -> Response | None:
    """Render domain, pydantic, and DRF errors with one envelope."""
    if isinstance(exc, DomainError):
        logger.info(
            "api.domain_error",
            error_type=exc.code,
            status_code=exc.status_code,
            message=exc.message,
        )
        entry = {"code": exc.code, "detail": exc.message, **exc.details}
        return Response(
            _envelope(exc.code, exc.message, [entry]),
            status=exc.status_code,
        )

    if isinstance(exc, PydanticValidationError):
        errors = [
            {
                "code": "validation_error",
                "detail": err["msg"],
                "field": ".".join(str(part) for part in err["loc"]),
            }
            for err in exc.errors()
        ]
        return Response(
            _envelope("validation_error", "Invalid input.", errors),
            status=status.HTTP_400_BAD_REQUEST,
        )

    response = exception_handler(exc, context)
    if response is None:
        return None

    errors = _flatten_drf_errors(response.data)
    code = errors[0]["code"] if errors else "error"
    if response.status_code == status.HTTP_400_BAD_REQUEST:
        code = "validation_error"
    message = errors[0]["detail"] if len(errors) == 1 else "Invalid input."
    response.data = _envelope(str(code), message, errors)
    return response
