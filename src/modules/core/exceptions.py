"""Standardized error responses.

Every failure leaving the API has the same shape::

    {
        "type": "validation_error" | "client_error" | "server_error",
        "errors": [{"code": "...", "detail": "...", "attr": "..." | null}]
    }

``error_response`` is used by the views when they translate domain
exceptions; ``standardized_exception_handler`` is installed as DRF's
``EXCEPTION_HANDLER`` so framework errors (parse errors, 404, 405, ...)
follow the same format.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import structlog
from pydantic import ValidationError as PydanticValidationError
from rest_framework import exceptions, status
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = structlog.get_logger(__name__)

VALIDATION_ERROR = "validation_error"
CLIENT_ERROR = "client_error"
SERVER_ERROR = "server_error"


def error_response(
    errors: List[Dict[str, Any]],
    http_status: int,
    error_type: str = CLIENT_ERROR,
) -> Response:
    """Build a ``Response`` in the standardized error format."""
    normalized = [
        {
            "code": error.get("code", "error"),
            "detail": error.get("detail", ""),
            "attr": error.get("attr"),
        }
        for error in errors
    ]
    return Response({"type": error_type, "errors": normalized}, status=http_status)


def _flatten_validation_detail(
    detail: Any, attr: Optional[str] = None
) -> List[Dict[str, Any]]:
    """Turn DRF's nested ``ValidationError.detail`` into a flat error list."""
    if isinstance(detail, dict):
        flat: List[Dict[str, Any]] = []
        for key, value in detail.items():
            child = key if attr is None else f"{attr}.{key}"
            if key == "non_field_errors":
                child = attr
            flat.extend(_flatten_validation_detail(value, child))
        return flat
    if isinstance(detail, list):
        flat = []
        for index, value in enumerate(detail):
            child = attr
            if isinstance(value, (dict, list)):
                child = f"{attr}.{index}" if attr else str(index)
            flat.extend(_flatten_validation_detail(value, child))
        return flat
    return [
        {
            "code": getattr(detail, "code", "invalid"),
            "detail": str(detail),
            "attr": attr,
        }
    ]


def standardized_exception_handler(exc, context) -> Optional[Response]:
    """DRF exception handler rendering errors in the standardized format."""
    response = exception_handler(exc, context)
    if response is None:
        return None

    if isinstance(exc, exceptions.ValidationError):
        errors = _flatten_validation_detail(exc.detail)
        error_type = VALIDATION_ERROR
    elif isinstance(exc, exceptions.APIException):
        errors = [
            {
                "code": getattr(exc.detail, "code", exc.default_code),
                "detail": str(exc.detail),
                "attr": None,
            }
        ]
        error_type = (
            SERVER_ERROR
            if response.status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR
            else CLIENT_ERROR
        )
    else:
        # Django's Http404 / PermissionDenied are converted by DRF.
        errors = [
            {
                "code": "not_found"
                if response.status_code == status.HTTP_404_NOT_FOUND
                else "error",
                "detail": str(response.data.get("detail", "")),
                "attr": None,
            }
        ]
        error_type = CLIENT_ERROR

    logger.info(
        "api.error",
        status_code=response.status_code,
        error_type=error_type,
        codes=[error["code"] for error in errors],
    )
    response.data = {"type": error_type, "errors": errors}
    return response


def pydantic_errors(exc: PydanticValidationError) -> List[Dict[str, Any]]:
    """Convert a Pydantic ``ValidationError`` into standardized error entries."""
    return [
        {
            "code": error.get("type", "invalid"),
            "detail": error.get("msg", ""),
            "attr": ".".join(str(part) for part in error.get("loc", ())) or None,
        }
        for error in exc.errors()
    ]
