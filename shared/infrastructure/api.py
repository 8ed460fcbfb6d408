"""Response envelope and exception handling shared by every API view.

Every endpoint answers with ``{"success": ..., "message": ..., "data": ...}``.
Domain errors and DRF errors are rendered into the same envelope by
:func:`exception_handler`, which is wired through ``REST_FRAMEWORK``
settings.
"""

from __future__ import annotations

import logging
from typing import Any

from rest_framework import status  # type: ignore
from rest_framework.response import Response  # type: ignore
from rest_framework.views import exception_handler as drf_exception_handler  # type: ignore

from shared.domain.exceptions import DomainError

logger = logging.getLogger(__name__)


def success_response(
    message: str,
    data: Any = None,
    *,
    status_code: int = status.HTTP_200_OK,
    **extra: Any,
) -> Response:
    payload: dict[str, Any] = {"success": True, "message": message}
    payload.update(extra)
    payload["data"] = data
    return Response(payload, status=status_code)


def error_payload(message: str, code: str, errors: Any = None) -> dict[str, Any]:
    payload: dict[str, Any] = {"success": False, "message": message, "code": code}
    if errors is not None:
        payload["errors"] = errors
    return payload


def _first_message(detail: Any) -> str:
    if isinstance(detail, dict):
        if "detail" in detail:
            return str(detail["detail"])
        for key, value in detail.items():
            if key == "non_field_errors":
                return _first_message(value)
            return f"{key}: {_first_message(value)}"
    if isinstance(detail, (list, tuple)) and detail:
        return _first_message(detail[0])
    return str(detail) if detail else "Invalid request"


def exception_handler(exc: Exception, context: dict[str, Any]) -> Response:
    """Render domain and framework errors into the API envelope."""

    if isinstance(exc, DomainError):
        return Response(error_payload(exc.message, exc.code), status=exc.status_code)

    response = drf_exception_handler(exc, context)
    if response is not None:
        code = getattr(exc, "default_code", "error")
        response.data = error_payload(_first_message(response.data), code, errors=response.data)
        return response

    view = context.get("view")
    logger.error(
        f"Unhandled error in {view.__class__.__name__ if view else 'view'}: {exc}",
        exc_info=exc,
    )
    return Response(
        error_payload("Internal server error", "internal"),
        status=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )
