from __future__ import annotations

from typing import Any

from .exceptions import (
    ApiError,
    AuthError,
    ConflictError,
    ForbiddenError,
    InvalidLoginResponseError,
    NotFoundError,
    RateLimitError,
    ServerError,
    TransportError,
    ValidationError,
)

_MESSAGE_KEYS = ("message", "title", "detail", "error")

_DEFAULT_MESSAGES: dict[type[ApiError], str] = {
    TransportError: "No se pudo conectar con el servidor. Verifica tu red y vuelve a intentar.",
    InvalidLoginResponseError: "Formato de respuesta inválido",
    AuthError: "Tu sesión no es válida. Inicia sesión nuevamente.",
    ForbiddenError: "No tienes permisos para esta operación.",
    NotFoundError: "El recurso solicitado no existe.",
    ValidationError: "El servidor no aceptó los datos.",
    ConflictError: "El recurso ya existe o cambió mientras lo editabas.",
    RateLimitError: "Demasiadas solicitudes. Espera un momento.",
    ServerError: "Error interno del servidor.",
}


def _server_message(payload: Any) -> str | None:
    if isinstance(payload, str):
        return payload.strip() or None
    if not isinstance(payload, dict):
        return None
    for key in _MESSAGE_KEYS:
        value = payload.get(key)
        if isinstance(value, str) and value.strip():
            return value.strip()
    return None


def map_error(status_code: int, payload: Any, trace_id: str | None) -> ApiError:
    body = payload if isinstance(payload, dict) else {}
    code = str(body.get("code") or "HTTP_ERROR")
    message = _server_message(payload) or "Request failed"
    details = body.get("details") or body.get("errors")
    payload_trace_id = body.get("trace_id") or body.get("traceId")
    resolved_trace_id = str(payload_trace_id) if payload_trace_id is not None else trace_id
    mapped: type[ApiError]
    if status_code == 401:
        mapped = AuthError
    elif status_code == 403:
        mapped = ForbiddenError
    elif status_code == 404:
        mapped = NotFoundError
    elif status_code in {400, 422}:
        mapped = ValidationError
    elif status_code == 409:
        mapped = ConflictError
    elif status_code == 429:
        mapped = RateLimitError
    elif status_code >= 500:
        mapped = ServerError
    else:
        mapped = ApiError
    return mapped(
        code=code,
        message=message,
        details=details,
        trace_id=resolved_trace_id,
        status_code=status_code,
        raw_payload=payload,
    )


def to_display_message(error: Exception, fallback: str | None = None) -> str:
    """Message suitable for the operator: the server's own text when it sent one."""
    if isinstance(error, ApiError):
        if _server_message(error.raw_payload):
            return error.message
        if fallback:
            return fallback
        for error_type, message in _DEFAULT_MESSAGES.items():
            if isinstance(error, error_type):
                return message
        return error.message
    return fallback or str(error)
