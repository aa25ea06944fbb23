from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from .logger import get_logger, log_event
from .pagination import PageResult

logger = get_logger(__name__)

ENTITY_KEYS = ("id", "name", "status")
# Envelope shapes seen across API versions, most specific first.
CANDIDATE_PATHS: tuple[tuple[str, ...], ...] = (("data", "data"), ("data",), ("items",), ("results",))
COUNT_KEYS = ("totalElements", "totalRecords")


def has_entity_shape(value: Any) -> bool:
    return isinstance(value, Mapping) and all(key in value for key in ENTITY_KEYS)


def is_entity_list(value: Any) -> bool:
    return isinstance(value, list) and all(has_entity_shape(item) for item in value)


def coerce_count(value: Any) -> int | None:
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, int):
        count = value
    elif isinstance(value, float):
        if not value.is_integer():
            return None
        count = int(value)
    elif isinstance(value, str):
        raw = value.strip()
        try:
            count = int(raw)
        except ValueError:
            try:
                as_float = float(raw)
            except ValueError:
                return None
            if not as_float.is_integer():
                return None
            count = int(as_float)
    else:
        return None
    return count if count >= 0 else None


def normalize_page(payload: Any) -> PageResult[dict[str, Any]]:
    """Extract ``(items, total_count)`` from a list response of unknown shape.

    Never raises: anything that does not match a known envelope degrades to an
    empty page.
    """
    if isinstance(payload, list):
        if is_entity_list(payload):
            return PageResult(items=list(payload), total_count=len(payload))
        _log_degraded(payload)
        return PageResult.empty()

    if isinstance(payload, Mapping):
        for path in CANDIDATE_PATHS:
            envelope, candidate = _resolve(payload, path)
            if envelope is None or not is_entity_list(candidate):
                continue
            items = list(candidate)
            total = _find_count(envelope)
            if total is None:
                total = _find_count(payload)
            return PageResult(items=items, total_count=total if total is not None else len(items))

    _log_degraded(payload)
    return PageResult.empty()


def _resolve(payload: Mapping[str, Any], path: tuple[str, ...]) -> tuple[Mapping[str, Any] | None, Any]:
    envelope: Any = payload
    for key in path[:-1]:
        envelope = envelope.get(key)
        if not isinstance(envelope, Mapping):
            return None, None
    return envelope, envelope.get(path[-1])


def _find_count(envelope: Mapping[str, Any]) -> int | None:
    for key in COUNT_KEYS:
        count = coerce_count(envelope.get(key))
        if count is not None:
            return count
    return None


def _log_degraded(payload: Any) -> None:
    shape = type(payload).__name__
    if isinstance(payload, Mapping):
        shape = f"object keys={sorted(str(key) for key in payload)[:10]}"
    log_event(logger, "normalizers", "normalize_page", "degraded", level=logging.DEBUG, shape=shape)
