import json
import logging
from datetime import datetime, timezone
from typing import Any

SENSITIVE_KEYS = {"token", "access_token", "authorization", "password", "secret", "credential"}
REDACTED = "***"


PACKAGE_LOGGER = "bekind_admin_sdk"


def get_logger(name: str) -> logging.Logger:
    base = logging.getLogger(PACKAGE_LOGGER)
    if not base.handlers:
        base.setLevel(logging.INFO)
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("%(message)s"))
        base.addHandler(handler)
    return logging.getLogger(name)


def set_log_level(level: str | int) -> None:
    logging.getLogger(PACKAGE_LOGGER).setLevel(level)


def redact(context: dict[str, Any]) -> dict[str, Any]:
    return {
        key: REDACTED if any(marker in key.lower() for marker in SENSITIVE_KEYS) else value
        for key, value in context.items()
    }


def log_event(
    logger: logging.Logger,
    module: str,
    action: str,
    outcome: str,
    *,
    level: int = logging.INFO,
    trace_id: str | None = None,
    **context: Any,
) -> None:
    if not logger.isEnabledFor(level):
        return
    logger.log(
        level,
        json.dumps(
            {
                "ts": datetime.now(timezone.utc).isoformat(),
                "level": logging.getLevelName(level),
                "module": module,
                "action": action,
                "outcome": outcome,
                "trace_id": trace_id,
                **redact(context),
            },
            default=str,
        ),
    )
