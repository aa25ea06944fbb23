from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from urllib.parse import urlparse

from dotenv import load_dotenv

DEFAULT_AUTH_BASE_URL = "https://dev.apinetbo.bekindnetwork.com/api"
DEFAULT_API_BASE_URL = "https://dev.api.bekindnetwork.com/api/v1"


class ConfigError(ValueError):
    pass


@dataclass(frozen=True)
class ClientConfig:
    env_name: str
    auth_base_url: str = DEFAULT_AUTH_BASE_URL
    api_base_url: str = DEFAULT_API_BASE_URL
    connect_timeout_seconds: float = 5.0
    read_timeout_seconds: float = 15.0
    max_connections: int = 10
    verify_ssl: bool = True
    page_size: int = 10
    credential_path: str | None = None
    log_level: str = "INFO"

    @property
    def normalized_env(self) -> str:
        return self.env_name.lower().strip()


def _coerce_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _read_float(name: str, default: str) -> float:
    raw = os.getenv(name, default)
    try:
        return float(raw)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"Invalid {name}: expected a number, got {raw!r}") from exc


def _read_int(name: str, default: str) -> int:
    raw = os.getenv(name, default)
    try:
        return int(raw)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"Invalid {name}: expected an integer, got {raw!r}") from exc


def _read_url(name: str, default: str) -> str:
    value = (os.getenv(name) or "").strip() or default
    parsed = urlparse(value)
    if parsed.scheme not in {"http", "https"} or not parsed.netloc:
        raise ConfigError(f"Invalid {name}: expected an http(s) URL, got {value!r}")
    return value.rstrip("/")


def _validate(condition: bool, message: str) -> None:
    if not condition:
        raise ConfigError(message)


def load_config(env_file: str | None = None) -> ClientConfig:
    """Load config from environment with optional .env override."""
    load_dotenv(env_file)

    env_name = (os.getenv("BEKIND_ENV") or "dev").strip()

    auth_base_url = _read_url("BEKIND_AUTH_BASE_URL", DEFAULT_AUTH_BASE_URL)
    api_base_url = _read_url("BEKIND_API_BASE_URL", DEFAULT_API_BASE_URL)

    timeout_seconds = _read_float("BEKIND_TIMEOUT_SECONDS", "15")
    _validate(
        timeout_seconds > 0,
        f"Invalid BEKIND_TIMEOUT_SECONDS: expected > 0, got {timeout_seconds}",
    )

    connect_timeout_seconds = _read_float(
        "BEKIND_CONNECT_TIMEOUT_SECONDS", str(min(timeout_seconds, 5.0))
    )
    _validate(
        connect_timeout_seconds > 0,
        (
            "Invalid BEKIND_CONNECT_TIMEOUT_SECONDS: "
            f"expected > 0, got {connect_timeout_seconds}"
        ),
    )

    max_connections = _read_int("BEKIND_MAX_CONNECTIONS", "10")
    _validate(
        max_connections >= 1,
        f"Invalid BEKIND_MAX_CONNECTIONS: expected >= 1, got {max_connections}",
    )

    page_size = _read_int("BEKIND_PAGE_SIZE", "10")
    _validate(page_size >= 1, f"Invalid BEKIND_PAGE_SIZE: expected >= 1, got {page_size}")

    log_level = (os.getenv("BEKIND_LOG_LEVEL") or "INFO").strip().upper()
    _validate(
        isinstance(logging.getLevelName(log_level), int),
        f"Invalid BEKIND_LOG_LEVEL: unknown level {log_level!r}",
    )

    credential_path = (os.getenv("BEKIND_CREDENTIAL_PATH") or "").strip() or None

    return ClientConfig(
        env_name=env_name,
        auth_base_url=auth_base_url,
        api_base_url=api_base_url,
        connect_timeout_seconds=connect_timeout_seconds,
        read_timeout_seconds=max(timeout_seconds, connect_timeout_seconds),
        max_connections=max_connections,
        verify_ssl=_coerce_bool(os.getenv("BEKIND_VERIFY_SSL"), True),
        page_size=page_size,
        credential_path=credential_path,
        log_level=log_level,
    )
