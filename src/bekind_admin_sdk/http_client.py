from __future__ import annotations

import logging
import time
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any

import httpx

from .config import ClientConfig
from .error_mapper import map_error
from .exceptions import ApiError, TransportError
from .logger import get_logger, log_event
from .session import SessionManager
from .tracing import TRACE_HEADER, TraceContext

logger = get_logger(__name__)

LOGIN_VIEW = "login"
JSON_CONTENT_TYPE = "application/json"


@dataclass(frozen=True)
class LoginRequired:
    """Emitted once per session invalidation when the operator must sign in again."""

    reason: str
    status_code: int
    trace_id: str | None


AuthErrorHandler = Callable[[LoginRequired], None]


@dataclass
class HttpGateway:
    config: ClientConfig
    session: SessionManager
    base_url: str | None = None
    authenticated: bool = True
    client: httpx.AsyncClient | None = None
    current_view: Callable[[], str | None] | None = None
    login_view: str = LOGIN_VIEW
    _handlers: list[AuthErrorHandler] = field(default_factory=list)

    def __post_init__(self) -> None:
        if self.base_url is None:
            self.base_url = self.config.api_base_url
        if self.client is None:
            self.client = httpx.AsyncClient(
                timeout=httpx.Timeout(
                    self.config.read_timeout_seconds,
                    connect=self.config.connect_timeout_seconds,
                ),
                verify=self.config.verify_ssl,
                limits=httpx.Limits(max_connections=self.config.max_connections),
            )

    def register_auth_error_handler(self, handler: AuthErrorHandler) -> None:
        self._handlers.append(handler)

    def _build_url(self, path: str) -> str:
        return f"{(self.base_url or '').rstrip('/')}/{path.lstrip('/')}"

    def _prepare_headers(
        self,
        headers: Mapping[str, str] | None,
        *,
        multipart: bool,
        trace_id: str,
    ) -> dict[str, str]:
        request_headers = {"Accept": JSON_CONTENT_TYPE}
        if headers:
            request_headers.update(headers)
        request_headers[TRACE_HEADER] = trace_id
        if self.authenticated:
            token = self.session.credential()
            if token:
                request_headers["Authorization"] = f"Bearer {token}"
        # The multipart boundary is generated by httpx; an explicit header would drop it.
        if multipart:
            for key in [key for key in request_headers if key.lower() == "content-type"]:
                request_headers.pop(key)
        else:
            request_headers["Content-Type"] = JSON_CONTENT_TYPE
        return request_headers

    async def request(
        self,
        method: str,
        path: str,
        *,
        headers: Mapping[str, str] | None = None,
        params: Mapping[str, Any] | None = None,
        json_body: Any = None,
        data: Mapping[str, Any] | None = None,
        files: Mapping[str, Any] | None = None,
        module: str = "unknown",
        operation: str = "unknown",
    ) -> Any:
        if self.client is None:
            raise RuntimeError("HTTP client not initialized")
        normalized_method = method.upper()
        trace_context = TraceContext()
        trace_id = trace_context.ensure()
        multipart = files is not None
        request_headers = self._prepare_headers(headers, multipart=multipart, trace_id=trace_id)
        url = self._build_url(path)

        started = time.monotonic()
        try:
            response = await self.client.request(
                normalized_method,
                url,
                headers=request_headers,
                params=dict(params) if params else None,
                json=json_body if not multipart else None,
                data=dict(data) if data is not None else None,
                files=files,
            )
        except httpx.TimeoutException as exc:
            self._log_call(module, operation, normalized_method, path, 0, started, "timeout", trace_id)
            raise TransportError(
                code="TIMEOUT_ERROR",
                message="The server took too long to respond",
                details={"type": type(exc).__name__},
                trace_id=trace_id,
                status_code=0,
                raw_payload=None,
            ) from exc
        except httpx.TransportError as exc:
            self._log_call(module, operation, normalized_method, path, 0, started, "network_error", trace_id)
            raise TransportError(
                code="NETWORK_ERROR",
                message=str(exc) or "Network error while calling the API",
                details={"type": type(exc).__name__},
                trace_id=trace_id,
                status_code=0,
                raw_payload=None,
            ) from exc

        trace_context.update_from_headers(response.headers)
        payload = _parse_body(response)

        if response.is_success:
            self._log_call(
                module, operation, normalized_method, path, response.status_code, started, "success",
                trace_context.trace_id,
            )
            return payload

        trace_context.update_from_payload(payload)
        error = map_error(response.status_code, payload, trace_context.trace_id)
        self._log_call(
            module, operation, normalized_method, path, response.status_code, started, "error", error.trace_id
        )
        if response.status_code == 401 and self.authenticated:
            self._handle_unauthorized(error)
        raise error

    async def get(self, path: str, **kwargs: Any) -> Any:
        return await self.request("GET", path, **kwargs)

    async def post(self, path: str, **kwargs: Any) -> Any:
        return await self.request("POST", path, **kwargs)

    def _handle_unauthorized(self, error: ApiError) -> None:
        if not self.session.invalidate(reason=error.code):
            return
        view = self.current_view() if self.current_view else None
        if view == self.login_view:
            return
        event = LoginRequired(reason=error.code, status_code=error.status_code, trace_id=error.trace_id)
        log_event(logger, "http", "login_required", "emitted", level=logging.WARNING, trace_id=error.trace_id)
        for handler in list(self._handlers):
            handler(event)

    def _log_call(
        self,
        module: str,
        operation: str,
        method: str,
        path: str,
        status_code: int,
        started: float,
        outcome: str,
        trace_id: str | None,
    ) -> None:
        log_event(
            logger,
            module,
            operation,
            outcome,
            level=logging.INFO if outcome == "success" else logging.WARNING,
            trace_id=trace_id,
            method=method,
            path=path,
            status_code=status_code,
            duration_ms=int((time.monotonic() - started) * 1000),
        )

    async def aclose(self) -> None:
        if self.client is not None:
            await self.client.aclose()

    async def __aenter__(self) -> HttpGateway:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()


def _parse_body(response: httpx.Response) -> Any:
    if not response.content:
        return None
    try:
        return response.json()
    # Pathologically nested JSON overflows the decoder.
    except (ValueError, RecursionError):
        return response.text
