from __future__ import annotations

import uuid
from dataclasses import dataclass
from typing import Mapping

TRACE_HEADER = "X-Trace-ID"
TRACE_HEADER_ALIASES = (TRACE_HEADER, "X-Trace-Id", "x-trace-id", "X-Correlation-ID")


def new_trace_id() -> str:
    return str(uuid.uuid4())


@dataclass
class TraceContext:
    trace_id: str | None = None

    def ensure(self) -> str:
        if not self.trace_id:
            self.trace_id = new_trace_id()
        return self.trace_id

    def update_from_headers(self, headers: Mapping[str, str]) -> None:
        for key in TRACE_HEADER_ALIASES:
            trace_id = headers.get(key)
            if trace_id:
                self.trace_id = trace_id
                return

    def update_from_payload(self, payload: object) -> None:
        if not isinstance(payload, Mapping):
            return
        trace_id = payload.get("trace_id") or payload.get("traceId")
        if isinstance(trace_id, str) and trace_id:
            self.trace_id = trace_id
