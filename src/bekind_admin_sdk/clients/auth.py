from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from ..exceptions import InvalidLoginResponseError
from ..http_client import HttpGateway
from ..models import LoginRequest, LoginResponse

LOGIN_PATH = "/Authentication/Login"


def extract_token(payload: Any) -> str | None:
    """The login endpoint answers with either a bare token or ``{"token": ...}``."""
    if isinstance(payload, str):
        token = payload.strip().strip('"')
        return token or None
    if isinstance(payload, dict):
        try:
            return LoginResponse.model_validate(payload).token
        except PydanticValidationError:
            return None
    return None


@dataclass
class AuthClient:
    gateway: HttpGateway

    async def login(self, username: str, password: str) -> str:
        body = LoginRequest(username=username, password=password).model_dump()
        data = await self.gateway.post(LOGIN_PATH, json_body=body, module="auth", operation="login")
        token = extract_token(data)
        if token is None:
            raise InvalidLoginResponseError(
                code="INVALID_LOGIN_RESPONSE",
                message="Login response did not contain a token",
                details={"type": type(data).__name__},
                trace_id=None,
                status_code=200,
                raw_payload=None,
            )
        return token
