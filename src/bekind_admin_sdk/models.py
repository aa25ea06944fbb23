from __future__ import annotations

import re
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

HEX_COLOR_RE = re.compile(r"^#([A-Fa-f0-9]{6}|[A-Fa-f0-9]{3})$")
DEFAULT_ACTION_COLOR = "#4F46E5"
DESCRIPTION_MAX_LENGTH = 200
_ACTIVE_STATUS_VALUES = {"1", "true", "active", "activo"}


class StoredCredential(BaseModel):
    token: str = Field(min_length=1)


class LoginRequest(BaseModel):
    username: str
    password: str


class LoginUser(BaseModel):
    email: str | None = None
    name: str | None = None


class LoginResponse(BaseModel):
    token: str = Field(min_length=1)
    expiration: str | None = None
    user: LoginUser | None = None


class ActionItem(BaseModel):
    """One row of the admin action list.

    Built from any payload that passed the normalizer's minimal-shape check
    (``id``, ``name`` and ``status`` present); missing display fields degrade
    to empty values instead of failing validation.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str
    name: str
    description: str = ""
    icon: str | None = None
    status: bool | int | str | None = None
    created_at: str = Field(default="", alias="createdAt")
    color: str | None = None

    @field_validator("id", "name", "description", "created_at", mode="before")
    @classmethod
    def _coerce_text(cls, value: Any) -> str:
        if value is None:
            return ""
        return value if isinstance(value, str) else str(value)

    @field_validator("icon", "color", mode="before")
    @classmethod
    def _coerce_optional_text(cls, value: Any) -> str | None:
        if value is None or value == "":
            return None
        return value if isinstance(value, str) else str(value)

    @field_validator("status", mode="before")
    @classmethod
    def _coerce_status(cls, value: Any) -> bool | int | str | None:
        if value is None or isinstance(value, (bool, int, str)):
            return value
        return str(value)

    @property
    def is_active(self) -> bool:
        if isinstance(self.status, bool):
            return self.status
        if isinstance(self.status, int):
            return self.status == 1
        if isinstance(self.status, str):
            return self.status.strip().lower() in _ACTIVE_STATUS_VALUES
        return False


class IconUpload(BaseModel):
    filename: str = Field(min_length=1)
    content: bytes
    content_type: str = "application/octet-stream"

    def as_file(self) -> tuple[str, bytes, str]:
        return (self.filename, self.content, self.content_type)


class NewAction(BaseModel):
    name: str
    description: str
    status: bool = True
    color: str = DEFAULT_ACTION_COLOR
    icon: IconUpload

    def form_fields(self) -> dict[str, str]:
        return {
            "name": self.name,
            "description": self.description,
            "status": "1" if self.status else "0",
            "color": self.color,
        }
