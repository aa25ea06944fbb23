from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from platformdirs import user_data_dir
from pydantic import ValidationError as PydanticValidationError

from .models import StoredCredential


class CredentialStore(Protocol):
    def get(self) -> str | None: ...

    def set(self, token: str) -> None: ...

    def clear(self) -> None: ...


@dataclass
class FileCredentialStore:
    app_name: str = "bekind-admin"
    filename: str = "credential.json"
    path: str | Path | None = None

    def _path(self) -> Path:
        if self.path is not None:
            target = Path(self.path)
            target.parent.mkdir(parents=True, exist_ok=True)
            return target
        base = Path(user_data_dir(self.app_name, "BeKind"))
        base.mkdir(parents=True, exist_ok=True)
        return base / self.filename

    def get(self) -> str | None:
        path = self._path()
        if not path.exists():
            return None
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
            return StoredCredential.model_validate(data).token
        except (OSError, ValueError, PydanticValidationError):
            self.clear()
            return None

    def set(self, token: str) -> None:
        path = self._path()
        path.write_text(json.dumps(StoredCredential(token=token).model_dump()), encoding="utf-8")
        try:
            path.chmod(0o600)
        except OSError:
            pass

    def clear(self) -> None:
        self._path().unlink(missing_ok=True)


@dataclass
class MemoryCredentialStore:
    token: str | None = None

    def get(self) -> str | None:
        return self.token

    def set(self, token: str) -> None:
        self.token = token

    def clear(self) -> None:
        self.token = None
