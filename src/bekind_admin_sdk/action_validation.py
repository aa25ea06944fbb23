from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from pydantic import ValidationError as PydanticValidationError

from .models import DESCRIPTION_MAX_LENGTH, HEX_COLOR_RE, NewAction


@dataclass(frozen=True)
class ValidationIssue:
    field: str
    reason: str


class ClientValidationError(ValueError):
    def __init__(self, issues: list[ValidationIssue]) -> None:
        self.issues = issues
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        if not self.issues:
            return "Validation failed"
        issue = self.issues[0]
        return f"{issue.field}: {issue.reason}"


def validate_new_action(action: NewAction | Mapping[str, Any]) -> NewAction:
    """Check an admin-add payload before it is sent; reports every failing field."""
    data = _coerce(action)
    name = data.name.strip()
    description = data.description.strip()
    color = data.color.strip()

    issues: list[ValidationIssue] = []
    if not name:
        issues.append(ValidationIssue("name", "name is required"))
    if not description:
        issues.append(ValidationIssue("description", "description is required"))
    elif len(description) > DESCRIPTION_MAX_LENGTH:
        issues.append(
            ValidationIssue("description", f"description must be at most {DESCRIPTION_MAX_LENGTH} characters")
        )
    if not HEX_COLOR_RE.match(color):
        issues.append(ValidationIssue("color", "color must use #hex format (e.g. #FFF or #4F46E5)"))
    if not data.icon.content:
        issues.append(ValidationIssue("icon", "icon file is empty"))
    if issues:
        raise ClientValidationError(issues)
    return data.model_copy(update={"name": name, "description": description, "color": color})


def _coerce(action: NewAction | Mapping[str, Any]) -> NewAction:
    if isinstance(action, NewAction):
        return action
    try:
        return NewAction.model_validate(action)
    except PydanticValidationError as exc:
        issues = [
            ValidationIssue(
                field=".".join(str(part) for part in error.get("loc", ("payload",))),
                reason=str(error.get("msg", "Invalid value")),
            )
            for error in exc.errors()
        ]
        raise ClientValidationError(issues or [ValidationIssue("payload", "Invalid payload")]) from exc
