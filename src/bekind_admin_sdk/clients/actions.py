from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from ..action_validation import validate_new_action
from ..http_client import HttpGateway
from ..models import ActionItem, NewAction
from ..normalizers import normalize_page
from ..pagination import PageQuery, PageResult

LIST_PATH = "/actions/admin-list"
ADD_PATH = "/actions/admin-add"


@dataclass
class ActionsClient:
    gateway: HttpGateway

    async def list_actions(self, query: PageQuery) -> PageResult[ActionItem]:
        payload = await self.gateway.get(
            LIST_PATH,
            params=query.to_params(),
            module="actions",
            operation="list",
        )
        page = normalize_page(payload)
        items = [ActionItem.model_validate(row) for row in page.items]
        return PageResult(items=items, total_count=page.total_count)

    async def create_action(self, action: NewAction | Mapping[str, Any]) -> Any:
        validated = validate_new_action(action)
        return await self.gateway.post(
            ADD_PATH,
            data=validated.form_fields(),
            files={"icon": validated.icon.as_file()},
            module="actions",
            operation="create",
        )
