from __future__ import annotations

import mimetypes
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import httpx

from .action_validation import ClientValidationError, ValidationIssue
from .clients.actions import ActionsClient
from .clients.auth import AuthClient
from .config import ClientConfig
from .credential_store import CredentialStore, FileCredentialStore
from .error_mapper import to_display_message
from .exceptions import ApiError, AuthError, InvalidLoginResponseError
from .http_client import LOGIN_VIEW, HttpGateway, LoginRequired
from .listing import ListController
from .logger import get_logger, log_event, set_log_level
from .models import ActionItem, IconUpload, NewAction
from .session import SessionManager

logger = get_logger(__name__)

LIST_VIEW = "dashboard"
CREATE_VIEW = "create"
VIEWS = (LOGIN_VIEW, LIST_VIEW, CREATE_VIEW)

NavigationListener = Callable[[str], None]


@dataclass(frozen=True)
class LoginResult:
    success: bool
    message: str
    trace_id: str | None = None


@dataclass(frozen=True)
class MutationResult:
    success: bool
    message: str
    issues: list[ValidationIssue] = field(default_factory=list)
    trace_id: str | None = None
    payload: Any = None


class AdminController:
    """Operator shell wiring the session, both API surfaces and the action list."""

    def __init__(
        self,
        config: ClientConfig,
        *,
        store: CredentialStore | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.config = config
        set_log_level(config.log_level)
        self.store = store or FileCredentialStore(path=config.credential_path)
        self.session = SessionManager(self.store)
        self.current_view = LOGIN_VIEW
        self._navigation_listeners: list[NavigationListener] = []

        self.auth_gateway = HttpGateway(
            config,
            self.session,
            base_url=config.auth_base_url,
            authenticated=False,
            client=self._build_client(transport),
        )
        self.api_gateway = HttpGateway(
            config,
            self.session,
            base_url=config.api_base_url,
            client=self._build_client(transport),
            current_view=lambda: self.current_view,
        )
        self.api_gateway.register_auth_error_handler(self._on_login_required)

        self.auth = AuthClient(self.auth_gateway)
        self.actions = ActionsClient(self.api_gateway)
        self.listing: ListController[ActionItem] = ListController(
            self.actions.list_actions, page_size=config.page_size
        )

    def _build_client(self, transport: httpx.AsyncBaseTransport | None) -> httpx.AsyncClient | None:
        if transport is None:
            return None
        return httpx.AsyncClient(transport=transport)

    def subscribe_navigation(self, listener: NavigationListener) -> None:
        self._navigation_listeners.append(listener)

    def navigate(self, view: str) -> None:
        if view not in VIEWS:
            raise ValueError(f"Unknown view: {view}")
        if view == self.current_view:
            return
        self.current_view = view
        for listener in list(self._navigation_listeners):
            listener(view)

    def start(self) -> None:
        session = self.session.bootstrap()
        self.navigate(LIST_VIEW if session.is_authenticated else LOGIN_VIEW)

    async def login(self, username: str, password: str) -> LoginResult:
        if not username.strip() or not password.strip():
            return LoginResult(success=False, message="Completa usuario y contraseña.")
        try:
            token = await self.auth.login(username.strip(), password)
        except InvalidLoginResponseError as error:
            return LoginResult(success=False, message=to_display_message(error), trace_id=error.trace_id)
        except AuthError as error:
            return LoginResult(
                success=False,
                message=to_display_message(error, fallback="Error de credenciales"),
                trace_id=error.trace_id,
            )
        except ApiError as error:
            return LoginResult(success=False, message=to_display_message(error), trace_id=error.trace_id)
        self.session.login(token)
        self.navigate(LIST_VIEW)
        return LoginResult(success=True, message="Sesión iniciada.")

    def logout(self) -> None:
        self.session.logout()
        self.listing.reset()
        self.navigate(LOGIN_VIEW)

    async def create_action(
        self,
        *,
        name: str,
        description: str,
        color: str,
        icon_path: str | Path,
        status: bool = True,
    ) -> MutationResult:
        path = Path(icon_path)
        try:
            icon = IconUpload(filename=path.name, content=path.read_bytes(), content_type=_guess_content_type(path))
        except OSError as exc:
            issue = ValidationIssue("icon", f"cannot read icon file: {exc.strerror or exc}")
            return MutationResult(success=False, message=issue.reason, issues=[issue])
        return await self.submit_action(
            {"name": name, "description": description, "color": color, "status": status, "icon": icon}
        )

    async def submit_action(self, action: NewAction | dict[str, Any]) -> MutationResult:
        try:
            payload = await self.actions.create_action(action)
        except ClientValidationError as error:
            return MutationResult(success=False, message=str(error), issues=error.issues)
        except ApiError as error:
            return MutationResult(
                success=False,
                message=to_display_message(error),
                trace_id=error.trace_id,
            )
        log_event(logger, "actions", "create", "success")
        if self.session.is_authenticated:
            self.navigate(LIST_VIEW)
        return MutationResult(success=True, message="¡Acción creada!", payload=payload)

    def _on_login_required(self, event: LoginRequired) -> None:
        self.listing.reset()
        self.navigate(LOGIN_VIEW)

    async def aclose(self) -> None:
        await self.auth_gateway.aclose()
        await self.api_gateway.aclose()


def _guess_content_type(path: Path) -> str:
    guessed, _ = mimetypes.guess_type(path.name)
    return guessed or "application/octet-stream"
