from __future__ import annotations

import asyncio

import httpx
import pytest

from bekind_admin_sdk.controller import AdminController
from bekind_admin_sdk.credential_store import MemoryCredentialStore
from bekind_admin_sdk.exceptions import AuthError

ROWS = [{"id": str(index), "name": f"Acción {index}", "status": 1} for index in range(3)]


def _reply(reply: tuple[int, dict]) -> httpx.Response:
    status_code, kwargs = reply
    return httpx.Response(status_code, **kwargs)


class FakeBackend:
    """Routes requests for both API hosts and records what was sent."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.login_reply: tuple[int, dict] = (200, {"text": "issued-token"})
        self.list_reply: tuple[int, dict] = (200, {"json": {"data": ROWS, "totalRecords": 3}})
        self.add_reply: tuple[int, dict] = (200, {"json": {"id": "99"}})

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.url.path.endswith("/Authentication/Login"):
            return _reply(self.login_reply)
        if request.url.path.endswith("/actions/admin-list"):
            return _reply(self.list_reply)
        if request.url.path.endswith("/actions/admin-add"):
            return _reply(self.add_reply)
        return httpx.Response(404)


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
def controller(config, backend) -> AdminController:
    return AdminController(config, store=MemoryCredentialStore(), transport=httpx.MockTransport(backend))


def test_start_without_credential_shows_login(controller) -> None:
    controller.start()

    assert controller.current_view == "login"
    assert controller.session.is_authenticated is False


def test_start_with_credential_shows_dashboard(config, backend) -> None:
    controller = AdminController(
        config, store=MemoryCredentialStore(token="stored"), transport=httpx.MockTransport(backend)
    )
    views: list[str] = []
    controller.subscribe_navigation(views.append)

    controller.start()

    assert controller.current_view == "dashboard"
    assert views == ["dashboard"]


def test_login_success_stores_token_and_navigates(controller, backend) -> None:
    controller.start()

    result = asyncio.run(controller.login(" admin ", "secret"))

    assert result.success is True
    assert result.message == "Sesión iniciada."
    assert controller.store.get() == "issued-token"
    assert controller.current_view == "dashboard"
    assert str(backend.requests[0].url) == "https://auth.example.test/api/Authentication/Login"


def test_login_with_blank_fields_does_not_call_server(controller, backend) -> None:
    controller.start()

    result = asyncio.run(controller.login("  ", "secret"))

    assert result.success is False
    assert result.message == "Completa usuario y contraseña."
    assert backend.requests == []


def test_login_rejected_credentials(controller, backend) -> None:
    backend.login_reply = (401, {})
    controller.start()

    result = asyncio.run(controller.login("admin", "wrong"))

    assert result.success is False
    assert result.message == "Error de credenciales"
    assert controller.current_view == "login"


def test_login_rejected_credentials_with_server_message(controller, backend) -> None:
    backend.login_reply = (401, {"json": {"message": "Usuario bloqueado"}})
    controller.start()

    result = asyncio.run(controller.login("admin", "wrong"))

    assert result.message == "Usuario bloqueado"


def test_login_invalid_response_shape(controller, backend) -> None:
    backend.login_reply = (200, {"json": {"user": {"name": "x"}}})
    controller.start()

    result = asyncio.run(controller.login("admin", "secret"))

    assert result.success is False
    assert result.message == "Formato de respuesta inválido"
    assert controller.session.is_authenticated is False


def test_listing_uses_configured_page_size_and_bearer(controller, backend) -> None:
    controller.start()
    asyncio.run(controller.login("admin", "secret"))

    asyncio.run(controller.listing.refetch())

    request = backend.requests[-1]
    assert request.headers["Authorization"] == "Bearer issued-token"
    assert request.url.params["pageSize"] == "10"
    assert [item.id for item in controller.listing.items] == ["0", "1", "2"]
    assert controller.listing.visible_range() == (1, 3, 3)


def test_expired_session_redirects_to_login_once(config, backend) -> None:
    backend.list_reply = (401, {"json": {"message": "Token expired"}})
    controller = AdminController(
        config, store=MemoryCredentialStore(token="stale"), transport=httpx.MockTransport(backend)
    )
    controller.start()
    views: list[str] = []
    controller.subscribe_navigation(views.append)

    async def scenario() -> list:
        return await asyncio.gather(
            controller.listing.refetch(),
            controller.listing.refetch(),
            return_exceptions=True,
        )

    results = asyncio.run(scenario())

    assert any(isinstance(result, AuthError) for result in results)
    assert views == ["login"]
    assert controller.session.is_authenticated is False
    assert controller.store.get() is None
    assert controller.listing.items == []


def test_logout_clears_state(controller) -> None:
    controller.start()
    asyncio.run(controller.login("admin", "secret"))
    asyncio.run(controller.listing.refetch())

    controller.logout()

    assert controller.current_view == "login"
    assert controller.store.get() is None
    assert controller.listing.items == []


def test_create_action_reads_icon_and_returns_to_list(controller, backend, tmp_path) -> None:
    icon = tmp_path / "leaf.png"
    icon.write_bytes(b"\x89PNG\r\n")
    controller.start()
    asyncio.run(controller.login("admin", "secret"))
    controller.navigate("create")

    result = asyncio.run(
        controller.create_action(name="Reciclar", description="Separar residuos", color="#4F46E5", icon_path=icon)
    )

    assert result.success is True
    assert result.message == "¡Acción creada!"
    assert result.payload == {"id": "99"}
    assert controller.current_view == "dashboard"
    assert b"Content-Type: image/png" in backend.requests[-1].content


def test_create_action_reports_validation_issues(controller, backend, tmp_path) -> None:
    icon = tmp_path / "leaf.png"
    icon.write_bytes(b"\x89PNG")
    controller.start()
    asyncio.run(controller.login("admin", "secret"))
    sent_before = len(backend.requests)

    result = asyncio.run(controller.create_action(name="x", description="", color="#GGG", icon_path=icon))

    assert result.success is False
    assert {issue.field for issue in result.issues} == {"description", "color"}
    assert len(backend.requests) == sent_before


def test_create_action_missing_icon_file(controller, tmp_path) -> None:
    controller.start()

    result = asyncio.run(
        controller.create_action(name="x", description="y", color="#FFF", icon_path=tmp_path / "missing.png")
    )

    assert result.success is False
    assert result.issues[0].field == "icon"


def test_create_action_server_failure(controller, backend, tmp_path) -> None:
    backend.add_reply = (500, {})
    icon = tmp_path / "leaf.png"
    icon.write_bytes(b"\x89PNG")
    controller.start()
    asyncio.run(controller.login("admin", "secret"))
    controller.navigate("create")

    result = asyncio.run(controller.create_action(name="x", description="y", color="#FFF", icon_path=icon))

    assert result.success is False
    assert result.message == "Error interno del servidor."
    assert controller.current_view == "create"


def test_navigate_rejects_unknown_view(controller) -> None:
    with pytest.raises(ValueError):
        controller.navigate("settings")


def _gated_backend(gate_holder: dict, add_status: int = 200):
    async def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path.endswith("/actions/admin-list"):
            await gate_holder["gate"].wait()
            return httpx.Response(200, json={"data": ROWS, "totalRecords": 3})
        return httpx.Response(add_status, json={"message": "Token expired"} if add_status == 401 else {"id": "1"})

    return handler


def test_logout_during_fetch_keeps_list_empty(config) -> None:
    gate_holder: dict = {}
    controller = AdminController(
        config,
        store=MemoryCredentialStore(token="stored"),
        transport=httpx.MockTransport(_gated_backend(gate_holder)),
    )
    controller.start()

    async def scenario():
        gate_holder["gate"] = asyncio.Event()
        pending = asyncio.create_task(controller.listing.refetch())
        await asyncio.sleep(0.01)
        controller.logout()
        gate_holder["gate"].set()
        return await pending

    outcome = asyncio.run(scenario())

    assert outcome is None
    assert controller.current_view == "login"
    assert controller.session.is_authenticated is False
    assert controller.listing.items == []
    assert controller.listing.loading is False


def test_rejection_elsewhere_discards_in_flight_page(config, tmp_path) -> None:
    icon = tmp_path / "leaf.png"
    icon.write_bytes(b"\x89PNG")
    gate_holder: dict = {}
    controller = AdminController(
        config,
        store=MemoryCredentialStore(token="stored"),
        transport=httpx.MockTransport(_gated_backend(gate_holder, add_status=401)),
    )
    controller.start()

    async def scenario():
        gate_holder["gate"] = asyncio.Event()
        pending = asyncio.create_task(controller.listing.refetch())
        await asyncio.sleep(0.01)
        created = await controller.create_action(name="x", description="y", color="#FFF", icon_path=icon)
        gate_holder["gate"].set()
        return created, await pending

    created, outcome = asyncio.run(scenario())

    assert created.success is False
    assert outcome is None
    assert controller.current_view == "login"
    assert controller.listing.items == []
