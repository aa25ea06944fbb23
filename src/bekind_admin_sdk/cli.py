from __future__ import annotations

import argparse
import asyncio
import json
from typing import Any

from .config import ConfigError, load_config
from .controller import AdminController
from .error_mapper import to_display_message
from .exceptions import ApiError
from .pagination import PAGE_SIZE_OPTIONS


def _print(payload: dict[str, Any]) -> None:
    print(json.dumps(payload, indent=2, ensure_ascii=False))


async def cmd_login(controller: AdminController, args: argparse.Namespace) -> int:
    result = await controller.login(args.username, args.password)
    _print({"success": result.success, "message": result.message, "trace_id": result.trace_id})
    return 0 if result.success else 1


async def cmd_logout(controller: AdminController, args: argparse.Namespace) -> int:
    controller.logout()
    _print({"success": True, "view": controller.current_view})
    return 0


async def cmd_status(controller: AdminController, args: argparse.Namespace) -> int:
    session = controller.session.session
    _print(
        {
            "env": controller.config.env_name,
            "authenticated": session.is_authenticated,
            "view": controller.current_view,
        }
    )
    return 0


async def cmd_list(controller: AdminController, args: argparse.Namespace) -> int:
    if not controller.session.is_authenticated:
        _print({"error": "NOT_AUTHENTICATED", "message": "Inicia sesión primero.", "view": controller.current_view})
        return 1
    listing = controller.listing
    try:
        if args.page_size is not None:
            listing.set_page_size(args.page_size)
        if args.search is not None:
            listing.set_search_term(args.search)
        if args.page is not None:
            listing.set_page(args.page)
    except ValueError as exc:
        _print({"error": "INVALID_QUERY", "message": str(exc), "view": controller.current_view})
        return 1
    try:
        await listing.refetch()
    except ApiError as exc:
        _print(
            {
                "error": exc.code,
                "message": to_display_message(exc),
                "trace_id": exc.trace_id,
                "view": controller.current_view,
            }
        )
        return 1
    first, last, total = listing.visible_range()
    _print(
        {
            "items": [item.model_dump(by_alias=True) for item in listing.items],
            "range": f"{first} - {last} de {total}",
            "page": listing.query.page_number,
            "page_size": listing.query.page_size,
            "has_next": listing.has_next,
            "has_prev": listing.has_prev,
        }
    )
    return 0


async def cmd_create(controller: AdminController, args: argparse.Namespace) -> int:
    result = await controller.create_action(
        name=args.name,
        description=args.description,
        color=args.color,
        icon_path=args.icon,
        status=not args.inactive,
    )
    _print(
        {
            "success": result.success,
            "message": result.message,
            "issues": [{"field": issue.field, "reason": issue.reason} for issue in result.issues],
            "trace_id": result.trace_id,
        }
    )
    return 0 if result.success else 1


async def _run(args: argparse.Namespace) -> int:
    config = load_config(args.env_file)
    controller = AdminController(config)
    try:
        controller.start()
        return await args.func(controller, args)
    finally:
        await controller.aclose()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="bekind-admin", description="BeKind actions admin CLI")
    parser.add_argument("--env-file", default=None)
    subparsers = parser.add_subparsers(dest="command", required=True)

    login_parser = subparsers.add_parser("login")
    login_parser.add_argument("--username", required=True)
    login_parser.add_argument("--password", required=True)
    login_parser.set_defaults(func=cmd_login)

    logout_parser = subparsers.add_parser("logout")
    logout_parser.set_defaults(func=cmd_logout)

    status_parser = subparsers.add_parser("status")
    status_parser.set_defaults(func=cmd_status)

    list_parser = subparsers.add_parser("list")
    list_parser.add_argument("--page", type=int, default=None)
    list_parser.add_argument("--page-size", type=int, default=None, choices=PAGE_SIZE_OPTIONS)
    list_parser.add_argument("--search", default=None)
    list_parser.set_defaults(func=cmd_list)

    create_parser = subparsers.add_parser("create")
    create_parser.add_argument("--name", required=True)
    create_parser.add_argument("--description", required=True)
    create_parser.add_argument("--color", default="#4F46E5")
    create_parser.add_argument("--icon", required=True)
    create_parser.add_argument("--inactive", action="store_true")
    create_parser.set_defaults(func=cmd_create)
    return parser


def main(argv: list[str] | None = None) -> None:
    args = build_parser().parse_args(argv)
    try:
        code = asyncio.run(_run(args))
    except ConfigError as exc:
        _print({"error": "CONFIG_ERROR", "message": str(exc)})
        raise SystemExit(2) from exc
    if code:
        raise SystemExit(code)


if __name__ == "__main__":
    main()
