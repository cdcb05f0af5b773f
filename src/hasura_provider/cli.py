from __future__ import annotations

import argparse
import asyncio
import json
import sys
from pathlib import Path
from typing import Any, Sequence

from hasura_provider import __version__
from hasura_provider.config import get_settings
from hasura_provider.core.errors import ExitCode, ValidationError, main_with_error_handling
from hasura_provider.logging import configure_logging
from hasura_provider.providers import HasuraProvider, create_provider
from hasura_provider.providers.base import ResourceResponse


def _load_json(value: str, what: str) -> Any:
    try:
        text = sys.stdin.read() if value == "-" else Path(value).expanduser().read_text()
    except OSError as exc:
        raise ValidationError(f"Cannot read {what} file: {exc}", {"path": value}) from exc
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise ValidationError(f"{what.capitalize()} file is not valid JSON: {exc}", {"path": value}) from exc


def _print_json(payload: Any) -> None:
    print(json.dumps(payload, indent=2, sort_keys=True))


def _exit_code(response: ResourceResponse) -> int:
    if response.diagnostics.has_error():
        return ExitCode.PROVIDER_ERROR
    if response.diagnostics.warnings:
        return ExitCode.WARNING
    return ExitCode.SUCCESS


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="hasura-provider",
        description="Run a single hasura_remote_schema lifecycle call against Hasura",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--host", help="Hasura host (default: HASURA_HOST)")
    parser.add_argument("--query-uri", help="Full metadata API URL (default: HASURA_QUERY_URI)")
    parser.add_argument(
        "--admin-secret",
        help="Admin secret (default: HASURA_GRAPHQL_ADMIN_SECRET)",
    )
    parser.add_argument("--log-level", default=None, help="Log level (default: HASURA_LOG_LEVEL or INFO)")
    subparsers = parser.add_subparsers(dest="command")

    subparsers.add_parser("schema", help="Print provider and resource schemas")

    create_parser = subparsers.add_parser("create", help="Register a remote schema")
    create_parser.add_argument("--plan", required=True, help="Planned values as JSON file ('-' for stdin)")

    read_parser = subparsers.add_parser("read", help="Refresh state from Hasura metadata")
    read_parser.add_argument("--state", required=True, help="Current state as JSON file ('-' for stdin)")

    update_parser = subparsers.add_parser("update", help="Update and reload a remote schema")
    update_parser.add_argument("--plan", required=True, help="Planned values as JSON file")
    update_parser.add_argument("--state", required=True, help="Current state as JSON file")

    delete_parser = subparsers.add_parser("delete", help="Remove a remote schema")
    delete_parser.add_argument("--state", required=True, help="Current state as JSON file ('-' for stdin)")

    return parser


async def _run_lifecycle(provider: HasuraProvider, args: argparse.Namespace) -> ResourceResponse:
    resource = provider.remote_schema()
    if args.command == "create":
        return await resource.create(_load_json(args.plan, "plan"))
    if args.command == "read":
        return await resource.read(_load_json(args.state, "state"))
    if args.command == "update":
        plan = _load_json(args.plan, "plan")
        state = _load_json(args.state, "state")
        return await resource.update(plan, state)
    return await resource.delete(_load_json(args.state, "state"))


@main_with_error_handling()
def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    settings = get_settings()
    configure_logging(args.log_level or settings.log_level)

    provider = create_provider("hasura", settings=settings)

    if args.command == "schema":
        resources = asyncio.run(provider.resources())
        _print_json(
            {
                "provider": {key: attr.to_dict() for key, attr in provider.schema().items()},
                "resources": [resource.to_dict() for resource in resources],
            }
        )
        return ExitCode.SUCCESS

    if args.command is None:
        parser.print_help()
        return ExitCode.WARNING

    values = {
        key: value
        for key, value in (
            ("host", args.host),
            ("query_uri", args.query_uri),
            ("admin_secret", args.admin_secret),
        )
        if value is not None
    }
    config_diags = provider.configure(values)
    if config_diags.has_error():
        _print_json({"state": None, "diagnostics": [d.to_dict() for d in config_diags]})
        return ExitCode.CONFIG_ERROR

    response = asyncio.run(_run_lifecycle(provider, args))
    response.diagnostics[:0] = config_diags
    _print_json(response.to_dict())
    return _exit_code(response)


if __name__ == "__main__":  # pragma: no cover - exercised via module entrypoint
    raise SystemExit(main())
