from __future__ import annotations

import argparse
import logging
import os
from pathlib import Path

from pydantic import SecretStr

from steps.zerobug_notify import (
    GlobalSettings,
    PublisherSettings,
    ZeroBugNotifier,
    run_zerobug_publisher,
)

from .admin import list_sites, validate_connection
from .build import BuildRecord, BuildResult
from .config import ConfigError, ZeroBugConfig, load_config
from .secrets import resolve_token

TOKEN_ENV_VAR = "ZEROBUG_TOKEN"
PROPERTIES_ENV_VAR = "ZEROBUG_PROPERTIES"


def _load(args: argparse.Namespace) -> ZeroBugConfig:
    path = args.properties or os.environ.get(PROPERTIES_ENV_VAR)
    return load_config(Path(path) if path else None)


def _global_settings() -> GlobalSettings:
    default = os.environ.get(TOKEN_ENV_VAR)
    return GlobalSettings(default_token=SecretStr(default) if default else None)


def _cmd_notify(args: argparse.Namespace, config: ZeroBugConfig) -> int:
    build = BuildRecord(
        number=args.build_number,
        url=args.build_url,
        result=BuildResult(args.build_result),
    )
    settings = PublisherSettings(
        token=SecretStr(args.token) if args.token else None,
        target_site=args.site or "",
        only_build_success=args.only_success,
    )
    run_zerobug_publisher(build, settings, config, global_settings=_global_settings())

    for line in build.log:
        print(line)
    for action in build.actions:
        print(action.model_dump_json(indent=2))
    print(f"ZeroBug: build result {build.result.value}")
    return 1 if build.result == BuildResult.FAILURE else 0


def _cmd_identifier(args: argparse.Namespace, config: ZeroBugConfig) -> int:
    token = resolve_token(args.token, _global_settings().default_token)
    if token is None:
        print("Error: no token given (use --token or ZEROBUG_TOKEN)")
        return 1
    print(ZeroBugNotifier(config).identifier_for(token, args.site))
    return 0


def _cmd_list_sites(args: argparse.Namespace, config: ZeroBugConfig) -> int:
    # the local operator owns the config file, so counts as administrator
    for site in list_sites(config, is_admin=True):
        print(site)
    return 0


def _cmd_validate(args: argparse.Namespace, config: ZeroBugConfig) -> int:
    validation = validate_connection(config, is_admin=True)
    print(f"{validation.kind.upper()}: {validation.message}")
    return 0 if validation.is_ok else 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="zerobug", description="ZeroBug build notifier"
    )
    parser.add_argument(
        "--properties", help="Path to config.properties (default: $ZEROBUG_PROPERTIES)"
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    notify = subparsers.add_parser("notify", help="Run the post-build publisher")
    notify.add_argument("--token", help="Per-build token (default: $ZEROBUG_TOKEN)")
    notify.add_argument("--site", help="Target website")
    notify.add_argument(
        "--build-result",
        choices=[r.value for r in BuildResult],
        default=BuildResult.SUCCESS.value,
    )
    notify.add_argument(
        "--only-success",
        action="store_true",
        help="Notify only when the build succeeded",
    )
    notify.add_argument("--build-url", default="", help="Build URL shown on the action")
    notify.add_argument("--build-number", type=int, default=0)
    notify.set_defaults(handler=_cmd_notify)

    identifier = subparsers.add_parser("identifier", help="Print today's build identifier")
    identifier.add_argument("--token", help="Token (default: $ZEROBUG_TOKEN)")
    identifier.add_argument("--site", required=True, help="Target website")
    identifier.set_defaults(handler=_cmd_identifier)

    sites = subparsers.add_parser("list-sites", help="List selectable websites")
    sites.set_defaults(handler=_cmd_list_sites)

    validate = subparsers.add_parser(
        "validate-connection", help="Check the ZeroBug service answers HTTP 200"
    )
    validate.set_defaults(handler=_cmd_validate)
    return parser


def cli_main(argv: list[str] | None = None) -> int:
    """
    CLI entrypoint for the ZeroBug notifier.

    Exit codes: 0 on success, 1 when the build was failed by a
    misconfiguration, the connection check failed, or configuration could not
    be loaded.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        config = _load(args)
    except ConfigError as exc:
        print(f"Error: {exc.message}")
        return 1

    try:
        return args.handler(args, config)
    except Exception as exc:  # pragma: no cover - surfaces CLI errors
        print(f"Error: {exc}")
        return 1


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(cli_main())
