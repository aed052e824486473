"""Command-line entry point for the Skyport panel.

Usage:
    skyport-panel serve                        # API on 0.0.0.0:3001
    skyport-panel serve --config panel.yaml --port 8080
    skyport-panel token alice --admin          # print an admin identity token
"""

import argparse
import sys
from typing import Optional, Sequence

from skyport_panel.config import DEFAULT_CONFIG_PATH, PanelConfig, load_config
from skyport_panel.errors import ConfigError
from skyport_panel.logging_config import configure_logging
from skyport_panel.server import build_auth, serve


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="skyport-panel",
        description="Skyport panel — node registry and health checks",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--config",
        default=DEFAULT_CONFIG_PATH,
        help=f"YAML config file (default: {DEFAULT_CONFIG_PATH})",
    )
    # Accept --config after the subcommand too, without clobbering the
    # top-level value when it is given there instead.
    config_parent = argparse.ArgumentParser(add_help=False)
    config_parent.add_argument(
        "--config",
        default=argparse.SUPPRESS,
        help="YAML config file",
    )

    commands = parser.add_subparsers(dest="command", required=True)

    serve_cmd = commands.add_parser(
        "serve", parents=[config_parent], help="Run the admin API"
    )
    serve_cmd.add_argument("--host", help="Bind address (overrides config)")
    serve_cmd.add_argument("--port", type=int, help="Bind port (overrides config)")

    token_cmd = commands.add_parser(
        "token", parents=[config_parent], help="Issue an identity token"
    )
    token_cmd.add_argument("username", help="Operator username")
    token_cmd.add_argument(
        "--admin",
        action="store_true",
        help="Grant admin privileges",
    )
    return parser.parse_args(argv)


def _apply_cli_overrides(config: PanelConfig, args: argparse.Namespace) -> PanelConfig:
    if getattr(args, "host", None):
        config.server.host = args.host
    if getattr(args, "port", None):
        config.server.port = args.port
    return config


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_args(argv)

    try:
        config = _apply_cli_overrides(load_config(args.config), args)
        configure_logging(config.logging.level, config.logging.json_output)

        if args.command == "token":
            print(build_auth(config).generate_token(args.username, admin=args.admin))
            return 0

        serve(config)
        return 0

    except ConfigError as exc:
        print(f"skyport-panel: {exc}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
