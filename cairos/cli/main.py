from __future__ import annotations

import argparse
import logging
import signal
import sys
import threading
from typing import Sequence

from cairos.domain.exceptions import DomainError
from cairos.shared.log import configure_logging

from .commands.auth import run_login_github, run_logout
from .commands.language_server import run_language_server
from .commands.setup import run_setup
from .config import ConfigError, resolve_config_path
from .settings import get_client_settings


logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="cairos", description="Cairos activity tracker client.")
    commands = parser.add_subparsers(dest="command", required=True)

    setup = commands.add_parser("setup", help="Write a fresh client configuration.")
    setup.add_argument("--base-url", required=True, help="Base URL of the Cairos API.")

    auth = commands.add_parser("auth", help="Manage authentication.")
    auth_commands = auth.add_subparsers(dest="auth_command", required=True)
    login = auth_commands.add_parser("login", help="Log in to the Cairos API.")
    login.add_argument(
        "--github",
        action="store_true",
        help="Authorize this device with GitHub.",
    )
    auth_commands.add_parser("logout", help="Log out and forget the stored token.")

    commands.add_parser("language-server", help="Run the editor language server on stdio.")
    return parser


def _install_abort_handlers(abort_event: threading.Event) -> None:
    def _abort(signum, frame):
        logger.info("cli: abort_requested signal=%s", signum)
        abort_event.set()

    signal.signal(signal.SIGINT, _abort)
    signal.signal(signal.SIGTERM, _abort)


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    settings = get_client_settings()
    configure_logging(settings.log_level)

    try:
        config_path = resolve_config_path(settings.config_file)
        if args.command == "setup":
            return run_setup(config_path=config_path, base_url=args.base_url, out=sys.stdout)
        if args.command == "auth":
            if args.auth_command == "logout":
                return run_logout(config_path=config_path, settings=settings, out=sys.stdout)
            if not args.github:
                parser.error("auth login requires a provider, e.g. --github")
            abort_event = threading.Event()
            _install_abort_handlers(abort_event)
            return run_login_github(
                config_path=config_path,
                settings=settings,
                abort_event=abort_event,
                out=sys.stdout,
            )
        return run_language_server(config_path=config_path, settings=settings)
    except (ConfigError, DomainError) as exc:
        logger.debug("cli: command_failed command=%s", args.command, exc_info=True)
        print(f"error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
