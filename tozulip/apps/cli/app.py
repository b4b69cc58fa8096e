"""Command-line application: `tozulip [flags] "message"`."""

from __future__ import annotations

import argparse
import sys
from collections.abc import Sequence
from pathlib import Path
from typing import Any, NoReturn

from config import (
    CONFIG_BASENAME,
    load_config,
    read_config_file,
    resolve_config_path,
)
from logger import configure_logging, logger
from tozulip.core.errors import ConfigFileError, ToZulipError, UsageError
from tozulip.services import send_service

DESCRIPTION = """Send a message to Zulip chat.

Create a Zulip bot and send messages to streams from the command line. Handy
for deployment messages, or other things you might want to send from the CLI.
"""

EPILOG = """Every flag can also be set in the config file or as a TOZULIP_<NAME>
environment variable (e.g. TOZULIP_APIKEY). Flags override the environment,
which overrides the config file."""


class _ArgumentParser(argparse.ArgumentParser):
    def error(self, message: str) -> NoReturn:
        raise UsageError(message)


def build_parser() -> argparse.ArgumentParser:
    parser = _ArgumentParser(
        prog="tozulip",
        usage="%(prog)s [flags] MESSAGE",
        description=DESCRIPTION,
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("message", nargs="*", help="message to send")
    parser.add_argument(
        "-c",
        "--config",
        help=f"config file (default is $HOME/{CONFIG_BASENAME}.yaml)",
    )
    parser.add_argument("-m", "--mail", help="bot email")
    parser.add_argument("-k", "--apikey", help="API key of bot")
    parser.add_argument("-H", "--host", help="hostname of Zulip server")
    parser.add_argument("-s", "--stream", help="stream to send message to")
    parser.add_argument("-t", "--topic", help="topic of message")
    parser.add_argument(
        "--timeout",
        type=float,
        help="seconds to wait for Zulip before giving up (default: wait indefinitely)",
    )
    parser.add_argument("--log-file", help="also write logs to this rotating file")
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=None,
        help="log request details",
    )
    return parser


def run(argv: Sequence[str] | None = None) -> int:
    """Run one invocation and return the process exit code."""

    configure_logging()
    parser = build_parser()

    try:
        args = parser.parse_args(argv)
        message = _single_message(args.message)
        config_path = resolve_config_path(args.config)
        file_values, skipped = _read_file_values(config_path, explicit=bool(args.config))
        config = load_config(file_values, _flag_overrides(args))
        configure_logging(verbose=config.verbose, log_file=config.log_file)
        if skipped is not None:
            logger.debug("Ignoring config file %s", skipped)
        send_service.send(config, message, logger=logger)
    except UsageError as exc:
        parser.print_usage(sys.stderr)
        logger.error("Error: %s", exc)
        return 1
    except ToZulipError as exc:
        logger.error("%s", exc)
        return 1

    return 0


def main() -> NoReturn:
    sys.exit(run())


def _single_message(messages: list[str]) -> str:
    if not messages:
        raise UsageError("Message is required")
    if len(messages) > 1:
        raise UsageError("Only one message, please")
    return messages[0]


def _read_file_values(
    path: Path | None, *, explicit: bool
) -> tuple[dict[str, str], ConfigFileError | None]:
    """Return the file settings, plus the error when a discovered file was skipped.

    A skipped discovered file is only worth a debug line, which the caller logs
    once verbosity from the environment and flags is known.
    """

    if path is None:
        return {}, None

    try:
        values = read_config_file(path)
    except ConfigFileError as exc:
        if explicit:
            logger.warning("Ignoring config file %s", exc)
            return {}, None
        return {}, exc

    logger.info("Using config file: %s", path)
    return values, None


def _flag_overrides(args: argparse.Namespace) -> dict[str, Any]:
    return {
        "host": args.host,
        "mail": args.mail,
        "apikey": args.apikey,
        "stream": args.stream,
        "topic": args.topic,
        "timeout": args.timeout,
        "log_file": args.log_file,
        "verbose": args.verbose,
    }
