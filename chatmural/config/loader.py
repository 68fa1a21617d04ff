"""Configuration loading: optional JSON file layered under command line flags."""

from __future__ import annotations

import argparse
import json
import os
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from ..constants import DEFAULT_CLIENT_COUNT, DEFAULT_LINE_TIMEOUT_MS
from ..errors import ConfigurationError
from ..logs.logger import logger
from .model import BotConfig

CONFIG_FILE_ENV = "CHATMURAL_CONF_FILE"


def load_config_file(path: str | os.PathLike[str]) -> dict[str, Any]:
    """Load a JSON object of configuration values.

    Raises:
        ConfigurationError: The file is unreadable or not a JSON object.
    """
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError as e:
        raise ConfigurationError(f"Configuration file not found: {path}") from e
    except (OSError, ValueError) as e:
        raise ConfigurationError(f"Could not read configuration file {path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigurationError(f"Configuration file {path} must contain an object")
    logger.log_event("config", "file_loaded", path=str(path))
    return data


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="chatmural",
        description="Render multi-line text in an IRC channel using several clients",
    )
    parser.add_argument("-s", "--server", help="IRC server to connect to (host[:port])")
    parser.add_argument("-n", "--nickname", help="IRC nickname base to use")
    parser.add_argument("-C", "--channel", help="IRC channel to join")
    parser.add_argument(
        "-c",
        "--clients",
        type=int,
        help=f"Amount of IRC clients to use (default {DEFAULT_CLIENT_COUNT})",
    )
    parser.add_argument(
        "-o",
        "--owners",
        action="append",
        help="Nickname allowed to use the bot (repeatable or comma separated)",
    )
    parser.add_argument(
        "-l",
        "--line-timeout",
        dest="line_timeout_ms",
        type=int,
        help=(
            "Milliseconds to wait for the previous line to be received "
            f"(default {DEFAULT_LINE_TIMEOUT_MS})"
        ),
    )
    parser.add_argument(
        "--pacing",
        choices=["echo", "relay"],
        help="Line gating strategy (default echo)",
    )
    parser.add_argument(
        "--rotate-listener",
        action="store_true",
        default=None,
        help="Poll every client in turn for commands",
    )
    parser.add_argument(
        "--no-greeting",
        dest="await_greeting",
        action="store_false",
        default=None,
        help="Do not wait for a server NOTICE after connecting",
    )
    parser.add_argument(
        "--config",
        default=os.environ.get(CONFIG_FILE_ENV),
        help=f"JSON configuration file (env {CONFIG_FILE_ENV})",
    )
    return parser


def _flatten_owners(values: list[str] | None) -> list[str] | None:
    if not values:
        return None
    return [owner for value in values for owner in value.split(",")]


def parse_args(argv: Sequence[str] | None = None) -> BotConfig:
    """Build a validated :class:`BotConfig` from flags and the optional file.

    Raises:
        ConfigurationError: Validation failed; the message lists every field error.
    """
    args = build_parser().parse_args(argv)
    values: dict[str, Any] = {}
    if args.config:
        values.update(load_config_file(Path(args.config)))

    flags = vars(args)
    flags.pop("config")
    flags["owners"] = _flatten_owners(flags["owners"])
    values.update({k: v for k, v in flags.items() if v is not None})
    return build_config(values)


def build_config(values: dict[str, Any]) -> BotConfig:
    try:
        return BotConfig.from_dict(values)
    except ValidationError as e:
        details = "; ".join(
            f"{'.'.join(str(p) for p in err['loc']) or 'config'}: {err['msg']}"
            for err in e.errors()
        )
        raise ConfigurationError(f"Invalid configuration: {details}") from e
