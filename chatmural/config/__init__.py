"""Configuration package exports."""

from .loader import build_config, build_parser, load_config_file, parse_args  # noqa: F401
from .model import BotConfig

__all__ = [
    "BotConfig",
    "build_config",
    "build_parser",
    "load_config_file",
    "parse_args",
]
