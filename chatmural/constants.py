"""
Configuration constants for chatmural

This module contains the tunable timing and sizing constants used throughout
the application. Each constant can be overridden by setting an environment
variable with the same name.
"""

import os


def _get_env_int(name: str, default: int) -> int:
    """Retrieve an integer value from an environment variable.

    Attempts to parse the environment variable as an integer. If the variable
    is not set or cannot be parsed, prints a warning and returns the default.

    Args:
        name: The name of the environment variable to read.
        default: The default integer value to return if parsing fails.

    Returns:
        The parsed integer value from the environment, or the default if unavailable.
    """
    value = os.getenv(name)
    if value is not None:
        try:
            return int(value)
        except ValueError:
            print(
                f"Warning: Invalid integer value for {name}='{value}', using default {default}"
            )
    return default


def _get_env_float(name: str, default: float) -> float:
    """Retrieve a float value from an environment variable.

    Args:
        name: The name of the environment variable to read.
        default: The default float value to return if parsing fails.

    Returns:
        The parsed float value from the environment, or the default if unavailable.
    """
    value = os.getenv(name)
    if value is not None:
        try:
            return float(value)
        except ValueError:
            print(
                f"Warning: Invalid float value for {name}='{value}', using default {default}"
            )
    return default


# IRC endpoint
DEFAULT_IRC_PORT = _get_env_int("DEFAULT_IRC_PORT", 6667)

# Stream reads
READ_CHUNK_SIZE = _get_env_int(
    "READ_CHUNK_SIZE", 1024
)  # Max bytes per read from the server

# Startup timeouts (seconds)
CONNECT_TIMEOUT = _get_env_float("CONNECT_TIMEOUT", 30.0)  # TCP connect
GREETING_TIMEOUT = _get_env_float(
    "GREETING_TIMEOUT", 120.0
)  # First NOTICE after connecting
LOGIN_TIMEOUT = _get_env_float("LOGIN_TIMEOUT", 120.0)  # Wait for RPL_WELCOME
JOIN_TIMEOUT = _get_env_float("JOIN_TIMEOUT", 120.0)  # Wait for own JOIN echo

# Runtime timeouts (seconds)
LISTEN_POLL_TIMEOUT = _get_env_float(
    "LISTEN_POLL_TIMEOUT", 10.0
)  # One command poll on the listening session
DRAIN_IDLE_TIMEOUT = _get_env_float(
    "DRAIN_IDLE_TIMEOUT", 0.5
)  # Idle window that ends an untargeted drain

# Defaults for the bot configuration
DEFAULT_LINE_TIMEOUT_MS = _get_env_int(
    "DEFAULT_LINE_TIMEOUT_MS", 1000
)  # Wait for the previous line before sending anyway
DEFAULT_CLIENT_COUNT = _get_env_int("DEFAULT_CLIENT_COUNT", 5)
DEFAULT_REALNAME = os.getenv("DEFAULT_REALNAME", "chatmural")
