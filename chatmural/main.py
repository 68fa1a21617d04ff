#!/usr/bin/env python3
"""
Main entry point for chatmural
"""

import asyncio
import logging
import sys
from collections.abc import Sequence

from .config import BotConfig, parse_args
from .errors import ChatMuralError, ConfigurationError, log_error
from .logging_config import LoggerConfigurator
from .logs.logger import logger
from .pool import SessionPool
from .sequencer import CommandListener, LineDispatcher


def build_listener(pool: SessionPool, config: BotConfig) -> CommandListener:
    dispatcher = LineDispatcher(pool, config.line_timeout, pacing=config.pacing)
    return CommandListener(
        pool,
        config.owners,
        dispatcher,
        rotate=config.rotate_listener,
    )


async def serve(config: BotConfig) -> None:
    """Open the pool, then listen for owner commands until cancelled."""
    pool = await SessionPool.open(config)
    try:
        logger.log_event("app", "ready", clients=len(pool), channel=config.channel)
        await build_listener(pool, config).run()
    finally:
        await pool.close()


async def main(argv: Sequence[str] | None = None) -> None:
    """Main entry point for the chatmural application.

    Parses the configuration, then serves until interrupted.

    Raises:
        ConfigurationError: The configuration is invalid.
        ChatMuralError: Startup failed or the connection broke afterwards.
    """
    logger.log_event("app", "start")
    config = parse_args(argv)
    try:
        await serve(config)
    finally:
        logger.log_event("app", "shutdown")


def run(argv: Sequence[str] | None = None) -> None:
    """Synchronous entry point for the application.

    Exit status: 0 on Ctrl-C, 2 for invalid configuration, 1 for any other
    failure.
    """
    LoggerConfigurator().configure()
    try:
        asyncio.run(main(argv))
    except KeyboardInterrupt:
        logger.log_event("app", "interrupted", level=logging.WARNING)
        sys.exit(0)
    except ConfigurationError as e:
        log_error("Configuration error", e)
        sys.exit(2)
    except ChatMuralError as e:
        log_error("Fatal error", e)
        sys.exit(1)
    except Exception as e:
        log_error("Top-level error", e)
        sys.exit(1)


if __name__ == "__main__":
    run()
