"""Command listening and line dispatch across the session pool."""

from .dispatch import DispatchReport, LineDispatcher  # noqa: F401
from .listener import CommandListener  # noqa: F401

__all__ = ["CommandListener", "DispatchReport", "LineDispatcher"]
