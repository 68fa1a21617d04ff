"""chatmural: render multi-line text in an IRC channel across several connections."""

__version__ = "0.1.0"
