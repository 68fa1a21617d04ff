#!/usr/bin/env python3
"""
Main entry point for chatmural
"""

from chatmural.main import run

if __name__ == "__main__":
    run()
