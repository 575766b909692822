"""
CLI layer: app 명령 진입점.
"""

from .app import build_parser, main

__all__ = ["build_parser", "main"]
