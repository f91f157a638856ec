"""
Command-line interface module for sonarrapi.

Typer application with Rich formatting.
"""

from .main import app

__all__ = ["app"]
