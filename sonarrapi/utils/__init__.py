"""
Utility modules for sonarrapi.

Structured logging and the exception hierarchy.
"""

from . import exceptions, logging

__all__ = ["exceptions", "logging"]
