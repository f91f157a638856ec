"""
Core types and service checks for sonarrapi.
"""

from . import models

__all__ = ["models"]
