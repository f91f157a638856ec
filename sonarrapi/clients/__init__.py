"""
HTTP client modules for external APIs.
"""

from . import sonarr
from .sonarr import SonarrClient

__all__ = ["SonarrClient", "sonarr"]
