"""
sonarrapi - async client for the Sonarr v3 API.
"""

from . import utils, config, core, clients, cli
from .clients import SonarrClient
from .config import Settings, get_settings
from .core.models import ApiResult, Credentials, RequestDescriptor

__version__ = "0.1.0"
__all__ = [
    "ApiResult",
    "Credentials",
    "RequestDescriptor",
    "Settings",
    "SonarrClient",
    "cli",
    "clients",
    "config",
    "core",
    "get_settings",
    "utils",
]
