"""
Core Module
===========

Settings, constants, exceptions and security helpers shared by every layer.
"""

from smartcow.core.settings import settings, get_settings, RemoteConfig
from smartcow.core.exceptions import AppException

__all__ = [
    "settings",
    "get_settings",
    "RemoteConfig",
    "AppException",
]
