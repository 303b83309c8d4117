"""
Integration layer: environment settings and the outer command dispatch.
"""

from .operations import Command, DispatchResult, dispatch, execute, parse_command
from .settings import Settings, configure_logging, load_settings

__all__ = [
    "Command",
    "DispatchResult",
    "dispatch",
    "execute",
    "parse_command",
    "Settings",
    "configure_logging",
    "load_settings",
]
