"""Handlers for the signals bot"""

from . import (
    start,
    help_cmd,
    signal,
    result,
    reports,
    admin,
    broadcast,
    manual,
    common,
)

__all__ = [
    "start",
    "help_cmd",
    "signal",
    "result",
    "reports",
    "admin",
    "broadcast",
    "manual",
    "common",
]
