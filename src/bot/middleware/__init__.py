"""Middleware for the signals bot"""

from .admin import AdminMiddleware
from .database import DatabaseMiddleware
from .logging import LoggingMiddleware

__all__ = [
    "AdminMiddleware",
    "DatabaseMiddleware",
    "LoggingMiddleware",
]
