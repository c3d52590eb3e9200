# extension_deploy/utils/__init__.py
"""Utility functions for extension-deploy"""

from .async_utils import AsyncPool, run_async
from .formatting import format_duration, pluralize, shorten_url
from .log_utils import ExtensionLogger, get_extension_logger

__all__ = [
    # Async helpers
    "AsyncPool",
    "run_async",

    # Formatting
    "format_duration",
    "pluralize",
    "shorten_url",

    # Logging
    "ExtensionLogger",
    "get_extension_logger",
]
