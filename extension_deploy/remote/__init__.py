# extension_deploy/remote/__init__.py
"""Management API access"""

from .base import ManagementBackend
from .client import ManagementClient
from .retry import build_retrying, is_retryable

__all__ = [
    "ManagementBackend",
    "ManagementClient",
    "build_retrying",
    "is_retryable",
]
