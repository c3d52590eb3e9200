# extension_deploy/api/__init__.py
"""API layer for extension-deploy"""

from .exceptions import (
    ExtensionDeployError,
    ConfigError,
    EntryPointError,
    RemoteError,
    ResponseValidationError,
    FolderResolutionError,
    AssetUploadError,
    UnresolvedReferenceError,
)
from .deployer import Deployer, deploy

__all__ = [
    # Main classes
    "Deployer",

    # Convenience functions
    "deploy",

    # Exceptions
    "ExtensionDeployError",
    "ConfigError",
    "EntryPointError",
    "RemoteError",
    "ResponseValidationError",
    "FolderResolutionError",
    "AssetUploadError",
    "UnresolvedReferenceError",
]
