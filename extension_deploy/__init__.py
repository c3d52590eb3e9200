"""Extension Deploy - Ship single-page extensions to a headless CMS.

Uploads the assets of a built single-page application into the platform's
asset store, rewrites the entry point to point at the uploaded URLs and
registers (or updates) the extension record that serves it.
"""

from .__version__ import __version__, __version_info__, __license__

# Exceptions
from .api.exceptions import (
    ExtensionDeployError,
    ConfigError,
    EntryPointError,
    RemoteError,
    ResponseValidationError,
    FolderResolutionError,
    AssetUploadError,
    UnresolvedReferenceError,
)

# Core API
from .api.deployer import Deployer, deploy
from .core import ConfigLoader, load_config, resolve_references

# Data models
from .models import (
    DeploymentConfig,
    ManagementCredentials,
    RetryPolicy,
    ReferenceMap,
    DeploymentResult,
    SyncResult,
    RegistrationResult,
    PurgeResult,
    OperationStatus,
)

__all__ = [
    # Version information
    "__version__",
    "__version_info__",
    "__license__",

    # Main classes
    "Deployer",
    "ConfigLoader",

    # Core API functions
    "deploy",
    "load_config",
    "resolve_references",

    # Data models
    "DeploymentConfig",
    "ManagementCredentials",
    "RetryPolicy",
    "ReferenceMap",
    "DeploymentResult",
    "SyncResult",
    "RegistrationResult",
    "PurgeResult",
    "OperationStatus",

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
