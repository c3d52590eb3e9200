# extension_deploy/models/__init__.py
"""Data models for extension-deploy"""

from .config import DeploymentConfig, ManagementCredentials, RetryPolicy
from .references import ReferenceMap
from .remote import ExtensionRecord, RemoteAsset, RemoteFolder
from .result import (
    OperationStatus,
    ErrorDetail,
    Result,
    SyncResult,
    RegistrationResult,
    PurgeFailure,
    PurgeResult,
    StageTransition,
    DeploymentResult,
)

__all__ = [
    # Config models
    "DeploymentConfig",
    "ManagementCredentials",
    "RetryPolicy",
    "ReferenceMap",

    # Remote models
    "ExtensionRecord",
    "RemoteAsset",
    "RemoteFolder",

    # Result models
    "OperationStatus",
    "ErrorDetail",
    "Result",
    "SyncResult",
    "RegistrationResult",
    "PurgeFailure",
    "PurgeResult",
    "StageTransition",
    "DeploymentResult",
]
