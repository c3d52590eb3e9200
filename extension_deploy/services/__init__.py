# extension_deploy/services/__init__.py
"""Service layer for extension-deploy"""

from .asset_sync import AssetSynchronizer
from .extension_registrar import ExtensionRegistrar
from .purge_service import PurgeAgent
from .pipeline import PipelineOrchestrator

__all__ = [
    "AssetSynchronizer",
    "ExtensionRegistrar",
    "PurgeAgent",
    "PipelineOrchestrator",
]
