# extension_deploy/remote/base.py
"""Management backend abstract base class"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import List, Optional, Tuple

from ..models.remote import ExtensionRecord, RemoteAsset, RemoteFolder
from ..constants import ExtensionKind


class ManagementBackend(ABC):
    """Operations the pipeline needs from the content-management platform

    Every method raises ``RemoteError`` (or ``ResponseValidationError``) on
    failure; transport exceptions never escape an implementation.
    """

    def __init__(self):
        self._initialized = False

    async def initialize(self) -> None:
        """Initialize backend (e.g., open connections)"""
        if not self._initialized:
            await self._do_initialize()
            self._initialized = True

    @abstractmethod
    async def _do_initialize(self) -> None:
        """Actual initialization logic to be implemented by subclasses"""
        pass

    @abstractmethod
    async def list_folders(self, parent_uid: str) -> List[RemoteFolder]:
        """
        List folders directly under a parent folder

        Args:
            parent_uid: Parent folder uid

        Returns:
            Folders found
        """
        pass

    @abstractmethod
    async def create_folder(self, name: str, parent_uid: str) -> RemoteFolder:
        """
        Create a folder

        Args:
            name: Folder name
            parent_uid: Parent folder uid

        Returns:
            Created folder
        """
        pass

    @abstractmethod
    async def list_assets(self,
                          folder_uid: str,
                          title: Optional[str] = None,
                          include_folders: bool = False) -> List[RemoteAsset]:
        """
        List assets in a folder

        Args:
            folder_uid: Folder uid
            title: Only return assets with this title
            include_folders: Include sub-folder entries

        Returns:
            Assets found
        """
        pass

    @abstractmethod
    async def create_asset(self, folder_uid: str, local_path: Path) -> RemoteAsset:
        """
        Upload a new asset into a folder

        Args:
            folder_uid: Destination folder uid
            local_path: File to upload

        Returns:
            Created asset
        """
        pass

    @abstractmethod
    async def update_asset(self, asset_uid: str, local_path: Path) -> RemoteAsset:
        """
        Replace the binary content of an existing asset

        Args:
            asset_uid: Asset uid (preserved)
            local_path: File to upload

        Returns:
            Updated asset
        """
        pass

    @abstractmethod
    async def delete_asset(self, asset_uid: str) -> Optional[str]:
        """
        Delete an asset

        Args:
            asset_uid: Asset uid

        Returns:
            Notice from the API, if any
        """
        pass

    @abstractmethod
    async def list_extensions(self,
                              kind: ExtensionKind,
                              title: Optional[str] = None) -> List[ExtensionRecord]:
        """
        List extensions of one kind

        Args:
            kind: Extension kind
            title: Only return extensions with this title

        Returns:
            Extensions found
        """
        pass

    @abstractmethod
    async def create_extension(self, record: ExtensionRecord) -> Tuple[ExtensionRecord, Optional[str]]:
        """
        Create an extension record

        Returns:
            Tuple of (created record, notice)
        """
        pass

    @abstractmethod
    async def update_extension(self,
                               extension_uid: str,
                               record: ExtensionRecord) -> Tuple[ExtensionRecord, Optional[str]]:
        """
        Update an existing extension record

        Returns:
            Tuple of (updated record, notice)
        """
        pass

    async def close(self) -> None:
        """Close backend connections"""
        if self._initialized:
            await self._do_close()
            self._initialized = False

    async def _do_close(self) -> None:
        """Actual cleanup logic to be implemented by subclasses"""
        pass

    async def __aenter__(self):
        """Async context manager entry"""
        await self.initialize()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit"""
        await self.close()
