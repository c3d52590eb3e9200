# extension_deploy/services/asset_sync.py
"""Asset synchronization service"""

import re
from pathlib import Path
from typing import Dict, Optional, Tuple

import aiofiles

from ..api.exceptions import (
    AssetUploadError,
    EntryPointError,
    FolderResolutionError,
    RemoteError,
    UnresolvedReferenceError,
)
from ..models import DeploymentConfig, OperationStatus, RemoteAsset, SyncResult
from ..remote import ManagementBackend
from ..utils import AsyncPool, get_extension_logger


class AssetSynchronizer:
    """Upload build assets and point the entry point at them

    Workflow:
        1. Read the entry point (before any remote call)
        2. Find or create the extension folder
        3. Upload every referenced file through a bounded pool
        4. Rewrite the entry point once all uploads are done
        5. Upload the rewritten entry point
    """

    def __init__(self, backend: ManagementBackend, config: DeploymentConfig):
        """
        Initialize asset synchronizer

        Args:
            backend: Management API backend
            config: Deployment configuration
        """
        self.backend = backend
        self.config = config
        self.log = get_extension_logger(__name__, config.name)

    async def synchronize(self) -> SyncResult:
        """
        Run the whole synchronization

        Returns:
            SyncResult

        Raises:
            EntryPointError: Entry point cannot be read or written
            FolderResolutionError: Extension folder cannot be found or created
            AssetUploadError: A file could not be uploaded
            UnresolvedReferenceError: A reference has no asset URL
        """
        result = SyncResult()

        text = await self._read_entry_point()

        result.folder_uid = await self.ensure_folder()
        self.log.info(f"Extensions Folder: {result.folder_uid}")

        result.assets = await self.upload_references(result.folder_uid)

        text, result.replacements = self.rewrite(text, result.assets, result)
        await self._write_entry_point(text)

        result.entry_point = await self.upload_or_update(result.folder_uid, self.config.entry_point_path)
        self.log.info(f"Entry point available at {result.entry_point.url}")

        result.complete(OperationStatus.SUCCESS)
        return result

    async def ensure_folder(self) -> str:
        """Return the uid of the extension folder, creating it if needed"""
        name = self.config.name
        parent_uid = self.config.assets_folder

        try:
            for folder in await self.backend.list_folders(parent_uid):
                if folder.name == name:
                    self.log.debug(f"Folder found for extension: {folder.uid}")
                    return folder.uid

            self.log.info(f"Creating folder for extension under {parent_uid}")
            folder = await self.backend.create_folder(name, parent_uid)
        except RemoteError as e:
            raise FolderResolutionError(name, e) from e

        return folder.uid

    async def upload_references(self, folder_uid: str) -> Dict[str, RemoteAsset]:
        """Upload every referenced file, at most ``workers`` at a time

        All uploads are joined before returning. The first failure in
        reference order is raised.
        """
        references = self.config.references
        if not references:
            return {}

        keys = list(references)
        pool = AsyncPool(self.config.workers)
        for key in keys:
            self.log.info(f"Replacing Reference: {references[key]}")
            pool.submit(self.upload_or_update(folder_uid, self.config.reference_path(key)))

        outcomes = await pool.wait_all()

        assets: Dict[str, RemoteAsset] = {}
        for key, outcome in zip(keys, outcomes):
            if isinstance(outcome, BaseException):
                raise outcome
            assets[key] = outcome
        return assets

    async def upload_or_update(self, folder_uid: str, local_path: Path) -> RemoteAsset:
        """
        Upload a file, replacing the asset with the same title if present

        Args:
            folder_uid: Destination folder uid
            local_path: File to upload

        Returns:
            Remote asset with its URL

        Raises:
            AssetUploadError: If the file is missing or any remote call fails
        """
        if not local_path.is_file():
            raise AssetUploadError(str(local_path), FileNotFoundError(f"No such file: {local_path}"))

        title = local_path.name
        try:
            existing = [
                asset for asset in await self.backend.list_assets(folder_uid, title=title)
                if asset.title == title and not asset.is_dir
            ]
            if existing:
                self.log.info(f"Updating asset {title} ({existing[0].uid})")
                asset = await self.backend.update_asset(existing[0].uid, local_path)
            else:
                self.log.info(f"Uploading asset {title}")
                asset = await self.backend.create_asset(folder_uid, local_path)
        except (RemoteError, OSError) as e:
            raise AssetUploadError(str(local_path), e) from e

        return asset

    def rewrite(self,
                text: str,
                assets: Dict[str, RemoteAsset],
                result: Optional[SyncResult] = None) -> Tuple[str, Dict[str, int]]:
        """
        Replace each reference literal with its asset URL

        Every occurrence is replaced except those already inside an absolute
        URL, so rerunning on a rewritten entry point leaves it unchanged. A
        literal missing from the text is a warning, a reference without an
        uploaded URL is an error.

        Returns:
            Tuple of (new text, replacement count per reference key)
        """
        counts: Dict[str, int] = {}

        for key, literal in self.config.references.items():
            asset = assets.get(key)
            if asset is None or not asset.url:
                raise UnresolvedReferenceError(key, literal)

            text, count = _replace_outside_urls(text, literal, asset.url)
            if count == 0 and literal in text:
                self.log.info(f"{literal} already points at an uploaded asset")
            elif count == 0:
                warning = f"Reference {literal} does not appear in {self.config.entry_point}"
                self.log.warning(warning)
                if result is not None:
                    result.add_warning(warning)
            else:
                self.log.debug(f"{literal} -> {asset.url} ({count}x)")
            counts[key] = count

        return text, counts

    async def _read_entry_point(self) -> str:
        path = self.config.entry_point_path
        try:
            async with aiofiles.open(path, "r", encoding="utf-8") as f:
                return await f.read()
        except (OSError, UnicodeDecodeError) as e:
            raise EntryPointError(str(path), str(e)) from e

    async def _write_entry_point(self, text: str) -> None:
        path = self.config.entry_point_path
        try:
            async with aiofiles.open(path, "w", encoding="utf-8") as f:
                await f.write(text)
        except OSError as e:
            raise EntryPointError(str(path), str(e)) from e


_URL_RE = re.compile(r"https?://[^\s\"'<>()]+")


def _replace_outside_urls(text: str, literal: str, url: str) -> Tuple[str, int]:
    """Replace ``literal`` with ``url`` outside of absolute URLs in ``text``"""
    if _URL_RE.fullmatch(literal):
        return text.replace(literal, url), text.count(literal)

    pieces = []
    count = 0
    pos = 0
    for match in _URL_RE.finditer(text):
        segment = text[pos:match.start()]
        count += segment.count(literal)
        pieces.append(segment.replace(literal, url))
        pieces.append(match.group(0))
        pos = match.end()

    tail = text[pos:]
    count += tail.count(literal)
    pieces.append(tail.replace(literal, url))
    return "".join(pieces), count
