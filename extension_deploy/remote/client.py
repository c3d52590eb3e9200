# extension_deploy/remote/client.py
"""httpx implementation of the Management API backend"""

import json
import logging
import mimetypes
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import aiofiles
import httpx

from .base import ManagementBackend
from .retry import build_retrying
from .schemas import (
    ASSET_LIST_SCHEMA,
    ASSET_SCHEMA,
    EXTENSION_LIST_SCHEMA,
    EXTENSION_SCHEMA,
    FOLDER_SCHEMA,
    NOTICE_SCHEMA,
    error_message_from,
    validate_response,
)
from ..api.exceptions import RemoteError, ResponseValidationError
from ..constants import (
    ExtensionKind,
    API_VERSION_PREFIX,
    ASSET_PAGE_SIZE,
    ASSETS_PATH,
    DEFAULT_CONTENT_TYPE,
    EXTENSIONS_PATH,
    FOLDERS_PATH,
    PARENT_UID_FIELD,
    UPLOAD_FIELD,
)
from ..models.config import ManagementCredentials, RetryPolicy
from ..models.remote import ExtensionRecord, RemoteAsset, RemoteFolder

logger = logging.getLogger(__name__)


class ManagementClient(ManagementBackend):
    """Management API client

    Every call goes through one retry loop and one schema check. HTTP and
    transport failures surface as ``RemoteError``.
    """

    def __init__(self,
                 credentials: ManagementCredentials,
                 retry_policy: Optional[RetryPolicy] = None):
        super().__init__()
        self.credentials = credentials
        self.retry_policy = retry_policy or RetryPolicy()
        self.base_url = credentials.base_url.rstrip("/") + API_VERSION_PREFIX
        self._client: Optional[httpx.AsyncClient] = None

    async def _do_initialize(self) -> None:
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            headers=self.credentials.headers,
            timeout=httpx.Timeout(self.retry_policy.timeout),
        )

    async def _do_close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def list_folders(self, parent_uid: str) -> List[RemoteFolder]:
        params = {
            "include_folders": "true",
            "query": json.dumps({"is_dir": True}),
            "folder": parent_uid,
        }
        entries = await self._paginate(params, "folder list")
        return [RemoteFolder.from_dict(e) for e in entries if e.get("is_dir", False)]

    async def create_folder(self, name: str, parent_uid: str) -> RemoteFolder:
        data = await self._request(
            "POST",
            FOLDERS_PATH,
            "folder create",
            FOLDER_SCHEMA,
            json={"asset": {"name": name, "parent_uid": parent_uid}},
        )
        return RemoteFolder.from_dict(data["asset"])

    async def list_assets(self,
                          folder_uid: str,
                          title: Optional[str] = None,
                          include_folders: bool = False) -> List[RemoteAsset]:
        params = {"folder": folder_uid}
        if include_folders:
            params["include_folders"] = "true"
        if title is not None:
            params["query"] = json.dumps({"title": title})

        entries = await self._paginate(params, "asset list")
        return [RemoteAsset.from_dict(e) for e in entries]

    async def create_asset(self, folder_uid: str, local_path: Path) -> RemoteAsset:
        files = await self._upload_files(local_path)
        data = await self._request(
            "POST",
            ASSETS_PATH,
            "asset create",
            ASSET_SCHEMA,
            data={PARENT_UID_FIELD: folder_uid},
            files=files,
        )
        return RemoteAsset.from_dict(data["asset"])

    async def update_asset(self, asset_uid: str, local_path: Path) -> RemoteAsset:
        files = await self._upload_files(local_path)
        data = await self._request(
            "PUT",
            f"{ASSETS_PATH}/{asset_uid}",
            "asset update",
            ASSET_SCHEMA,
            files=files,
        )
        return RemoteAsset.from_dict(data["asset"])

    async def delete_asset(self, asset_uid: str) -> Optional[str]:
        data = await self._request(
            "DELETE",
            f"{ASSETS_PATH}/{asset_uid}",
            "asset delete",
            NOTICE_SCHEMA,
        )
        return data.get("notice")

    async def list_extensions(self,
                              kind: ExtensionKind,
                              title: Optional[str] = None) -> List[ExtensionRecord]:
        query: Dict[str, Any] = {"type": kind.value}
        if title is not None:
            query["title"] = title

        data = await self._request(
            "GET",
            EXTENSIONS_PATH,
            "extension list",
            EXTENSION_LIST_SCHEMA,
            params={"query": json.dumps(query), "only[BASE][]": "title"},
        )
        return [ExtensionRecord.from_dict(e, default_kind=kind) for e in data["extensions"]]

    async def create_extension(self, record: ExtensionRecord) -> Tuple[ExtensionRecord, Optional[str]]:
        data = await self._request(
            "POST",
            EXTENSIONS_PATH,
            "extension create",
            EXTENSION_SCHEMA,
            json=record.to_payload(),
        )
        return ExtensionRecord.from_dict(data["extension"], default_kind=record.type), data.get("notice")

    async def update_extension(self,
                               extension_uid: str,
                               record: ExtensionRecord) -> Tuple[ExtensionRecord, Optional[str]]:
        data = await self._request(
            "PUT",
            f"{EXTENSIONS_PATH}/{extension_uid}",
            "extension update",
            EXTENSION_SCHEMA,
            json=record.to_payload(),
        )
        return ExtensionRecord.from_dict(data["extension"], default_kind=record.type), data.get("notice")

    async def _paginate(self, params: Dict[str, str], endpoint: str) -> List[Dict[str, Any]]:
        """Fetch every page of an asset listing"""
        entries: List[Dict[str, Any]] = []
        skip = 0

        while True:
            page_params = dict(params, skip=str(skip), limit=str(ASSET_PAGE_SIZE))
            data = await self._request("GET", ASSETS_PATH, endpoint, ASSET_LIST_SCHEMA, params=page_params)
            page = data["assets"]
            entries.extend(page)

            if len(page) < ASSET_PAGE_SIZE:
                return entries
            skip += len(page)

    async def _upload_files(self, local_path: Path) -> Dict[str, Tuple[str, bytes, str]]:
        """Multipart payload for an asset upload

        The file is read up front so that retried attempts resend the
        same bytes.
        """
        async with aiofiles.open(local_path, "rb") as f:
            content = await f.read()

        content_type, _ = mimetypes.guess_type(local_path.name)
        return {UPLOAD_FIELD: (local_path.name, content, content_type or DEFAULT_CONTENT_TYPE)}

    async def _request(self,
                       method: str,
                       path: str,
                       endpoint: str,
                       schema: Dict[str, Any],
                       **kwargs) -> Dict[str, Any]:
        """Send a request with retry and validate the response body

        Raises:
            RemoteError: On HTTP error status or transport failure
            ResponseValidationError: If the body does not match the schema
        """
        await self.initialize()
        logger.debug(f"{method} {path} ({endpoint})")

        try:
            async for attempt in build_retrying(self.retry_policy):
                with attempt:
                    response = await self._client.request(method, path, **kwargs)
                    response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise self._status_error(endpoint, e.response) from e
        except httpx.HTTPError as e:
            raise RemoteError(f"{endpoint} request failed: {e}") from e

        if not response.content:
            data: Any = {}
        else:
            try:
                data = response.json()
            except ValueError as e:
                raise ResponseValidationError(endpoint, f"body is not JSON ({e})", response.status_code)

        return validate_response(endpoint, data, schema, response.status_code)

    @staticmethod
    def _status_error(endpoint: str, response: httpx.Response) -> RemoteError:
        try:
            detail = error_message_from(response.json())
        except ValueError:
            detail = ""

        message = f"{endpoint} failed with {response.status_code} {response.reason_phrase}"
        if detail:
            message = f"{message}: {detail}"
        return RemoteError(message, status_code=response.status_code, status_text=response.reason_phrase)
