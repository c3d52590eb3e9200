# extension_deploy/services/purge_service.py
"""Purge stale assets from the extension folder"""

from ..api.exceptions import RemoteError
from ..constants import ErrorCode, MSG_NOTHING_TO_PURGE
from ..models import DeploymentConfig, OperationStatus, PurgeResult
from ..remote import ManagementBackend
from ..utils import get_extension_logger, pluralize


class PurgeAgent:
    """Delete assets left over from earlier deployments

    Everything in the folder that is not the entry point or a current
    reference is a candidate. Sub-folders are never touched. Deletions run
    one at a time and a failed deletion does not stop the rest.
    """

    def __init__(self, backend: ManagementBackend, config: DeploymentConfig):
        self.backend = backend
        self.config = config
        self.log = get_extension_logger(__name__, config.name)

    async def purge(self, folder_uid: str) -> PurgeResult:
        """
        Purge the extension folder

        Args:
            folder_uid: Extension folder uid

        Returns:
            PurgeResult (SKIPPED when purging is disabled)
        """
        result = PurgeResult()

        if not self.config.purge:
            result.message = "Purge disabled"
            result.complete(OperationStatus.SKIPPED)
            return result

        try:
            assets = await self.backend.list_assets(folder_uid, include_folders=True)
        except RemoteError as e:
            self.log.error(f"Could not list assets to purge: {e}")
            result.message = str(e)
            result.add_error(
                ErrorCode.PURGE_FAILED,
                str(e),
                operation="list",
                status_code=e.status_code,
                status_text=e.status_text,
            )
            result.complete(OperationStatus.FAILED)
            return result

        keep = self.config.keep_set()
        result.candidates = [a for a in assets if not a.is_dir and a.title not in keep]

        if not result.candidates:
            self.log.info(MSG_NOTHING_TO_PURGE)
            result.message = MSG_NOTHING_TO_PURGE
            result.finalize()
            return result

        self.log.info("Purging extension folder...")
        self.log.info(f"Assets to purge: {len(result.candidates)}")
        for asset in result.candidates:
            self.log.info(f"- {asset.title}, {asset.uid}")

        for asset in result.candidates:
            try:
                notice = await self.backend.delete_asset(asset.uid)
            except RemoteError as e:
                self.log.error(f"Could not purge {asset.title} ({asset.uid}): {e}")
                result.record_failure(asset, e.status_code, e.status_text)
                result.add_error(
                    ErrorCode.PURGE_FAILED,
                    str(e),
                    operation="delete",
                    asset_uid=asset.uid,
                    status_code=e.status_code,
                    status_text=e.status_text,
                )
                continue

            self.log.info(notice or f"Purged asset: {asset.uid}")
            result.record_deleted(asset)

        result.message = f"Purged {pluralize(len(result.deleted), 'asset')}"
        result.finalize()
        return result
