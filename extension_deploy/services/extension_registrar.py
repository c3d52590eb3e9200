# extension_deploy/services/extension_registrar.py
"""Extension registration service"""

from typing import Optional

from ..api.exceptions import RemoteError
from ..constants import ErrorCode
from ..models import DeploymentConfig, ExtensionRecord, OperationStatus, RegistrationResult
from ..remote import ManagementBackend
from ..utils import get_extension_logger


class ExtensionRegistrar:
    """Create or update the extension record that points at the entry point"""

    def __init__(self, backend: ManagementBackend, config: DeploymentConfig):
        self.backend = backend
        self.config = config
        self.log = get_extension_logger(__name__, config.name)

    def build_record(self, src: str) -> ExtensionRecord:
        """Extension record for this deployment"""
        config = self.config
        return ExtensionRecord(
            title=config.name,
            type=config.kind,
            src=src,
            tags=list(config.tags),
            multiple=config.multiple,
            config=config.extension_config,
            data_type=config.data_type,
            scope=list(config.scope),
            default_width=config.default_width,
        )

    async def find_existing(self) -> Optional[ExtensionRecord]:
        """Existing record of the same kind with exactly the same title"""
        candidates = await self.backend.list_extensions(self.config.kind, title=self.config.name)
        for record in candidates:
            if record.title == self.config.name:
                return record
        return None

    async def register(self, src: str) -> RegistrationResult:
        """
        Create the extension, or update it if one with the same title exists

        Failures are reported on the result, never raised.

        Args:
            src: URL of the uploaded entry point

        Returns:
            RegistrationResult
        """
        result = RegistrationResult()
        record = self.build_record(src)
        operation = "lookup"

        try:
            existing = await self.find_existing()
            if existing is None:
                operation = "create"
                self.log.info(f"Creating {self.config.kind.value} extension")
                saved, notice = await self.backend.create_extension(record)
                result.action = "created"
            else:
                operation = "update"
                self.log.info(f"Updating {self.config.kind.value} extension {existing.uid}")
                saved, notice = await self.backend.update_extension(existing.uid, record)
                result.action = "updated"
        except RemoteError as e:
            self.log.error(f"Extension {operation} failed: {e}")
            result.status_code = e.status_code
            result.status_text = e.status_text
            result.message = str(e)
            result.add_error(
                ErrorCode.REGISTRATION_FAILED,
                str(e),
                operation=operation,
                status_code=e.status_code,
                status_text=e.status_text,
            )
            result.complete(OperationStatus.FAILED)
            return result

        result.extension = saved
        result.notice = notice
        result.message = notice or f"Extension {result.action}"
        if notice:
            self.log.info(notice)

        result.complete(OperationStatus.SUCCESS)
        return result
