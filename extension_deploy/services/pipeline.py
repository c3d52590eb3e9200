# extension_deploy/services/pipeline.py
"""Deployment pipeline orchestration"""

import json

from .asset_sync import AssetSynchronizer
from .extension_registrar import ExtensionRegistrar
from .purge_service import PurgeAgent
from ..api.exceptions import ExtensionDeployError
from ..constants import PipelineStage, MSG_COMPLETED
from ..models import DeploymentConfig, DeploymentResult, OperationStatus
from ..remote import ManagementBackend
from ..utils import get_extension_logger, pluralize


class PipelineOrchestrator:
    """Run the deployment stages in order

    Stages:
        idle -> resolving_references -> synchronizing_assets ->
        registering_extension -> (purging | skipped) -> done

    A fatal error in any stage moves the run to ``failed`` and is recorded
    on the returned result. Registration and purge failures are non-fatal
    and make the overall status ``partial``.
    """

    def __init__(self, backend: ManagementBackend, config: DeploymentConfig):
        self.backend = backend
        self.config = config
        self.log = get_extension_logger(__name__, config.name)

        self.synchronizer = AssetSynchronizer(backend, config)
        self.registrar = ExtensionRegistrar(backend, config)
        self.purger = PurgeAgent(backend, config)

    async def run(self) -> DeploymentResult:
        """
        Execute the pipeline

        Returns:
            DeploymentResult, never raises for ExtensionDeployError
        """
        config = self.config
        result = DeploymentResult(
            extension_name=config.name,
            references=config.references.to_dict(),
        )
        self._transition(result, PipelineStage.IDLE)
        self.log.debug(json.dumps(config.to_dict(), indent=2))

        try:
            # 1. References were scanned at load time; report them
            self._transition(result, PipelineStage.RESOLVING_REFERENCES)
            self._check_references(result)

            # 2. Folder, uploads, entry point rewrite
            self._transition(result, PipelineStage.SYNCHRONIZING_ASSETS)
            result.sync = await self.synchronizer.synchronize()

            # 3. Extension record (non-fatal)
            self._transition(result, PipelineStage.REGISTERING_EXTENSION)
            result.registration = await self.registrar.register(result.sync.entry_point_url)

            # 4. Purge (non-fatal)
            if config.purge:
                self._transition(result, PipelineStage.PURGING)
            else:
                self._transition(result, PipelineStage.SKIPPED)
            result.purge = await self.purger.purge(result.sync.folder_uid)

        except ExtensionDeployError as e:
            self.log.error(f"{result.stage.value} failed: {e}")
            result.add_error(e.error_code, str(e), stage=result.stage.value)
            result.message = str(e)
            self._transition(result, PipelineStage.FAILED)
            result.complete(OperationStatus.FAILED)
            return result

        self._transition(result, PipelineStage.DONE)

        failed_stages = result.partial_failures
        if failed_stages:
            result.message = f"Completed with failures in: {', '.join(failed_stages)}"
            for name in failed_stages:
                result.add_warning(f"{name} did not succeed")
            result.complete(OperationStatus.PARTIAL)
        else:
            result.message = MSG_COMPLETED.format(name=config.name)
            result.complete(OperationStatus.SUCCESS)

        return result

    def _check_references(self, result: DeploymentResult) -> None:
        references = self.config.references
        if self.config.build_log and not references:
            warning = f"No references found in {self.config.build_log}"
            self.log.warning(warning)
            result.add_warning(warning)
        else:
            self.log.info(f"Resolved {pluralize(len(references), 'reference')}")

    def _transition(self, result: DeploymentResult, stage: PipelineStage) -> None:
        result.transition(stage)
        self.log.info(f"Stage: {stage.value}")
