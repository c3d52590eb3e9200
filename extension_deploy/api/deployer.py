"""Deployer API for extension deployments"""

from pathlib import Path
from typing import Optional, Union

from ..core import ConfigLoader
from ..models import DeploymentConfig, DeploymentResult, ManagementCredentials, RetryPolicy
from ..remote import ManagementBackend, ManagementClient
from ..services import PipelineOrchestrator
from ..utils.async_utils import run_async


class Deployer:
    """Deploy extensions to the content-management platform"""

    def __init__(self,
                 credentials: ManagementCredentials,
                 retry_policy: Optional[RetryPolicy] = None,
                 backend: Optional[ManagementBackend] = None):
        """
        Initialize deployer

        Args:
            credentials: Management API credentials
            retry_policy: Timeout and retry settings for remote calls
            backend: Backend to use instead of the default httpx client
        """
        self.credentials = credentials
        self.retry_policy = retry_policy or RetryPolicy()
        self._backend = backend
        self.config_loader = ConfigLoader()

    def load(self,
             input_path: Union[str, Path],
             verbose: bool = False,
             **overrides) -> DeploymentConfig:
        """
        Load a descriptor

        Raises:
            ConfigError: If the descriptor or build log is unusable
        """
        return self.config_loader.load(input_path, verbose=verbose, **overrides)

    def deploy(self, config: DeploymentConfig) -> DeploymentResult:
        """
        Run the deployment pipeline

        Args:
            config: Deployment configuration

        Returns:
            DeploymentResult: Structured result, ``status`` tells
            success, partial or failed
        """
        return run_async(self.deploy_async(config))

    async def deploy_async(self, config: DeploymentConfig) -> DeploymentResult:
        """Async version of ``deploy``"""
        backend = self._backend or ManagementClient(self.credentials, self.retry_policy)
        async with backend:
            return await PipelineOrchestrator(backend, config).run()


def deploy(input_path: Union[str, Path],
           credentials: ManagementCredentials,
           verbose: bool = False,
           **options) -> DeploymentResult:
    """
    Deploy an extension from its descriptor

    This is a convenience function that creates a Deployer instance,
    loads the descriptor and runs the pipeline.

    Args:
        input_path: Path to the descriptor file
        credentials: Management API credentials
        verbose: Verbose logging of every stage
        **options: Descriptor overrides (``workers``, ``strict``)

    Returns:
        DeploymentResult: Deployment result

    Raises:
        ConfigError: If the descriptor cannot be loaded
    """
    deployer = Deployer(credentials)
    config = deployer.load(input_path, verbose=verbose, **options)
    return deployer.deploy(config)
