"""Configuration data models"""

from dataclasses import dataclass, field
from pathlib import Path, PurePosixPath
from typing import Any, Dict, Optional, Set, Tuple

from .references import ReferenceMap
from ..constants import (
    ExtensionKind,
    DEFAULT_BASE_URL,
    DEFAULT_DASHBOARD_WIDTH,
    DEFAULT_ENTRY_POINT,
    DEFAULT_REQUEST_TIMEOUT,
    DEFAULT_RETRY_ATTEMPTS,
    DEFAULT_RETRY_INITIAL_DELAY,
    DEFAULT_RETRY_MAX_DELAY,
    DEFAULT_UPLOAD_WORKERS,
    HEADER_API_KEY,
    HEADER_AUTHORIZATION,
)


@dataclass(frozen=True)
class ManagementCredentials:
    """Credentials for the Management API

    Built once at the edge (CLI or caller) and handed to the client.
    """

    api_key: str
    management_token: str
    base_url: str = DEFAULT_BASE_URL

    def __post_init__(self):
        if not self.api_key:
            raise ValueError("API key is required")
        if not self.management_token:
            raise ValueError("Management token is required")
        if not self.base_url:
            raise ValueError("API base URL is required")

    @property
    def headers(self) -> Dict[str, str]:
        """Authentication headers sent with every request"""
        return {
            HEADER_API_KEY: self.api_key,
            HEADER_AUTHORIZATION: self.management_token,
        }

    def __repr__(self) -> str:
        return f"ManagementCredentials(base_url={self.base_url!r}, api_key=***, management_token=***)"


@dataclass(frozen=True)
class RetryPolicy:
    """Timeout and retry settings for remote calls"""

    attempts: int = DEFAULT_RETRY_ATTEMPTS
    initial_delay: float = DEFAULT_RETRY_INITIAL_DELAY
    max_delay: float = DEFAULT_RETRY_MAX_DELAY
    timeout: float = DEFAULT_REQUEST_TIMEOUT

    def __post_init__(self):
        if self.attempts < 1:
            raise ValueError("Retry attempts must be at least 1")

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            "attempts": self.attempts,
            "initial_delay": self.initial_delay,
            "max_delay": self.max_delay,
            "timeout": self.timeout,
        }


@dataclass(frozen=True)
class DeploymentConfig:
    """Fully resolved deployment configuration, one per run"""

    name: str
    kind: ExtensionKind
    build_folder: Path
    assets_folder: str
    data_type: Optional[str] = None
    scope: Tuple[str, ...] = ()
    default_width: str = DEFAULT_DASHBOARD_WIDTH
    extension_config: Optional[str] = None
    tags: Tuple[str, ...] = ()
    multiple: bool = False
    entry_point: str = DEFAULT_ENTRY_POINT
    build_log: Optional[Path] = None
    pattern: Optional[str] = None
    purge: bool = False
    verbose: bool = False
    strict: bool = False
    workers: int = DEFAULT_UPLOAD_WORKERS
    references: ReferenceMap = field(default_factory=ReferenceMap)
    source: Optional[Path] = None

    @property
    def entry_point_path(self) -> Path:
        """Absolute-or-relative path of the entry point on disk"""
        return self.build_folder / self.entry_point

    @property
    def entry_point_filename(self) -> str:
        """Asset title the entry point is stored under"""
        return PurePosixPath(self.entry_point).name

    def reference_path(self, key: str) -> Path:
        """Local file for a reference

        The matched literal names the file relative to the build folder; a
        leading slash (root-relative URL) is not a filesystem root.
        """
        literal = self.references[key]
        return self.build_folder / literal.lstrip("/")

    def reference_filename(self, key: str) -> str:
        """Asset title a reference is stored under"""
        return self.reference_path(key).name

    def keep_set(self) -> Set[str]:
        """Asset titles that belong to the current deployment

        Reference keys are included as-is; the filename of each matched
        literal is included too so a pattern whose key is not the bare
        filename does not purge what was just uploaded.
        """
        keep = {self.entry_point_filename}
        for key in self.references:
            keep.add(key)
            keep.add(self.reference_filename(key))
        return keep

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        data = {
            "name": self.name,
            "extension": self.kind.value,
            "buildFolder": str(self.build_folder),
            "assetsFolder": self.assets_folder,
            "entryPoint": self.entry_point,
            "tags": list(self.tags),
            "multiple": self.multiple,
            "purge": self.purge,
            "verbose": self.verbose,
            "strict": self.strict,
            "workers": self.workers,
            "references": self.references.to_dict(),
        }

        if self.data_type:
            data["type"] = self.data_type
        if self.scope:
            data["scope"] = list(self.scope)
        if self.kind == ExtensionKind.DASHBOARD:
            data["defaultWidth"] = self.default_width
        if self.extension_config is not None:
            data["config"] = self.extension_config
        if self.build_log:
            data["buildLog"] = str(self.build_log)
        if self.pattern:
            data["replacement"] = self.pattern
        if self.source:
            data["source"] = str(self.source)

        return data
