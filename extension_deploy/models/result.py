"""Operation result models"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional

from .remote import ExtensionRecord, RemoteAsset
from ..constants import PipelineStage


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class OperationStatus(Enum):
    """Operation status"""
    SUCCESS = "success"
    FAILED = "failed"
    PARTIAL = "partial"
    SKIPPED = "skipped"
    IN_PROGRESS = "in_progress"


@dataclass
class ErrorDetail:
    """Detailed error information"""

    code: str
    message: str
    context: Dict[str, Any] = field(default_factory=dict)
    timestamp: datetime = field(default_factory=_utcnow)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            "code": self.code,
            "message": self.message,
            "context": self.context,
            "timestamp": self.timestamp.isoformat()
        }


@dataclass
class Result:
    """Base result class"""

    status: OperationStatus = OperationStatus.IN_PROGRESS
    message: str = ""
    errors: List[ErrorDetail] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    start_time: datetime = field(default_factory=_utcnow)
    end_time: Optional[datetime] = None

    @property
    def is_success(self) -> bool:
        """Check if operation was successful"""
        return self.status == OperationStatus.SUCCESS

    @property
    def is_failed(self) -> bool:
        """Check if operation failed"""
        return self.status == OperationStatus.FAILED

    @property
    def duration(self) -> Optional[float]:
        """Get operation duration in seconds"""
        if self.end_time:
            return (self.end_time - self.start_time).total_seconds()
        return None

    def add_error(self, code: str, message: str, **context) -> None:
        """Add an error"""
        self.errors.append(ErrorDetail(code=code, message=message, context=context))

    def add_warning(self, message: str) -> None:
        """Add a warning"""
        self.warnings.append(message)

    def complete(self, status: Optional[OperationStatus] = None) -> None:
        """Mark operation as complete"""
        self.end_time = _utcnow()
        if status:
            self.status = status

    def _base_dict(self) -> Dict[str, Any]:
        return {
            "status": self.status.value,
            "message": self.message,
            "errors": [e.to_dict() for e in self.errors],
            "warnings": self.warnings,
            "duration": self.duration
        }


@dataclass
class SyncResult(Result):
    """Result of the asset synchronization stage"""

    folder_uid: Optional[str] = None
    assets: Dict[str, RemoteAsset] = field(default_factory=dict)
    entry_point: Optional[RemoteAsset] = None
    replacements: Dict[str, int] = field(default_factory=dict)

    @property
    def entry_point_url(self) -> Optional[str]:
        """URL the extension record should point at"""
        return self.entry_point.url if self.entry_point else None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        data = self._base_dict()
        data.update({
            "folder_uid": self.folder_uid,
            "assets": {key: asset.to_dict() for key, asset in self.assets.items()},
            "entry_point": self.entry_point.to_dict() if self.entry_point else None,
            "replacements": self.replacements,
        })
        return data


@dataclass
class RegistrationResult(Result):
    """Result of the extension registration stage"""

    action: Optional[str] = None  # created, updated
    extension: Optional[ExtensionRecord] = None
    notice: Optional[str] = None
    status_code: Optional[int] = None
    status_text: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        data = self._base_dict()
        data.update({
            "action": self.action,
            "extension": self.extension.to_dict() if self.extension else None,
            "notice": self.notice,
        })
        if self.status_code is not None:
            data["status_code"] = self.status_code
            data["status_text"] = self.status_text
        return data


@dataclass
class PurgeFailure:
    """A single asset that could not be deleted"""

    asset: RemoteAsset
    status_code: int
    status_text: str

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            "asset": self.asset.to_dict(),
            "status_code": self.status_code,
            "status_text": self.status_text,
        }


@dataclass
class PurgeResult(Result):
    """Result of the purge stage"""

    candidates: List[RemoteAsset] = field(default_factory=list)
    deleted: List[RemoteAsset] = field(default_factory=list)
    failures: List[PurgeFailure] = field(default_factory=list)

    def record_deleted(self, asset: RemoteAsset) -> None:
        self.deleted.append(asset)

    def record_failure(self, asset: RemoteAsset, status_code: int, status_text: str) -> None:
        self.failures.append(PurgeFailure(asset, status_code, status_text))

    def finalize(self) -> None:
        """Derive the final status from deletions and failures"""
        if not self.failures and not self.is_failed:
            self.complete(OperationStatus.SUCCESS)
        elif self.deleted:
            self.complete(OperationStatus.PARTIAL)
        else:
            self.complete(OperationStatus.FAILED)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        data = self._base_dict()
        data.update({
            "candidates": [a.to_dict() for a in self.candidates],
            "deleted": [a.to_dict() for a in self.deleted],
            "failures": [f.to_dict() for f in self.failures],
        })
        return data


@dataclass
class StageTransition:
    """One step of the pipeline state machine"""

    stage: PipelineStage
    timestamp: datetime = field(default_factory=_utcnow)

    def to_dict(self) -> Dict[str, Any]:
        return {"stage": self.stage.value, "timestamp": self.timestamp.isoformat()}


@dataclass
class DeploymentResult(Result):
    """Structured result of a whole pipeline run

    ``status`` is SUCCESS when every stage succeeded, PARTIAL when a
    non-fatal stage (registration, purge) failed, FAILED when a fatal stage
    aborted the run.
    """

    extension_name: str = ""
    stage: PipelineStage = PipelineStage.IDLE
    stages: List[StageTransition] = field(default_factory=list)
    references: Dict[str, str] = field(default_factory=dict)
    sync: Optional[SyncResult] = None
    registration: Optional[RegistrationResult] = None
    purge: Optional[PurgeResult] = None

    def transition(self, stage: PipelineStage) -> None:
        """Move the state machine forward"""
        self.stage = stage
        self.stages.append(StageTransition(stage))

    @property
    def stage_history(self) -> List[PipelineStage]:
        return [t.stage for t in self.stages]

    @property
    def partial_failures(self) -> List[str]:
        """Names of non-fatal stages that did not succeed"""
        failed = []
        if self.registration and self.registration.is_failed:
            failed.append("registration")
        if self.purge and self.purge.status in (OperationStatus.FAILED, OperationStatus.PARTIAL):
            failed.append("purge")
        return failed

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        data = self._base_dict()
        data.update({
            "extension_name": self.extension_name,
            "stage": self.stage.value,
            "stages": [t.to_dict() for t in self.stages],
            "references": self.references,
            "sync": self.sync.to_dict() if self.sync else None,
            "registration": self.registration.to_dict() if self.registration else None,
            "purge": self.purge.to_dict() if self.purge else None,
            "partial_failures": self.partial_failures,
        })
        return data
