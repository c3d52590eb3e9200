"""Models for state held by the Management API

Instances are built from response bodies that already passed schema
validation in the client, so ``from_dict`` only maps fields.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ..constants import ExtensionKind

_KIND_VALUES = {kind.value for kind in ExtensionKind}


@dataclass(frozen=True)
class RemoteFolder:
    """Asset folder"""

    uid: str
    name: str
    parent_uid: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'RemoteFolder':
        """Create from API payload"""
        return cls(
            uid=data["uid"],
            name=data.get("name") or data.get("title") or "",
            parent_uid=data.get("parent_uid"),
        )


@dataclass(frozen=True)
class RemoteAsset:
    """Uploaded asset (or folder entry in a listing)"""

    uid: str
    title: str
    url: Optional[str] = None
    parent_uid: Optional[str] = None
    filename: Optional[str] = None
    is_dir: bool = False

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'RemoteAsset':
        """Create from API payload

        Folder entries carry ``name`` instead of ``title``.
        """
        is_dir = bool(data.get("is_dir", False))
        title = data.get("title")
        if title is None:
            title = data.get("filename") or data.get("name") or ""
        return cls(
            uid=data["uid"],
            title=title,
            url=data.get("url"),
            parent_uid=data.get("parent_uid"),
            filename=data.get("filename"),
            is_dir=is_dir,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        data = {"uid": self.uid, "title": self.title}
        if self.url:
            data["url"] = self.url
        if self.parent_uid:
            data["parent_uid"] = self.parent_uid
        if self.is_dir:
            data["is_dir"] = True
        return data


@dataclass
class ExtensionRecord:
    """Extension registration (custom field, widget or dashboard)"""

    title: str
    type: ExtensionKind
    src: str = ""
    uid: str = ""
    tags: List[str] = field(default_factory=list)
    multiple: bool = False
    config: Optional[str] = None
    data_type: Optional[str] = None
    scope: List[str] = field(default_factory=list)
    default_width: Optional[str] = None

    @property
    def is_new(self) -> bool:
        """True until the record has been created remotely"""
        return not self.uid

    def to_payload(self) -> Dict[str, Any]:
        """Request body for create and update calls"""
        extension: Dict[str, Any] = {
            "tags": list(self.tags),
            "title": self.title,
            "src": self.src,
            "multiple": self.multiple,
            "type": self.type.value,
        }
        if self.config is not None:
            extension["config"] = self.config

        if self.type == ExtensionKind.FIELD:
            extension["data_type"] = self.data_type
        elif self.type == ExtensionKind.WIDGET:
            extension["data_type"] = self.data_type
            extension["scope"] = {"content_types": list(self.scope)}
        elif self.type == ExtensionKind.DASHBOARD:
            extension["default_width"] = self.default_width

        return {"extension": extension}

    @classmethod
    def from_dict(cls,
                  data: Dict[str, Any],
                  default_kind: ExtensionKind = ExtensionKind.FIELD) -> 'ExtensionRecord':
        """Create from API payload

        Lookups that project only the title do not return ``type``; the
        kind that was queried for is used instead.
        """
        scope = data.get("scope") or {}
        kind = data.get("type")
        return cls(
            uid=data.get("uid", ""),
            title=data["title"],
            type=ExtensionKind(kind) if kind in _KIND_VALUES else default_kind,
            src=data.get("src", ""),
            tags=list(data.get("tags") or []),
            multiple=bool(data.get("multiple", False)),
            config=data.get("config"),
            data_type=data.get("data_type"),
            scope=list(scope.get("content_types") or []) if isinstance(scope, dict) else [],
            default_width=data.get("default_width"),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        data = self.to_payload()["extension"]
        if self.uid:
            data["uid"] = self.uid
        return data
