# extension_deploy/core/config_loader.py
"""Load deployment descriptors into a DeploymentConfig"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

import jsonschema
import yaml

from .reference_resolver import ReferenceResolver
from ..api.exceptions import ConfigError
from ..constants import (
    ExtensionKind,
    DASHBOARD_WIDTHS,
    DEFAULT_DASHBOARD_WIDTH,
    DEFAULT_ENTRY_POINT,
    DEFAULT_TAGS,
    DEFAULT_UPLOAD_WORKERS,
    DESCRIPTOR_REF_KEY,
    MAX_REF_DEPTH,
    MAX_UPLOAD_WORKERS,
    YAML_SUFFIXES,
)
from ..models.config import DeploymentConfig
from ..models.references import ReferenceMap

logger = logging.getLogger(__name__)

DESCRIPTOR_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "required": ["name", "extension", "buildFolder", "assetsFolder"],
    "properties": {
        "name": {"type": "string", "minLength": 1},
        "extension": {"enum": [kind.value for kind in ExtensionKind]},
        "type": {"type": "string", "minLength": 1},
        "scope": {"type": "array", "items": {"type": "string"}},
        "defaultWidth": {"enum": DASHBOARD_WIDTHS},
        "config": {"type": ["string", "object"]},
        "tags": {"type": "array", "items": {"type": "string"}},
        "multiple": {"type": "boolean"},
        "buildFolder": {"type": "string", "minLength": 1},
        "buildLog": {"type": "string", "minLength": 1},
        "replacement": {"type": "string", "minLength": 1},
        "entryPoint": {"type": "string", "minLength": 1},
        "assetsFolder": {"type": "string", "minLength": 1},
        "purge": {"type": "boolean"},
        "verbose": {"type": "boolean"},
        "strict": {"type": "boolean"},
        "workers": {"type": "integer", "minimum": 1, "maximum": MAX_UPLOAD_WORKERS},
    },
    "allOf": [
        {
            "if": {"properties": {"extension": {"enum": ["field", "widget"]}}},
            "then": {"required": ["type"]},
        },
        {
            "if": {"required": ["buildLog"]},
            "then": {"required": ["replacement"]},
        },
    ],
}


class ConfigLoader:
    """Read a descriptor file and resolve it into a DeploymentConfig"""

    def __init__(self, schema: Optional[Dict[str, Any]] = None):
        self.schema = schema or DESCRIPTOR_SCHEMA

    def load(self,
             descriptor_path: Union[str, Path],
             verbose: bool = False,
             workers: Optional[int] = None,
             strict: Optional[bool] = None) -> DeploymentConfig:
        """
        Load descriptor, follow ``ref`` indirection and scan the build log

        Args:
            descriptor_path: Path to the JSON or YAML descriptor
            verbose: Verbosity requested by the caller (ORed with descriptor)
            workers: Override for the upload worker count
            strict: Override for strict mode

        Returns:
            DeploymentConfig

        Raises:
            ConfigError: If anything about the descriptor is unusable
        """
        source, data = self.read_descriptor(Path(descriptor_path))
        self.validate(data, source)

        references = self.scan_build_log(data)

        return self._build_config(
            data,
            source=source,
            references=references,
            verbose=verbose,
            workers=workers,
            strict=strict,
        )

    def read_descriptor(self, path: Path) -> Tuple[Path, Dict[str, Any]]:
        """Read a descriptor, following ``ref`` chains

        Relative ``ref`` paths are resolved from the working directory.

        Returns:
            Tuple of (path actually loaded, descriptor data)
        """
        seen: List[Path] = []
        current = path

        while True:
            resolved = current.resolve()
            if resolved in seen:
                chain = " -> ".join(str(p) for p in seen + [resolved])
                raise ConfigError(f"Descriptor reference cycle: {chain}")
            if len(seen) >= MAX_REF_DEPTH:
                raise ConfigError(f"Descriptor references nested deeper than {MAX_REF_DEPTH} levels")
            seen.append(resolved)

            data = self._parse_file(current)
            ref = data.get(DESCRIPTOR_REF_KEY)
            if not ref:
                return current, data

            logger.debug(f"Descriptor {current} refers to {ref}")
            current = Path(ref)

    def validate(self, data: Dict[str, Any], source: Optional[Path] = None) -> None:
        """Validate descriptor data against the schema"""
        try:
            jsonschema.validate(data, self.schema)
        except jsonschema.ValidationError as e:
            location = ".".join(str(p) for p in e.absolute_path) or "descriptor"
            where = f" in {source}" if source else ""
            raise ConfigError(f"Invalid descriptor{where}: {location}: {e.message}")

    def scan_build_log(self, data: Dict[str, Any]) -> ReferenceMap:
        """Read the build log named by the descriptor and resolve references"""
        build_log = data.get("buildLog")
        if not build_log:
            logger.debug("No build log configured, no references to resolve")
            return ReferenceMap()

        resolver = ReferenceResolver(data["replacement"])

        log_path = Path(build_log)
        logger.info(f"Inferring files from build log: {log_path}")
        try:
            text = log_path.read_text(encoding="utf-8")
        except OSError as e:
            raise ConfigError(f"Cannot read build log {log_path}: {e}")

        references = resolver.resolve(text)
        logger.info(f"References: {json.dumps(references.to_dict())}")
        return references

    def _parse_file(self, path: Path) -> Dict[str, Any]:
        try:
            content = path.read_text(encoding="utf-8")
        except OSError as e:
            raise ConfigError(f"Cannot read descriptor {path}: {e}")

        try:
            if path.suffix.lower() in YAML_SUFFIXES:
                data = yaml.safe_load(content)
            else:
                data = json.loads(content)
        except (json.JSONDecodeError, yaml.YAMLError) as e:
            raise ConfigError(f"Cannot parse descriptor {path}: {e}")

        if not isinstance(data, dict):
            raise ConfigError(f"Descriptor {path} must contain an object")
        return data

    def _build_config(self,
                      data: Dict[str, Any],
                      source: Path,
                      references: ReferenceMap,
                      verbose: bool,
                      workers: Optional[int],
                      strict: Optional[bool]) -> DeploymentConfig:
        kind = ExtensionKind(data["extension"])
        name = data["name"]

        extension_config = data.get("config")
        if isinstance(extension_config, dict):
            extension_config = json.dumps(extension_config)

        tags = data.get("tags")
        if tags is None:
            tags = [*DEFAULT_TAGS, name]

        return DeploymentConfig(
            name=name,
            kind=kind,
            build_folder=Path(data["buildFolder"]),
            assets_folder=data["assetsFolder"],
            data_type=data.get("type"),
            scope=tuple(data.get("scope") or ()),
            default_width=data.get("defaultWidth", DEFAULT_DASHBOARD_WIDTH),
            extension_config=extension_config,
            tags=tuple(tags),
            multiple=data.get("multiple", False),
            entry_point=data.get("entryPoint", DEFAULT_ENTRY_POINT),
            build_log=Path(data["buildLog"]) if data.get("buildLog") else None,
            pattern=data.get("replacement"),
            purge=data.get("purge", False),
            verbose=verbose or data.get("verbose", False),
            strict=strict if strict is not None else data.get("strict", False),
            workers=workers or data.get("workers", DEFAULT_UPLOAD_WORKERS),
            references=references,
            source=source,
        )


def load_config(descriptor_path: Union[str, Path], verbose: bool = False, **overrides) -> DeploymentConfig:
    """Load a descriptor with the default schema"""
    return ConfigLoader().load(descriptor_path, verbose=verbose, **overrides)
