# extension_deploy/core/__init__.py
"""Core components for extension-deploy"""

from .config_loader import ConfigLoader, DESCRIPTOR_SCHEMA, load_config
from .reference_resolver import ReferenceResolver, compile_pattern, resolve_references

__all__ = [
    "ConfigLoader",
    "DESCRIPTOR_SCHEMA",
    "load_config",
    "ReferenceResolver",
    "compile_pattern",
    "resolve_references",
]
