# extension_deploy/core/reference_resolver.py
"""Discover asset references in build output"""

import re
from typing import Dict, Pattern, Union

from ..api.exceptions import ConfigError
from ..models.references import ReferenceMap

PATTERN_FLAGS = re.IGNORECASE | re.MULTILINE


class ReferenceResolver:
    """Build a ReferenceMap from build-log text

    The pattern must have at least one capture group. Group 1 is the stable
    key (usually the hashed filename), the full match is the literal that is
    uploaded and replaced in the entry point.
    """

    def __init__(self, pattern: Union[str, Pattern]):
        self.pattern = compile_pattern(pattern)

    def resolve(self, text: str) -> ReferenceMap:
        """Scan text for every non-overlapping match

        Later matches overwrite earlier ones with the same key. The key keeps
        the position where it was first seen.
        """
        entries: Dict[str, str] = {}
        for match in self.pattern.finditer(text):
            key = match.group(1)
            if key is None:
                # Optional group did not take part in this match
                continue
            entries[key] = match.group(0)
        return ReferenceMap(entries)


def compile_pattern(pattern: Union[str, Pattern]) -> Pattern:
    """Compile a reference pattern and check it has a capture group

    Raises:
        ConfigError: If the pattern is invalid or has no capture group
    """
    if isinstance(pattern, re.Pattern):
        compiled = pattern
    else:
        if not pattern:
            raise ConfigError("Reference pattern is empty")
        try:
            compiled = re.compile(pattern, PATTERN_FLAGS)
        except re.error as e:
            raise ConfigError(f"Invalid reference pattern '{pattern}': {e}")

    if compiled.groups < 1:
        raise ConfigError(
            f"Reference pattern '{compiled.pattern}' needs a capture group for the reference key"
        )
    return compiled


def resolve_references(text: str, pattern: Union[str, Pattern]) -> ReferenceMap:
    """Convenience wrapper around ReferenceResolver"""
    return ReferenceResolver(pattern).resolve(text)
