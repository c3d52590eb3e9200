"""Reference map model"""

from collections.abc import Mapping
from typing import Dict, Iterator, Optional


class ReferenceMap(Mapping):
    """Read-only ordered mapping of reference key to matched literal

    Keys are the capture-group values found in the build log (usually the
    hashed filename), values are the full matched text that appears in the
    entry point and names the file relative to the build folder.
    """

    def __init__(self, entries: Optional[Dict[str, str]] = None):
        self._entries: Dict[str, str] = dict(entries or {})

    def __getitem__(self, key: str) -> str:
        return self._entries[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"ReferenceMap({self._entries!r})"

    def to_dict(self) -> Dict[str, str]:
        """Convert to dictionary"""
        return dict(self._entries)
