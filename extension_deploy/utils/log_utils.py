# extension_deploy/utils/log_utils.py
"""Logging helpers"""

import logging
from typing import Any, MutableMapping, Tuple

from ..constants import MSG_LOG_PREFIX


class ExtensionLogger(logging.LoggerAdapter):
    """Prefix every message with the extension name

    >>> log = ExtensionLogger(logging.getLogger(__name__), "color-picker")
    >>> log.info("Uploading...")  # [color-picker] :: Uploading...
    """

    def __init__(self, logger: logging.Logger, name: str):
        super().__init__(logger, {"extension": name})

    def process(self, msg: Any, kwargs: MutableMapping[str, Any]) -> Tuple[Any, MutableMapping[str, Any]]:
        return MSG_LOG_PREFIX.format(name=self.extra["extension"], message=msg), kwargs


def get_extension_logger(module_name: str, extension_name: str) -> ExtensionLogger:
    """Module logger bound to one extension"""
    return ExtensionLogger(logging.getLogger(module_name), extension_name)
