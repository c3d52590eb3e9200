"""CLI utility functions"""

from .output import format_deployment_result, format_table

__all__ = [
    "format_deployment_result",
    "format_table",
]
