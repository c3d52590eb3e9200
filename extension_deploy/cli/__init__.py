"""Command line interface for extension-deploy"""

from .main import cli, main

__all__ = ["cli", "main"]
