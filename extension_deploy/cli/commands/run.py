"""Run command implementation"""

import json
import logging
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape

from ..utils.output import format_deployment_result
from ...api import Deployer
from ...api.exceptions import ConfigError
from ...constants import (
    DEFAULT_BASE_URL,
    ENV_API_KEY,
    ENV_BASE_URL,
    ENV_MANAGEMENT_TOKEN,
    LOGGER_NAME,
    MAX_UPLOAD_WORKERS,
    MSG_COMPLETED,
    MSG_FAILED,
)
from ...models import ManagementCredentials, OperationStatus

console = Console()


@click.command()
@click.option('-i', '--input', 'input_path', required=True,
              type=click.Path(dir_okay=False, path_type=Path),
              help='Path to the deployment descriptor (JSON or YAML)')
@click.option('-v', '--verbose', is_flag=True, help='Log every stage and remote operation')
@click.option('--workers', type=click.IntRange(1, MAX_UPLOAD_WORKERS),
              help='Concurrent asset uploads (default: descriptor or 4)')
@click.option('--strict', is_flag=True, help='Exit non-zero when registration or purge fails')
@click.option('--json', 'as_json', is_flag=True, help='Print the result as JSON')
@click.option('--base-url', envvar=ENV_BASE_URL, default=DEFAULT_BASE_URL, show_default=True,
              help=f'Management API base URL [env: {ENV_BASE_URL}]')
@click.option('--api-key', envvar=ENV_API_KEY,
              help=f'Stack API key [env: {ENV_API_KEY}]')
@click.option('--management-token', envvar=ENV_MANAGEMENT_TOKEN,
              help=f'Management token [env: {ENV_MANAGEMENT_TOKEN}]')
@click.pass_context
def run(ctx, input_path, verbose, workers, strict, as_json, base_url, api_key, management_token):
    """Upload an extension and register it

    Reads the descriptor, uploads every asset referenced by the build log
    into the extension folder, rewrites the entry point to use the
    uploaded URLs, creates or updates the extension record and optionally
    purges stale assets.

    Examples:

        # Deploy with credentials from the environment or .env
        extension-deploy run -i contentstack/input.json

        # Verbose, 8 concurrent uploads, fail on partial success
        extension-deploy run -i input.json -v --workers 8 --strict
    """
    quiet = ctx.obj.quiet if ctx.obj else False

    if verbose:
        _enable_verbose(ctx)

    try:
        credentials = ManagementCredentials(
            api_key=api_key or "",
            management_token=management_token or "",
            base_url=base_url,
        )
    except ValueError as e:
        console.print(f"[red]✗ {escape(str(e))}[/red]")
        console.print(
            f"[dim]Pass --api-key/--management-token or set {ENV_API_KEY} and {ENV_MANAGEMENT_TOKEN}[/dim]"
        )
        sys.exit(1)

    deployer = Deployer(credentials)

    try:
        config = deployer.load(
            input_path,
            verbose=verbose,
            workers=workers,
            strict=True if strict else None,
        )
    except ConfigError as e:
        console.print(f"[red]{escape(MSG_FAILED.format(name=input_path, error=e))}[/red]")
        sys.exit(1)

    if config.verbose and not verbose:
        _enable_verbose(ctx)

    result = deployer.deploy(config)

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
    elif config.verbose and not quiet:
        format_deployment_result(result, verbose=True)

    if result.is_failed:
        if not as_json:
            console.print(f"[red]{escape(MSG_FAILED.format(name=config.name, error=result.message))}[/red]")
        sys.exit(1)

    if not as_json and not quiet:
        console.print(f"[green]{MSG_COMPLETED.format(name=config.name)}[/green]")

    if result.status == OperationStatus.PARTIAL and config.strict:
        sys.exit(1)


def _enable_verbose(ctx: click.Context) -> None:
    """Raise the package logger to INFO until the command finishes"""
    logger = logging.getLogger(LOGGER_NAME)
    if logger.getEffectiveLevel() > logging.INFO:
        previous = logger.level
        logger.setLevel(logging.INFO)
        ctx.call_on_close(lambda: logger.setLevel(previous))
