# extension_deploy/cli/main.py
"""Main CLI entry point for extension-deploy"""

import sys
import logging

import click
from dotenv import find_dotenv, load_dotenv
from rich.console import Console
from rich.logging import RichHandler

from ..__version__ import __version__
from ..constants import APP_NAME, LOG_FORMAT

# Import all commands
from .commands import run

console = Console()


def setup_logging(verbose: bool = False, debug: bool = False) -> None:
    """Setup logging configuration

    Args:
        verbose: Enable verbose output (INFO level)
        debug: Enable debug output (DEBUG level)
    """
    if debug:
        level = logging.DEBUG
    elif verbose:
        level = logging.INFO
    else:
        level = logging.WARNING

    # Configure rich handler
    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        handlers=[
            RichHandler(
                console=console,
                show_time=debug,
                show_path=debug,
                rich_tracebacks=True,
                tracebacks_suppress=[click]
            )
        ]
    )

    # Adjust third-party loggers
    logging.getLogger("asyncio").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


class Context:
    """CLI context object"""

    def __init__(self):
        self.debug: bool = False
        self.quiet: bool = False


@click.group(name=APP_NAME)
@click.version_option(__version__, prog_name=APP_NAME)
@click.option('-d', '--debug', is_flag=True, help='Enable debug output')
@click.option('-q', '--quiet', is_flag=True, help='Suppress all output except errors')
@click.pass_context
def cli(ctx, debug, quiet):
    """Extension Deploy - Ship single-page extensions to the CMS

    Uploads the build output of a custom field, widget or dashboard
    extension as assets, points its entry point at the uploaded files and
    registers the extension.

    Credentials are read from options, the environment or a .env file in
    the working directory.
    """
    load_dotenv(find_dotenv(usecwd=True))

    # Setup logging
    if quiet:
        logging.disable(logging.CRITICAL)
        ctx.call_on_close(lambda: logging.disable(logging.NOTSET))
    else:
        setup_logging(debug=debug)

    ctx.obj = Context()
    ctx.obj.debug = debug
    ctx.obj.quiet = quiet


# Register commands
cli.add_command(run.run)


def main():
    """Main entry point for the CLI application

    This function handles:
    - Auto-help for incomplete commands
    - Keyboard interrupts
    - Unexpected exceptions with proper error display
    """
    try:
        # Handle help for incomplete commands
        if len(sys.argv) == 2 and sys.argv[1] not in [
            '-h', '--help', '--version', '-d', '--debug', '-q', '--quiet'
        ]:
            # If only command name provided, show its help
            sys.argv.append('--help')

        # Non-standalone so that Ctrl-C reaches the handler below
        cli.main(prog_name=APP_NAME, standalone_mode=False)

    except (KeyboardInterrupt, click.exceptions.Abort):
        console.print("\n[yellow]Operation cancelled by user[/yellow]")
        sys.exit(130)

    except click.ClickException as e:
        e.show()
        sys.exit(e.exit_code)

    except Exception as e:
        console.print(f"[red]Unexpected error: {e}[/red]")
        if '--debug' in sys.argv or '-d' in sys.argv:
            console.print_exception()
        sys.exit(1)


if __name__ == "__main__":
    main()
