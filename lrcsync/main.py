"""
Main CLI interface for lrcsync

This module provides the command-line interface: synchronizing lyrics for a
music library and inspecting the effective configuration.

The CLI is built using Click framework and provides:
- sync: walk a directory and write .lrc files next to audio files
- config: show the effective settings or write them to a config file

Command-line options override environment variables, which override the
config file. Only configuration errors make the process exit with status 1;
per-file failures are reported in the run summary.
"""

import sys
import click
import functools
from pathlib import Path

# Import application modules for core functionality
from . import __version__
from .config.settings import get_settings, reload_settings, split_ignore_tokens
from .exceptions import ConfigError
from .lyrics.lrclib import reset_lrclib_client
from .sync.synchronizer import get_synchronizer, reset_synchronizer
from .utils.logger import configure_from_settings, get_logger, get_current_log_file
from .utils.helpers import format_duration
from .utils.validation import validate_library_directory, warn_unknown_ignore_tokens


logger = get_logger(__name__)


def print_banner():
    """
    Print application banner to console

    Shown when the application is started without a subcommand.
    """
    banner = """
╔═══════════════════════════════════════════════════════════════╗
║                           lrcsync                             ║
║                                                               ║
║        Synchronized lyrics for your local music library       ║
║                                                               ║
╚═══════════════════════════════════════════════════════════════╝
    """
    click.echo(click.style(banner, fg='green', bold=True))


def handle_error(func):
    """
    Decorator to handle common CLI errors gracefully

    Wraps CLI command functions to provide consistent error handling across
    all commands. Configuration errors and unexpected failures exit with
    status 1; a keyboard interrupt exits with 130.

    Args:
        func: The CLI command function to wrap

    Returns:
        Wrapped function with error handling
    """
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except KeyboardInterrupt:
            # Handle user cancellation gracefully
            click.echo(click.style("\n\nOperation cancelled by user", fg='yellow'))
            sys.exit(130)  # Standard exit code for SIGINT
        except ConfigError as e:
            logger.error(f"Configuration error: {e}")
            click.echo(click.style(f"Configuration error: {e}", fg='red'), err=True)
            sys.exit(1)
        except Exception as e:
            # Log error for debugging and show user-friendly message
            logger.error(f"Command failed: {e}", exc_info=True)
            click.echo(click.style(f"Error: {e}", fg='red'), err=True)
            sys.exit(1)
    return wrapper


# Main CLI group - root command that all subcommands attach to
@click.group(invoke_without_command=True)
@click.option('--version', is_flag=True, help='Show version information')
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose output')
@click.option('--config', type=click.Path(), help='Path to config file')
@click.pass_context
@handle_error
def cli(ctx, version, verbose, config):
    """
    lrcsync - Download synchronized lyrics for a local music library

    Reads the tags of every audio file below a directory, looks the track up
    on an LRCLIB-compatible service and writes the synchronized lyrics to an
    .lrc file next to it.
    """
    # Ensure Click context exists for subcommands
    ctx.ensure_object(dict)

    # Handle version information display
    if version:
        click.echo(f"lrcsync v{__version__}")
        return

    # Load settings (a broken explicit config file is fatal)
    settings = reload_settings(config) if config else get_settings()

    if verbose:
        ctx.obj['verbose'] = True
        settings.logging.level = "DEBUG"

    configure_from_settings()
    if config:
        logger.info(f"Loaded config: {config}")
    if verbose:
        logger.console_info("Verbose mode enabled")

    # If no subcommand provided, show banner and help
    if ctx.invoked_subcommand is None:
        print_banner()
        click.echo(ctx.get_help())


@cli.command()
@click.argument('directory', type=click.Path(), default='.')
@click.option('--lrclib-url', '-u', help='Base URL of the LRCLIB instance')
@click.option('--hidden', '-a', is_flag=True, help='Also visit hidden files and directories')
@click.option('--force', '-f', is_flag=True, help='Overwrite existing .lrc files')
@click.option('--ignore', '-i', multiple=True,
              help='Field to leave out of lookups: duration, album, artist (repeatable, comma separated)')
@click.option('--search', '-s', is_flag=True, help='Fall back to a search when the exact lookup misses')
@click.option('--tolerance', '-t', type=float,
              help='Maximum duration difference in seconds for search results (0 disables)')
@click.option('--dry-run', is_flag=True, help='Show what would be written without writing')
@handle_error
def sync(directory, lrclib_url, hidden, force, ignore, search, tolerance, dry_run):
    """
    Download synchronized lyrics for a music library

    Walks DIRECTORY (default: current directory) and writes an .lrc file next
    to every audio file for which synchronized lyrics are found.

    Args:
        directory: Library root to scan
        lrclib_url: Service base URL override
        hidden: Include dot-files and dot-directories
        force: Replace existing .lrc files
        ignore: Fields to suppress from lookups
        search: Enable the search fallback
        tolerance: Duration window for search results
        dry_run: Resolve lyrics without writing files
    """
    is_valid, error_msg = validate_library_directory(directory)
    if not is_valid:
        raise ConfigError(error_msg, details={'file_path': directory})

    # Load current settings and apply command-line overrides
    settings = get_settings()

    if lrclib_url:
        settings.lrclib.url = lrclib_url
    if hidden:
        settings.sync.include_hidden = True
    if force:
        settings.sync.force = True
    if ignore:
        settings.sync.ignore = split_ignore_tokens(list(ignore))
    if search:
        settings.sync.search = True
    if tolerance is not None:
        settings.sync.tolerance = tolerance
    if dry_run:
        settings.sync.dry_run = True

    errors = settings.validate()
    if errors:
        raise ConfigError("; ".join(errors))

    warn_unknown_ignore_tokens(settings.sync.ignore, logger)

    if settings.sync.dry_run:
        click.echo("Dry run mode - no files will be written")

    # Rebuild service client and synchronizer with the overrides applied
    reset_lrclib_client()
    reset_synchronizer()
    synchronizer = get_synchronizer()

    result = synchronizer.sync_directory(Path(directory).expanduser())

    # Display summary
    click.echo(f"\nSync summary for {directory}:")
    click.echo(f"   Audio files: {result.scanned}")
    click.echo(f"   Written: {result.written}")
    click.echo(f"   Skipped (lrc exists): {result.skipped}")
    click.echo(f"   Not found: {result.not_found}")
    click.echo(f"   Failed: {result.failed}")
    if result.total_time is not None:
        click.echo(f"   Time: {format_duration(result.total_time)}")

    if result.failures:
        click.echo(click.style(f"\n{len(result.failures)} failures:", fg='yellow'))
        for path, detail in result.failures:
            click.echo(f"   • {path}: {detail}")

    log_file = get_current_log_file()
    if log_file:
        click.echo(f"\nLog file: {log_file}")


# Configuration commands group
@cli.group()
def config():
    """
    Configuration management

    Command group for viewing the effective configuration and writing it to
    a file that later runs pick up.
    """
    pass


@config.command()
@handle_error
def show():
    """
    Show current configuration

    Displays the effective settings after config file and environment
    variables have been applied.
    """
    settings = get_settings()

    click.echo("Current Configuration:\n")

    loaded_from = getattr(settings, 'loaded_from', None)
    click.echo(f"Config file: {loaded_from or 'none (defaults)'}")

    click.echo("\nLRCLIB:")
    click.echo(f"   URL: {settings.lrclib.url}")
    click.echo(f"   Timeout: {settings.lrclib.timeout}s")
    click.echo(f"   User agent: {settings.lrclib.user_agent or 'default'}")

    click.echo("\nSync:")
    click.echo(f"   Include hidden: {settings.sync.include_hidden}")
    click.echo(f"   Force: {settings.sync.force}")
    click.echo(f"   Ignore fields: {', '.join(settings.sync.ignore) or '-'}")
    click.echo(f"   Search fallback: {settings.sync.search}")
    click.echo(f"   Tolerance: {settings.sync.tolerance}s")
    click.echo(f"   Ignore files: {', '.join(settings.sync.ignore_filenames)}")

    click.echo("\nLogging:")
    click.echo(f"   Level: {settings.logging.level}")
    click.echo(f"   File: {settings.logging.file or '-'}")


@config.command()
@click.option('--path', type=click.Path(), help='Where to write the config file')
@handle_error
def init(path):
    """
    Write the current configuration to a YAML file

    Defaults to ~/.lrcsync/config.yaml, which later runs load automatically.
    """
    settings = get_settings()
    target = settings.save_config(path)
    click.echo(f"Configuration written to {target}")


# Entry point for module execution
if __name__ == '__main__':
    cli()
