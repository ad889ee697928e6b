"""Command-line interface for pagekiln.

This module defines the CLI commands using the Click framework. It is a thin
front end over BuildEngine: it loads configuration, resolves the page
component and dataset, and reports the build result.

Commands:
- build: Compile a page for every record of a dataset.
- clean: Remove all cached content fingerprints.
"""

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path

import click

from . import __version__
from .cache import ContentCache
from .config import load_config
from .engine import BuildEngine, BuildStatus
from .errors import BuildError
from .hooks import HookPipeline
from .minify import minify_hook
from .pages import TemplatePage, load_dataset, load_page

logger = logging.getLogger(__name__)

LOG_LEVELS = ["critical", "error", "warning", "info", "debug"]


def _configure_logging(verbose: bool) -> None:
    env_override = os.getenv("PAGEKILN_LOG_LEVEL")
    level_str = (env_override or ("debug" if verbose else "warning")).upper()
    if level_str not in {lvl.upper() for lvl in LOG_LEVELS}:
        level_str = "WARNING"
    logging.basicConfig(
        level=getattr(logging, level_str, logging.WARNING),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    logger.debug("Logging configured at %s", level_str)


@click.group()
@click.version_option(version=__version__, prog_name="pagekiln")
def cli():
    """pagekiln incremental static page builder."""


@cli.command()
@click.argument("pattern")
@click.option("--page", "page_ref", help="Page callable as 'package.module:name'")
@click.option(
    "--template",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Jinja2 template to render instead of a page callable",
)
@click.option(
    "--data",
    "data_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="YAML or JSON file with the records to build",
)
@click.option("--delimiters", help="Placeholder delimiters, e.g. '[[ ]]'")
@click.option("--minify", is_flag=True, help="Minify rendered HTML")
@click.option(
    "--root",
    type=click.Path(file_okay=False, path_type=Path),
    help="Project root (defaults to the current directory)",
)
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
def build(
    pattern: str,
    page_ref: str | None,
    template: Path | None,
    data_file: Path | None,
    delimiters: str | None,
    minify: bool,
    root: Path | None,
    verbose: bool,
):
    """Compile a page to PATTERN for every record in the dataset."""
    _configure_logging(verbose)
    if bool(page_ref) == bool(template):
        raise click.UsageError("Pass exactly one of --page or --template.")
    project_root = (root or Path.cwd()).resolve()
    config = load_config(project_root, delimiters=delimiters)

    try:
        dataset = load_dataset(data_file) if data_file else [{}]
    except ValueError as exc:
        raise click.ClickException(str(exc)) from exc

    hooks = HookPipeline()
    if minify:
        hooks.add_after_render(minify_hook)

    added_path = None
    if page_ref and str(project_root) not in sys.path:
        added_path = str(project_root)
        sys.path.insert(0, added_path)
    try:
        try:
            if template is not None:
                page = TemplatePage(template.resolve())
            else:
                page = load_page(page_ref)
            engine = BuildEngine(page, config=config, hooks=hooks)
        except BuildError as exc:
            _report_failure(exc, project_root)
            raise SystemExit(1) from None
        except ValueError as exc:
            raise click.ClickException(str(exc)) from exc

        result = engine.build_many(pattern, dataset)
    finally:
        if added_path is not None and added_path in sys.path:
            sys.path.remove(added_path)

    if result.error is not None:
        _report_failure(result.error, project_root)
        raise SystemExit(1)
    if result.status is BuildStatus.WRITTEN:
        click.echo(
            f"Built {result.records} records ({result.bytes_written} bytes) "
            f"into {config.build_root}"
        )
    else:
        click.echo(f"Nothing changed in {result.records} records")


@cli.command()
@click.option(
    "--root",
    type=click.Path(file_okay=False, path_type=Path),
    help="Project root (defaults to the current directory)",
)
def clean(root: Path | None):
    """Remove all cached content fingerprints."""
    project_root = (root or Path.cwd()).resolve()
    config = load_config(project_root)
    try:
        cache = ContentCache(
            config.hashes_root, algorithm=config.algorithm, suffix=config.suffix
        )
    except ValueError as exc:
        raise click.ClickException(str(exc)) from exc
    removed = cache.clear()
    click.echo(f"Removed {removed} cache entries from {config.hashes_root}")


def _report_failure(exc: BaseException, project_root: Path) -> None:
    """Print a user-friendly build failure to stderr.

    Args:
        exc: The error that aborted the build.
        project_root: Root used to shorten reported paths.
    """
    click.echo(click.style("Build failed:", fg="red", bold=True), err=True)
    path = getattr(exc, "path", None)
    if isinstance(exc, BuildError) and path is not None:
        try:
            shown = path.relative_to(project_root)
        except ValueError:
            shown = path
        click.echo(click.style(f"  File: {shown}", fg="yellow"), err=True)
    click.echo(
        click.style(f"  Error: {_format_error_message(exc)}", fg="white"), err=True
    )


def _format_error_message(exc: BaseException) -> str:
    """Format an exception into a user-friendly error message.

    Args:
        exc: The exception to format.

    Returns:
        A human-readable error message.
    """
    if isinstance(exc, BuildError):
        return exc.message

    error_type = type(exc).__name__
    error_msg = str(exc)

    # Common errors raised from inside page components and templates
    if error_type == "UndefinedError":
        return f"Undefined variable: {error_msg}"
    if error_type == "TemplateSyntaxError":
        return f"Template syntax error on line {exc.lineno}: {exc.message}"
    if error_type == "KeyError":
        return f"Missing key: {error_msg}"

    return f"{error_type}: {error_msg}"


def main():
    """Entry point for the CLI application."""
    cli()
