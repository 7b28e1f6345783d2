"""CLI entry point for citewiki."""

from __future__ import annotations

import asyncio
import logging
import sys
from collections.abc import Callable
from pathlib import Path
from typing import TYPE_CHECKING, Any

import click
import yaml

from citewiki import __version__
from citewiki.core.errors import CitewikiError, DocumentStoreError, UnsupportedDocumentError
from citewiki.core.models import ConversionReport, Document, FinalLinkFormat, LinkFormat

if TYPE_CHECKING:
    from citewiki.container import Container

_DIRECTIONS = [f.value for f in LinkFormat]
_PATH_MODES = [f.value for f in FinalLinkFormat.path_modes()]


def _common_options(func: Callable[..., Any]) -> Callable[..., Any]:
    """Options shared by every command that works on a vault."""
    func = click.option(
        "-v",
        "--verbose",
        is_flag=True,
        help="Enable verbose (DEBUG) logging",
    )(func)
    func = click.option(
        "-c",
        "--config",
        "config_path",
        default=None,
        help="Path to settings file (default: <vault>/.citewiki/config.yaml)",
    )(func)
    func = click.option(
        "--vault",
        default=".",
        show_default=True,
        help="Root folder of the note vault",
    )(func)
    return func


@click.group()
@click.version_option(version=__version__, prog_name="citewiki")
def main() -> None:
    """Citewiki: convert note links between wiki and citation syntax."""
    pass


@main.command()
@click.argument("paths", nargs=-1, required=True)
@click.option(
    "--to",
    "direction",
    type=click.Choice(_DIRECTIONS),
    required=True,
    help="Link syntax to convert to",
)
@_common_options
def convert(
    paths: tuple[str, ...], direction: str, vault: str, config_path: str | None, verbose: bool
) -> None:
    """Convert the links of one or more documents."""
    _setup_logging(verbose)
    container = _load_container(vault, config_path)
    _apply_log_level(verbose, container.config.log_level)

    from citewiki.converter import LinkConverter

    converter = LinkConverter(container)
    try:
        documents = [_document_for(vault, path) for path in paths]
        reports = asyncio.run(converter.convert_documents(documents, LinkFormat(direction)))
    except CitewikiError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    for report in reports:
        _echo_report(report)


@main.command("convert-active")
@click.option(
    "--to",
    "direction",
    type=click.Choice(_DIRECTIONS),
    required=True,
    help="Link syntax to convert to",
)
@_common_options
def convert_active(direction: str, vault: str, config_path: str | None, verbose: bool) -> None:
    """Convert the links of the active document (configured, else newest)."""
    _setup_logging(verbose)
    container = _load_container(vault, config_path)
    _apply_log_level(verbose, container.config.log_level)

    from citewiki.converter import LinkConverter

    converter = LinkConverter(container)
    try:
        report = asyncio.run(converter.convert_active_document(LinkFormat(direction)))
    except CitewikiError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    _echo_report(report)


@main.command()
@click.argument("path")
@click.option(
    "--mode",
    type=click.Choice(_PATH_MODES),
    required=True,
    help="Path shape to rewrite link targets into",
)
@_common_options
def reformat(path: str, mode: str, vault: str, config_path: str | None, verbose: bool) -> None:
    """Rewrite link targets of one document as relative, absolute or shortest paths."""
    _setup_logging(verbose)
    container = _load_container(vault, config_path)
    _apply_log_level(verbose, container.config.log_level)

    from citewiki.converter import LinkConverter

    converter = LinkConverter(container)
    try:
        document = _document_for(vault, path)
        report = asyncio.run(
            converter.convert_links_to_preferred_format(document, FinalLinkFormat(mode))
        )
    except UnsupportedDocumentError as e:
        click.echo(str(e))
        return
    except CitewikiError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    _echo_report(report)


@main.command()
@click.argument("path")
@_common_options
def scan(path: str, vault: str, config_path: str | None, verbose: bool) -> None:
    """List the convertible links found in one document."""
    _setup_logging(verbose)
    container = _load_container(vault, config_path)
    _apply_log_level(verbose, container.config.log_level)

    from citewiki.links.scanner import scan as scan_text

    try:
        document = _document_for(vault, path)
        text = asyncio.run(container.document_store.read_text(document.path))
    except CitewikiError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    occurrences = scan_text(text, document.path)
    for occurrence in occurrences:
        line = f"{occurrence.kind.value:<22} {occurrence.raw_text}  -> {occurrence.target}"
        if occurrence.auxiliary:
            line += f" ({occurrence.auxiliary})"
        click.echo(line)
    click.echo(f"{len(occurrences)} link(s)")


@main.group("config")
def config_group() -> None:
    """Show or change the vault's settings."""
    pass


@config_group.command("show")
@_common_options
def config_show(vault: str, config_path: str | None, verbose: bool) -> None:
    """Print the effective settings."""
    _setup_logging(verbose)
    container = _load_container(vault, config_path)
    _apply_log_level(verbose, container.config.log_level)
    click.echo(yaml.safe_dump(container.config.model_dump(mode="json"), sort_keys=False).rstrip())


@config_group.command("set-format")
@click.argument("final_link_format", type=click.Choice([f.value for f in FinalLinkFormat]))
@_common_options
def config_set_format(
    final_link_format: str, vault: str, config_path: str | None, verbose: bool
) -> None:
    """Set the path shape applied to resolved link targets when converting."""
    _setup_logging(verbose)
    _update_settings(vault, config_path, final_link_format=FinalLinkFormat(final_link_format))
    click.echo(f"final_link_format = {final_link_format}")


@config_group.command("set-keep-mtime")
@click.argument("keep_mtime", type=click.BOOL)
@_common_options
def config_set_keep_mtime(keep_mtime: bool, vault: str, config_path: str | None, verbose: bool) -> None:
    """Choose whether rewritten documents keep their modification time."""
    _setup_logging(verbose)
    _update_settings(vault, config_path, keep_mtime=keep_mtime)
    click.echo(f"keep_mtime = {str(keep_mtime).lower()}")


def _load_container(vault: str, config_path: str | None) -> Container:
    from citewiki.container import Container

    try:
        return Container.create_default(vault, config_path)
    except CitewikiError as e:
        click.echo(f"Error loading vault: {e}", err=True)
        sys.exit(1)


def _update_settings(vault: str, config_path: str | None, **changes: Any) -> None:
    container = _load_container(vault, config_path)
    updated = container.config.model_copy(update=changes)
    try:
        container.settings_store.save(updated)
    except CitewikiError as e:
        click.echo(f"Error saving config: {e}", err=True)
        sys.exit(1)


def _document_for(vault: str, path: str) -> Document:
    """Document for a path given relative to the working directory or the vault."""
    root = Path(vault).expanduser().resolve()
    candidate = Path(path).expanduser()
    if not candidate.is_absolute() and not candidate.exists():
        candidate = root / candidate
    candidate = candidate.resolve()

    try:
        relative = candidate.relative_to(root).as_posix()
    except ValueError:
        raise DocumentStoreError(f"{path} is not inside the vault {root}") from None
    if not candidate.is_file():
        raise DocumentStoreError(f"Document not found: {path}")
    return Document.from_path(relative)


def _echo_report(report: ConversionReport) -> None:
    if report.notice:
        click.echo(report.notice)
    elif report.changed:
        click.echo(f"Converted {report.rewritten} link(s) in {report.path}")
    else:
        click.echo(f"No changes in {report.path}")


def _setup_logging(verbose: bool) -> None:
    """Configure logging for the CLI."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        datefmt="%H:%M:%S",
    )


def _apply_log_level(verbose: bool, level_name: str) -> None:
    """Switch to the vault's configured level once its settings are loaded."""
    if not verbose:
        logging.getLogger().setLevel(level_name)
