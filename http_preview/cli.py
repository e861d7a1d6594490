"""
Renders a recorded HTTP exchange as a highlighted, line-numbered HTML preview.
The document is written to stdout, or to the file given with --output.
"""

from __future__ import annotations

from pathlib import Path

import click
from .config import ConfigError, build_config
from .document import render_document
from .exchange import load_exchange
from .exceptions import ExchangeFileError
from .filesystem import max_file_size_from_env, resolve_exchange_path, write_document
from .models import PreviewOption

__all__ = ["cli"]


@click.command()
@click.version_option()
@click.option(
    "--preview-option",
    type=click.Choice([option.value for option in PreviewOption]),
    help="Parts of the exchange to show",
)
@click.option("--font-family", help="Font family for the code block")
@click.option("--font-size", type=int, help="Font size in pixels")
@click.option("--font-weight", help="Font weight for the code block")
@click.option("--stylesheet-path", help="Stylesheet linked by the document")
@click.option("--script-path", help="Folding script loaded by the document")
@click.option(
    "-o",
    "--output",
    type=click.Path(dir_okay=False, writable=True),
    help="Write the document to this file instead of stdout",
)
@click.argument("filepath", type=click.Path(exists=True, dir_okay=False))
def cli(
    filepath: str,
    preview_option: str | None = None,
    font_family: str | None = None,
    font_size: int | None = None,
    font_weight: str | None = None,
    stylesheet_path: str | None = None,
    script_path: str | None = None,
    output: str | None = None,
):
    """
    Entry point for rendering an exchange file.

    Args:
        filepath: Path to the JSON exchange file.
        preview_option: Override for the preview layout.
        font_family: Override for the code font family.
        font_size: Override for the code font size in pixels.
        font_weight: Override for the code font weight.
        stylesheet_path: Override for the linked stylesheet.
        script_path: Override for the loaded script.
        output: Destination file; stdout when omitted.

    Returns:
        None.

    Raises:
        click.BadParameter: If the exchange path or configuration overrides are
            invalid.
        click.ClickException: If the exchange file is too large, cannot be
            decoded, or the output cannot be written.

    Examples:
        http-preview exchange.json --preview-option exchange -o preview.html
    """
    base_dir = Path.cwd().resolve()
    try:
        filepath = resolve_exchange_path(filepath, base_dir)
    except ValueError as error:
        raise click.BadParameter(str(error)) from error
    try:
        config = build_config(
            filepath.parent,
            preview_option=preview_option,
            font_family=font_family,
            font_size=font_size,
            font_weight=font_weight,
            stylesheet_path=stylesheet_path,
            script_path=script_path,
        )
    except ConfigError as error:
        raise click.BadParameter(str(error)) from error

    try:
        max_file_size = max_file_size_from_env(default=config.max_file_size)
    except ValueError as error:
        raise click.ClickException(str(error)) from error

    try:
        exchange = load_exchange(filepath, config, max_file_size)
    except ExchangeFileError as error:
        raise click.ClickException(str(error)) from error

    document = render_document(
        exchange, config, warn=lambda message: click.echo(message, err=True)
    )

    if output is None:
        click.echo(document)
        return

    try:
        write_document(Path(output).expanduser(), document)
    except IOError as error:
        raise click.ClickException(str(error)) from error


if __name__ == "__main__":
    cli()
