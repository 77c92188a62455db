"""
Main entry point for codecompleter.

    codecompleter edit [PATH]            open the Qt editor with inline completion
    codecompleter complete PATH -o N     run one completion headless and print it
"""

import logging
import sys
from pathlib import Path

import click

from .config.settings import load_settings
from .core import context
from .core.core import CompletionSession
from .core.document import TextBuffer
from .core.errors import ConfigError

logger = logging.getLogger(__name__)


def configure_logging(level):
    logging.basicConfig(level=level, format="%(asctime)s [%(levelname)s] %(message)s", stream=sys.stderr)


def settings_options(fn):
    """Options shared by every command, each overriding the matching setting."""
    options = [
        click.option("--endpoint", help="Chat-completion endpoint URL."),
        click.option("--context-limit", type=int, help="Characters of context before the cursor."),
        click.option("--max-tokens", type=int, help="Maximum tokens to generate."),
        click.option("--timeout", "request_timeout", type=float, help="Request timeout in seconds."),
        click.option("--log-level", help="Logging level (DEBUG, INFO, WARNING, ...)."),
    ]
    for option in reversed(options):
        fn = option(fn)
    return fn


def _load(ctx, overrides):
    try:
        settings = load_settings(**overrides)
    except ConfigError as e:
        click.echo(f"Configuration error: {e}", err=True)
        ctx.exit(2)
    configure_logging(settings.log_level)
    return settings


@click.group()
def cli():
    """Inline code completion backed by a local LLM chat-completion server."""


@cli.command()
@click.argument("path", required=False, type=click.Path(dir_okay=False))
@click.option("--mode", help="Mode identifier, e.g. python-mode (default: from the file suffix).")
@settings_options
@click.pass_context
def edit(ctx, path, mode, **overrides):
    """Open PATH in the completion-enabled editor.

    Ctrl+Space requests a completion, Tab accepts it, Escape discards it.
    """
    settings = _load(ctx, overrides)
    # Qt is only needed for the editor; keep the headless command importable without a display
    from .hooking.qt_editor import run_editor

    logger.info("Starting editor (endpoint %s)", settings.endpoint)
    ctx.exit(run_editor(settings, path=path, mode=mode))


@cli.command()
@click.argument("path", type=click.Path(exists=True, dir_okay=False))
@click.option("-o", "--offset", type=int, help="Character offset to complete at (default: end of file).")
@click.option("--mode", help="Mode identifier (default: from the file suffix).")
@click.option("--write", is_flag=True, help="Accept the completion into the file.")
@settings_options
@click.pass_context
def complete(ctx, path, offset, mode, write, **overrides):
    """Complete PATH at OFFSET and print the suggestion."""
    settings = _load(ctx, overrides)

    file_path = Path(path)
    buffer = TextBuffer(
        file_path.read_text(encoding="utf-8"),
        cursor=offset,
        mode=mode or context.mode_for_path(file_path),
    )
    session = CompletionSession(buffer, settings)

    preview = session.complete()
    if preview is None:
        click.echo("No completion produced.", err=True)
        ctx.exit(1)

    click.echo(preview.text, nl=False)
    if write and session.accept():
        file_path.write_text(buffer.text, encoding="utf-8")
        logger.info("Wrote completion into %s", file_path)


def main():
    cli()


if __name__ == "__main__":
    main()
