"""CLI command implementations"""

import sys
from pathlib import Path
from typing import Annotated, Optional

import typer
from pydantic import TypeAdapter

from chatmark.config import Settings, load_config
from chatmark.core.compose import AssistantMode, ReplyContext, format_assistant_reply
from chatmark.core.export import to_json, to_outline
from chatmark.core.models import Block
from chatmark.core.navigation import NavigationContext
from chatmark.core.render import render
from chatmark.core.scan import scan_blocks
from chatmark.core.utils.logger import configure_logging, get_logger


logger = get_logger(__name__)

_blocks_adapter = TypeAdapter(list[Block])


def _fail(msg: str, cause: Exception = None) -> None:
    """Print a user-friendly error to stderr and exit 1."""
    typer.echo(f"Error: {msg}", err=True)
    if cause:
        typer.echo(f"  {cause}", err=True)
    raise typer.Exit(1)


def _settings(overrides: dict = None) -> Settings:
    """Load config with standard CLI error handling, then apply the log level."""
    try:
        settings = load_config(overrides=overrides)
    except ValueError as e:
        _fail(str(e))
    configure_logging(settings.log_level)
    return settings


def _read_message(path: str) -> str:
    """Read message text from a file, or from stdin when path is "-"."""
    if path == "-":
        return sys.stdin.read()
    try:
        return Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        _fail(f"Cannot read {path}", e)


def render_cmd(
    path: Annotated[str, typer.Argument(help="Message file, or - for stdin")],
    place: Annotated[Optional[str], typer.Option("--place", help="Route that #/guide links are rewritten onto")] = None,
    fmt: Annotated[Optional[str], typer.Option("--format", help="json or outline")] = None,
    indent: Annotated[Optional[int], typer.Option("--indent", help="JSON indent; 0 = compact")] = None,
    ):
    """Render a message into its document tree."""
    settings = _settings(overrides={"guide_base": place, "output_format": fmt, "json_indent": indent})
    text = _read_message(path)

    navigation = NavigationContext.for_guide(settings.guide_base) if settings.guide_base else None
    doc = render(text, navigation)
    logger.info("Rendered %d block(s) from %s", len(doc.entries), path)

    if settings.output_format == "outline":
        for line in to_outline(doc):
            typer.echo(line)
    else:
        typer.echo(to_json(doc, settings.json_indent))


def blocks_cmd(
    path: Annotated[str, typer.Argument(help="Message file, or - for stdin")],
    indent: Annotated[Optional[int], typer.Option("--indent", help="JSON indent; 0 = compact")] = None,
    ):
    """Print the block structure of a message without inline or payload processing."""
    settings = _settings(overrides={"json_indent": indent})
    blocks = scan_blocks(_read_message(path))
    typer.echo(_blocks_adapter.dump_json(blocks, indent=settings.json_indent or None).decode("utf-8"))


def compose_cmd(
    mode: Annotated[AssistantMode, typer.Argument(help="Reply mode")],
    reply: Annotated[str, typer.Argument(help="Assistant reply text")] = "",
    project_name: Annotated[Optional[str], typer.Option("--project-name", help="Project shown in the heading")] = None,
    project_type: Annotated[Optional[str], typer.Option("--project-type", help="Project type used in step titles")] = None,
    total_ttc: Annotated[Optional[float], typer.Option("--total-ttc", help="Total budget incl. tax")] = None,
    max_chars: Annotated[Optional[int], typer.Option("--max-chars", help="Reply length before clamping")] = None,
    ):
    """Compose a chat message with a structured payload block for the given mode."""
    settings = _settings(overrides={"max_reply_chars": max_chars})
    context = ReplyContext(project_name=project_name, project_type=project_type, total_budget_ttc=total_ttc)
    typer.echo(format_assistant_reply(mode, reply, context, settings.max_reply_chars), nl=False)
