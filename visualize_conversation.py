"""Turn a Claude Code JSONL transcript into a browsable index.html."""
from __future__ import annotations

import os
from pathlib import Path
from typing import List, NoReturn, Optional, Tuple

import typer
from dotenv import load_dotenv

from locate_transcript import TranscriptNotFoundError, find_latest_conversation
from render_transcript_html import generate_html, load_render_options
from transcript_parser import parse_jsonl

OUTPUT_DIR_ENV = "VISUALIZE_OUTPUT_DIR"
DEFAULT_OUTPUT_DIR = Path("dist")
OUTPUT_FILENAME = "index.html"

app = typer.Typer(add_completion=False, pretty_exceptions_enable=False)


def _fail(message: str) -> NoReturn:
    typer.echo(f"Error: {message}", err=True)
    raise typer.Exit(1)


def resolve_output_dir(argument: Optional[Path]) -> Path:
    if argument is not None:
        return argument
    env_dir = os.environ.get(OUTPUT_DIR_ENV, "").strip()
    if env_dir:
        return Path(env_dir)
    return DEFAULT_OUTPUT_DIR


def resolve_paths(paths: List[Path], projects_dir: Optional[Path] = None) -> Tuple[Path, Path]:
    """Explicit mode with two paths, otherwise discover the newest transcript."""
    if len(paths) >= 2:
        return paths[0], paths[1]
    input_file = find_latest_conversation(projects_dir=projects_dir)
    typer.echo(f"\U0001F4DD Using session: {input_file.stem}")
    return input_file, resolve_output_dir(paths[0] if paths else None)


@app.command()
def visualize(
    paths: Optional[List[Path]] = typer.Argument(
        None,
        help="INPUT.jsonl OUTPUT_DIR, or just OUTPUT_DIR to use the latest transcript for this directory.",
        show_default=False,
    ),
    config: Optional[Path] = typer.Option(None, "--config", help="YAML file with render options."),
    markdown: Optional[bool] = typer.Option(
        None, "--markdown/--no-markdown", help="Render assistant text as Markdown.", show_default=False
    ),
    title: Optional[str] = typer.Option(None, help="Document title."),
    projects_dir: Optional[Path] = typer.Option(
        None, "--projects-dir", help="Claude projects directory (default: ~/.claude/projects)."
    ),
) -> None:
    load_dotenv()
    paths = paths or []
    if len(paths) > 2:
        raise typer.BadParameter("expected at most two paths: INPUT.jsonl OUTPUT_DIR", param_hint="PATHS")

    try:
        options = load_render_options(config, markdown=markdown, title=title)
    except (OSError, ValueError, TypeError) as exc:
        _fail(f"failed to load config {config}: {exc}")

    try:
        input_file, output_dir = resolve_paths(paths, projects_dir)
    except TranscriptNotFoundError as exc:
        _fail(f"failed to find conversation log: {exc}")

    try:
        output_dir.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        _fail(f"failed to create output directory: {exc}")

    typer.echo("Parsing JSONL file...")
    try:
        result = parse_jsonl(input_file)
    except OSError as exc:
        _fail(f"failed to parse JSONL: {exc}")

    summary = f"Found {len(result.conversation.entries)} entries"
    if result.skipped_lines:
        summary += f" (skipped {result.skipped_lines} malformed lines)"
    typer.echo(summary)

    typer.echo("Generating HTML...")
    document = generate_html(result.conversation, options)

    output_file = output_dir / OUTPUT_FILENAME
    typer.echo(f"Writing output to {output_file}...")
    try:
        output_file.write_text(document, encoding="utf-8")
    except OSError as exc:
        _fail(f"failed to write HTML: {exc}")

    typer.echo("✓ Successfully generated visualization!")
    typer.echo(f"  Output: {output_file}")


def main() -> None:
    app()


if __name__ == "__main__":
    main()
