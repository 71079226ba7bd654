"""CLI command implementations"""

import json
from pathlib import Path
from typing import Annotated, Optional

import typer

from mdnav.config import Settings, load_config
from mdnav.core.navigation.builder import build_breadcrumbs, filter_by_category, path_titles, search_navigation
from mdnav.core.pipeline import make_generator, run_navigation, run_render, run_scan, toc_options


def _fail(msg: str, cause: Exception = None) -> None:
    """Print a user-friendly error to stderr and exit 1."""
    typer.echo(f"Error: {msg}", err=True)
    if cause:
        typer.echo(f"  {cause}", err=True)
    raise typer.Exit(1)


def _settings(overrides: dict = None) -> Settings:
    """Load config with standard CLI error handling."""
    try:
        return load_config(overrides=overrides)
    except ValueError as e:
        _fail(str(e))


def scan_cmd(
    path: Annotated[Optional[str], typer.Argument(help="Content directory (defaults to content_dir)")] = None,
    ):
    """List every document and category found under path as JSON."""
    settings = _settings(overrides={"content_dir": path})
    result = run_scan(settings.content_dir)
    typer.echo(result.model_dump_json(indent=2))


def nav_cmd(
    path: Annotated[Optional[str], typer.Argument(help="Content directory (defaults to content_dir)")] = None,
    grouped: Annotated[Optional[str], typer.Option("--grouped-category", help="Category nested into groups")] = None,
    category: Annotated[Optional[str], typer.Option("--category", help="Only show this category")] = None,
    query: Annotated[Optional[str], typer.Option("--search", help="Pages whose title or tags contain this text")] = None,
    ):
    """Build the navigation tree as JSON; --search prints matching pages with breadcrumbs instead."""
    settings = _settings(overrides={"content_dir": path, "grouped_category": grouped})
    nav = run_navigation(settings.content_dir, settings)
    if category:
        nav = filter_by_category(nav, category)

    if query is None:
        typer.echo(nav.model_dump_json(indent=2))
        return

    titles = path_titles(nav)
    hits = [
        {
            "title": page.title,
            "path": page.path,
            "breadcrumbs": [c.model_dump() for c in build_breadcrumbs(page, titles)],
        }
        for page in search_navigation(nav, query)
    ]
    typer.echo(json.dumps(hits, indent=2))


def toc_cmd(
    file: Annotated[str, typer.Argument(help="Markdown file")],
    min_level: Annotated[Optional[int], typer.Option("--min-level", help="Shallowest heading level")] = None,
    max_level: Annotated[Optional[int], typer.Option("--max-level", help="Deepest heading level")] = None,
    ):
    """Print a document's table of contents (headings, tree, flat) as JSON."""
    settings = _settings(overrides={"toc_min_level": min_level, "toc_max_level": max_level})
    source = Path(file)
    try:
        markdown = source.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        _fail(f"Cannot read {file}", e)
    try:
        doc = make_generator(settings).process_document(markdown, toc_options(settings))
    except RuntimeError as e:
        _fail(f"Failed to process {file}", e)
    typer.echo(doc.toc.model_dump_json(indent=2))


def render_cmd(
    path: Annotated[Optional[str], typer.Argument(help="File or directory to render (defaults to content_dir)")] = None,
    out: Annotated[Optional[str], typer.Option("--out-dir", help="Output directory")] = None,
    parser: Annotated[Optional[str], typer.Option("--parser-config", help="MarkdownIt preset name")] = None,
    workers: Annotated[Optional[int], typer.Option("--workers", help="Render worker threads")] = None,
    ):
    """Render documents to HTML with heading anchors and TOCs, plus a .toc.json per document."""
    settings = _settings(overrides={
        "content_dir": path, "output_dir": out, "parser_config": parser, "workers": workers,
    })
    output_dir = Path(settings.output_dir)
    try:
        results = run_render(settings.content_dir, settings, output_dir)
    except RuntimeError as e:
        _fail(str(e))
    for src, html_file in results:
        typer.echo(f"  {src} -> {html_file}")
    typer.echo(f"Rendered {len(results)} document(s) to {output_dir}/")
