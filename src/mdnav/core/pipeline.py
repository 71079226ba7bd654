"""Pipeline step functions: scan, navigation, and render orchestration"""

import logging
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

from mdnav.config import Settings
from mdnav.core.cache import MemoryCache, NullCache
from mdnav.core.models import NavigationTree, ScanResult
from mdnav.core.navigation.builder import build_navigation
from mdnav.core.render import MarkdownItRenderer
from mdnav.core.scan import discover_files, scan_directory
from mdnav.core.toc.generator import TocGenerator, TocOptions


logger = logging.getLogger(__name__)


def run_scan(path: str) -> ScanResult:
    """Scan path for markdown documents."""
    return scan_directory(Path(path))


def run_navigation(path: str, settings: Settings) -> NavigationTree:
    """Scan path and build its navigation tree, grouping settings.grouped_category."""
    return build_navigation(run_scan(path), settings.grouped_category or None, settings.rules)


def toc_options(settings: Settings) -> TocOptions:
    return TocOptions(
        min_level=settings.toc_min_level,
        max_level=settings.toc_max_level,
        title=settings.toc_title,
    )


def make_generator(settings: Settings) -> TocGenerator:
    cache = MemoryCache() if settings.cache_enabled else NullCache()
    return TocGenerator(MarkdownItRenderer(settings.parser_config), cache)


def _render_one(
    generator: TocGenerator,
    options: TocOptions,
    root: Path,
    source: Path,
    output_dir: Path,
    ) -> tuple[Path, Path]:
    try:
        doc = generator.process_document(source.read_text(encoding="utf-8"), options)
        rel = source.relative_to(root)
        html_path = output_dir / rel.with_suffix(".html")
        html_path.parent.mkdir(parents=True, exist_ok=True)
        html_path.write_text(doc.html, encoding="utf-8")
        html_path.with_suffix(".toc.json").write_text(doc.toc.model_dump_json(indent=2), encoding="utf-8")
    except Exception as e:
        raise RuntimeError(f"Failed to render {source}: {e}") from e
    return source, html_path


def run_render(
    path: str,
    settings: Settings,
    output_dir: Path,
    ) -> list[tuple[Path, Path]]:
    """Render every document under path to output_dir. Returns (source_path, html_file) pairs.

    Documents are independent and rendered on a thread pool; results keep
    the sorted discovery order.
    """
    src = Path(path)
    root = src if src.is_dir() else src.parent
    files = discover_files(src) if src.exists() else []
    output_dir.mkdir(parents=True, exist_ok=True)

    generator = make_generator(settings)
    options = toc_options(settings)
    with ThreadPoolExecutor(max_workers=settings.workers) as pool:
        futures = [pool.submit(_render_one, generator, options, root, f, output_dir) for f in files]
        results = [f.result() for f in futures]
    logger.info("Rendered %d document(s) to %s", len(results), output_dir)
    return results
