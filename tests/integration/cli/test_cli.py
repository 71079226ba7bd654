"""Integration tests for the mdnav CLI commands"""

import json

import pytest
from typer.testing import CliRunner

from mdnav.cli.cli import app


@pytest.fixture(name="runner")
def runner_fixture(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    return CliRunner()


def test_help(runner):
    """--help lists the commands."""
    result = runner.invoke(app, ["--help"])
    assert result.exit_code == 0
    for name in ("scan", "nav", "toc", "render"):
        assert name in result.output


def test_scan_cmd(runner, content_dir):
    """scan prints files and categories as JSON, without bodies."""
    result = runner.invoke(app, ["scan", str(content_dir)])
    assert result.exit_code == 0, result.output
    data = json.loads(result.output)
    assert len(data["files"]) == 7
    assert "body" not in data["files"][0]
    assert data["categories"]["dev"]["title"] == "Developer Guide"


def test_nav_cmd(runner, content_dir):
    """nav prints the navigation tree with grouped build pages."""
    result = runner.invoke(app, ["nav", str(content_dir)])
    assert result.exit_code == 0, result.output
    data = json.loads(result.output)
    assert data["total_files"] == 7
    build = next(c for c in data["categories"] if c["category"] == "build")
    assert {g["type"] for g in build["children"]} == {"group"}


def test_nav_cmd_category_filter(runner, content_dir):
    """--category narrows the tree to one category."""
    result = runner.invoke(app, ["nav", str(content_dir), "--category", "dev"])
    data = json.loads(result.output)
    assert [c["category"] for c in data["categories"]] == ["dev"]
    assert data["root_files"] == []


def test_nav_cmd_search(runner, content_dir):
    """--search prints matching pages with breadcrumbs."""
    result = runner.invoke(app, ["nav", str(content_dir), "--search", "install"])
    assert result.exit_code == 0, result.output
    hits = json.loads(result.output)
    assert [h["title"] for h in hits] == ["Setup"]
    assert [c["title"] for c in hits[0]["breadcrumbs"]] == ["Home", "Developer Guide", "Setup"]


def test_toc_cmd(runner, content_dir):
    """toc prints the heading tree of one file."""
    result = runner.invoke(app, ["toc", str(content_dir / "dev" / "setup.md"), "--max-level", "2"])
    assert result.exit_code == 0, result.output
    data = json.loads(result.output)
    assert [h["id"] for h in data["headings"]] == ["setup", "requirements", "install"]


def test_toc_cmd_missing_file(runner, tmp_path):
    """A missing file exits 1 with an error message."""
    result = runner.invoke(app, ["toc", str(tmp_path / "nope.md")])
    assert result.exit_code == 1
    assert "Error: Cannot read" in result.output


def test_render_cmd(runner, content_dir, tmp_path):
    """render writes HTML and TOC JSON for each document."""
    out = tmp_path / "dist"
    result = runner.invoke(app, ["render", str(content_dir), "--out-dir", str(out)])
    assert result.exit_code == 0, result.output
    assert "Rendered 7 document(s)" in result.output
    assert (out / "dev" / "setup.html").exists()
    assert (out / "build" / "done_admin.toc.json").exists()


def test_invalid_config_exits(runner, tmp_path, content_dir):
    """An invalid config.yaml is reported and exits 1."""
    (tmp_path / "config.yaml").write_text("key: [unclosed\n")
    result = runner.invoke(app, ["scan", str(content_dir)])
    assert result.exit_code == 1
    assert "Invalid config.yaml" in result.output
