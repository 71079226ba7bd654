"""Root test configuration: a small documentation tree shared by integration tests"""

from pathlib import Path

import pytest


SAMPLE_TREE = {
    "index.md": """\
---
title: Welcome
priority: 1
---

# Welcome

Start here.
""",
    "dev/index.md": """\
---
title: Developer Guide
---

# Developer Guide
""",
    "dev/setup.md": """\
---
title: Setup
priority: 1
tags: [install]
---

<!-- TOC -->

# Setup

## Requirements

## Install

### From source
""",
    "dev/testing.md": "# Testing\n\n## Unit\n\n## Unit\n",
    "build/done_phase1.md": """\
---
title: Phase 1
sub_group: phases
---

# Phase 1
""",
    "build/done_admin.md": """\
---
title: Admin Plan
---

# Admin Plan
""",
    "build/todo_urgent_fix.md": "# Fix\n",
}


def write_tree(root: Path, files: dict[str, str]) -> Path:
    for rel, text in files.items():
        p = root / rel
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_text(text, encoding="utf-8")
    return root


@pytest.fixture(name="content_dir")
def content_dir_fixture(tmp_path):
    """A docs tree with root pages, a flat 'dev' category, and a grouped 'build' category."""
    return write_tree(tmp_path / "docs", SAMPLE_TREE)
