"""Shared fixtures for core unit tests"""

import pytest

from mdnav.core.models import FileRecord
from mdnav.core.render import make_parser


SAMPLE_MD = """\
# Title

Intro paragraph with **bold** text.

## Install

```bash
# not a heading
pip install mdnav
```

### From source {#source}

## Install

## Usage {data-toc="How to use"}
"""


def make_record(path: str, file_category: str = "build", file_priority: int = 999, **frontmatter) -> FileRecord:
    """FileRecord in file_category; every keyword, category included, lands in raw_frontmatter."""
    return FileRecord(
        path=path,
        title=frontmatter.get("title", path),
        category=file_category,
        priority=file_priority,
        raw_frontmatter=frontmatter,
    )


@pytest.fixture(name="sample_md")
def sample_md_fixture():
    return SAMPLE_MD


@pytest.fixture(name="parser")
def parser_fixture():
    return make_parser()


@pytest.fixture(name="sample_tokens")
def sample_tokens_fixture(parser):
    return parser.parse(SAMPLE_MD)


@pytest.fixture(name="record")
def record_fixture():
    """Factory building a FileRecord from a path and frontmatter keywords."""
    return make_record
