"""
Pytest configuration and shared fixtures.

The `corpus_dir` fixture writes a small guidelines corpus covering every
document type, a malformed metadata block and a file without one.
"""

import threading
from pathlib import Path

import pytest

from guidelines.api.engine import QueryEngine
from guidelines.contracts.config import SourceConfig
from guidelines.errors import DocumentNotFoundError
from guidelines.sources.base import DocumentSource, SourceEntry

CORPUS = {
    "README.md": """# Overview

Entry point for the engineering handbook.
""",
    "adr/0001-x.md": """---
type: ADR
status: Accepted
category: architecture
tags: [mcp, protocol]
---
# Use MCP for Tooling

## Context

Agents need a shared protocol for reading the handbook.
""",
    "adr/0002-y.md": """---
type: ADR
status: Proposed
category: architecture
---
# Adopt Event Sourcing

## Context

Audit trails are hard to reconstruct.
""",
    "adr/0003-z.md": """# Retire XML Configuration

## Status

Superseded by ADR-0001

## Decision

Stop shipping XML configuration files.
""",
    "guidelines/csharp-naming.md": """---
title: C# Naming Conventions
type: CodingGuideline
language: C#
tags: naming, csharp
owner: platform-team
---
# Naming

Use PascalCase for public members and camelCase for locals.
""",
    "guidelines/null-checks.md": """# Null Checks

Always validate arguments at public boundaries.
""",
    "recommendations/broken.md": """---
title: [unclosed
---
# Broken Metadata

This file is still indexed.
""",
    "style/typescript-style.md": """---
type: StyleGuide
---
# TypeScript Style Guide

Prefer `const` and explicit return types.
""",
}


def write_corpus(root: Path, files: dict[str, str]) -> Path:
    for rel_path, content in files.items():
        path = root / rel_path
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
    return root


@pytest.fixture
def corpus_dir(tmp_path):
    """Corpus root with the standard test documents."""
    return write_corpus(tmp_path / "docs", CORPUS)


@pytest.fixture
def source_config(corpus_dir):
    return SourceConfig(source_type="local", base_path=str(corpus_dir))


@pytest.fixture
def engine(source_config):
    with QueryEngine.from_config(source_config) as engine:
        yield engine


class FakeSource(DocumentSource):
    """
    In-memory source for exercising the build state machine.

    `gate` blocks `list_paths` until set; `started` is set when a listing
    begins; `error` is raised from `list_paths` when not None.
    """

    def __init__(self, files: dict[str, str] | None = None):
        self.files = dict(files or {})
        self.error: Exception | None = None
        self.gate = threading.Event()
        self.gate.set()
        self.started = threading.Event()
        self.list_calls = 0
        self._lock = threading.Lock()

    def describe(self) -> str:
        return "fake:memory"

    def list_paths(self) -> list[str]:
        with self._lock:
            self.list_calls += 1
        self.started.set()
        self.gate.wait(timeout=5)
        if self.error is not None:
            raise self.error
        return sorted(self.files)

    def fetch_entry(self, path: str) -> SourceEntry:
        if path not in self.files:
            raise DocumentNotFoundError(path)
        return SourceEntry(path=path, content=self.files[path])


@pytest.fixture
def fake_source():
    return FakeSource(
        {
            "adr/0001-x.md": CORPUS["adr/0001-x.md"],
            "guidelines/null-checks.md": CORPUS["guidelines/null-checks.md"],
        }
    )
