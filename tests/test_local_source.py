"""Tests for LocalDocumentSource."""

import threading

import pytest

from guidelines.contracts.config import SourceConfig
from guidelines.errors import (
    BuildCancelledError,
    DocumentNotFoundError,
    SourceUnavailableError,
)
from guidelines.sources.factory import SourceFactory
from guidelines.sources.local import LocalDocumentSource


class TestLocalSource:
    """Test directory enumeration and reads"""

    @pytest.fixture
    def source(self, corpus_dir):
        return LocalDocumentSource(corpus_dir)

    def test_list_paths_sorted_and_relative(self, source):
        paths = source.list_paths()

        assert paths == sorted(paths)
        assert "adr/0001-x.md" in paths
        assert "README.md" in paths
        assert len(paths) == 8

    def test_ignores_non_markdown(self, corpus_dir, source):
        (corpus_dir / "adr" / "diagram.png").write_bytes(b"\x89PNG")
        (corpus_dir / "notes.txt").write_text("not markdown")

        assert len(source.list_paths()) == 8

    def test_uppercase_suffix_is_markdown(self, corpus_dir, source):
        (corpus_dir / "LOUD.MD").write_text("# Loud")

        assert "LOUD.MD" in source.list_paths()

    def test_fetch_entry(self, source):
        entry = source.fetch_entry("guidelines/null-checks.md")

        assert entry.path == "guidelines/null-checks.md"
        assert entry.content.startswith("# Null Checks")
        assert entry.last_modified is not None
        assert entry.last_modified.tzinfo is not None

    def test_fetch_strips_bom(self, corpus_dir, source):
        (corpus_dir / "bom.md").write_bytes("\ufeff# Bom".encode("utf-8"))

        assert source.fetch_entry("bom.md").content == "# Bom"

    def test_fetch_invalid_utf8_is_replaced(self, corpus_dir, source):
        (corpus_dir / "latin1.md").write_bytes(b"# Caf\xe9 rules\n")

        entry = source.fetch_entry("latin1.md")

        assert entry.content == "# Caf\ufffd rules\n"
        assert "not valid UTF-8" in entry.warning

    def test_fetch_valid_file_has_no_warning(self, source):
        assert source.fetch_entry("guidelines/null-checks.md").warning is None

    def test_fetch_missing(self, source):
        with pytest.raises(DocumentNotFoundError) as exc_info:
            source.fetch_entry("missing.md")

        assert exc_info.value.path == "missing.md"

    def test_fetch_outside_root(self, corpus_dir, source):
        (corpus_dir.parent / "secret.md").write_text("# Secret")

        with pytest.raises(DocumentNotFoundError):
            source.fetch_entry("../secret.md")

    def test_missing_base_path(self, tmp_path):
        source = LocalDocumentSource(tmp_path / "nope")

        with pytest.raises(SourceUnavailableError):
            source.list_paths()

    def test_list_entries_yields_every_file(self, source):
        entries = list(source.list_entries())

        assert [e.path for e in entries] == source.list_paths()

    def test_list_entries_honours_cancellation(self, source):
        cancel = threading.Event()
        cancel.set()

        with pytest.raises(BuildCancelledError):
            list(source.list_entries(cancel))

    def test_describe(self, corpus_dir, source):
        assert source.describe() == f"local:{corpus_dir}"


class TestSourceFactory:
    def test_local_config(self, source_config):
        source = SourceFactory.from_config(source_config)

        assert isinstance(source, LocalDocumentSource)

    def test_unvalidated_config_without_base_path(self):
        config = SourceConfig.model_construct(source_type="local", base_path=None)

        with pytest.raises(ValueError, match="base_path"):
            SourceFactory.from_config(config)
