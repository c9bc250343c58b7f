"""Tests for QueryEngine over a local corpus."""

import pytest

from guidelines.api.engine import QueryEngine
from guidelines.contracts.config import SourceConfig
from guidelines.contracts.document import DocumentType
from guidelines.corpus.refresh import CatalogState
from guidelines.errors import DuplicateKeyError, SourceUnavailableError


class TestQueries:
    """Test query operations"""

    def test_all_summaries(self, engine):
        summaries = engine.get_all_summaries()

        assert [s.path for s in summaries] == [
            "README.md",
            "adr/0001-x.md",
            "adr/0002-y.md",
            "adr/0003-z.md",
            "guidelines/csharp-naming.md",
            "guidelines/null-checks.md",
            "recommendations/broken.md",
            "style/typescript-style.md",
        ]

    def test_malformed_metadata_still_listed(self, engine):
        ids = {s.id for s in engine.get_all_summaries()}
        broken = engine.get_by_id("recommendations-broken")

        assert "recommendations-broken" in ids
        assert broken.parse_warning is not None
        assert broken.title == "Broken Metadata"
        assert broken.type is DocumentType.RECOMMENDATION

    def test_invalid_utf8_file_still_listed(self, engine, corpus_dir):
        (corpus_dir / "guidelines" / "cafe.md").write_bytes(b"# Caf\xe9 rules\n")

        paths = [s.path for s in engine.get_all_summaries()]
        doc = engine.get_by_path("guidelines/cafe.md")

        assert "guidelines/cafe.md" in paths
        assert len(paths) == 9
        assert doc.title == "Caf\ufffd rules"
        assert "not valid UTF-8" in doc.parse_warning
        assert engine.status().state is CatalogState.READY

    def test_lookup_round_trip(self, engine):
        for doc in engine.get_all_documents():
            assert engine.get_by_id(doc.id) == doc
            assert engine.get_by_path(doc.path) == doc

    def test_lookup_misses_return_none(self, engine):
        assert engine.get_by_id("nope") is None
        assert engine.get_by_path("nope.md") is None

    def test_adrs_by_status(self, engine):
        accepted = engine.get_adrs_by_status("Accepted")
        superseded = engine.get_adrs_by_status("Superseded")

        assert [d.path for d in accepted] == ["adr/0001-x.md"]
        assert [d.path for d in superseded] == ["adr/0003-z.md"]

    def test_by_type_ordered_by_path(self, engine):
        adrs = engine.get_by_type("ADR")

        assert [d.path for d in adrs] == [
            "adr/0001-x.md",
            "adr/0002-y.md",
            "adr/0003-z.md",
        ]
        assert all(d.type is DocumentType.ADR for d in adrs)

    def test_by_category(self, engine):
        assert [d.path for d in engine.get_by_category("architecture")] == [
            "adr/0001-x.md",
            "adr/0002-y.md",
        ]
        assert [d.path for d in engine.get_by_category("adr")] == ["adr/0003-z.md"]

    def test_by_language(self, engine):
        assert [d.path for d in engine.get_by_language("c#")] == [
            "guidelines/csharp-naming.md"
        ]

    def test_style_guide_by_language(self, engine):
        guide = engine.get_style_guide_by_language("TypeScript")

        assert guide is not None
        assert guide.title == "TypeScript Style Guide"
        assert engine.get_style_guide_by_language("C#") is None

    @pytest.mark.parametrize("term", ["", "   "])
    def test_blank_search_is_empty(self, engine, term):
        assert engine.search(term) == []

    def test_search_is_case_insensitive(self, engine):
        lower = engine.search("null")

        assert [d.title for d in lower] == ["Null Checks"]
        assert engine.search("NULL") == lower

    def test_search_matches_tags(self, engine):
        assert [d.path for d in engine.search("protocol")] == ["adr/0001-x.md"]

    def test_by_tags(self, engine):
        docs = engine.get_by_tags(["NAMING", "mcp"])

        assert [d.path for d in docs] == [
            "adr/0001-x.md",
            "guidelines/csharp-naming.md",
        ]
        assert engine.get_by_tags(["kubernetes"]) == []

    def test_list_categories(self, engine):
        assert engine.list_categories() == [
            "adr",
            "architecture",
            "guidelines",
            "recommendations",
            "style",
        ]

    def test_search_with_excerpts(self, engine):
        (hit,) = engine.search_with_excerpts("protocol")

        assert hit.document.path == "adr/0001-x.md"
        assert hit.match_count == 2
        assert hit.excerpts == (
            "Agents need a shared protocol for reading the handbook.",
        )

    def test_search_with_excerpts_matches_plain_search(self, engine):
        hits = engine.search_with_excerpts("the")

        assert [h.document for h in hits] == engine.search("the")

    def test_statistics(self, engine):
        stats = engine.statistics()

        assert stats["total_documents"] == 8
        assert stats["documents_by_type"]["ADR"] == 3
        assert stats["parse_warnings"] == 1


class TestCaching:
    """Test generation reuse, refresh and invalidation"""

    def test_queries_are_idempotent(self, engine):
        first = engine.get_all_summaries()
        second = engine.get_all_summaries()

        assert first == second
        assert engine.status().generation == 1

    def test_first_query_builds(self, engine):
        assert engine.status().state is CatalogState.UNBUILT

        engine.get_all_summaries()

        assert engine.status().state is CatalogState.READY

    def test_new_files_invisible_until_refresh(self, engine, corpus_dir):
        engine.get_all_summaries()
        (corpus_dir / "guidelines" / "logging.md").write_text("# Logging\n")

        assert engine.get_by_path("guidelines/logging.md") is None
        assert engine.refresh() == 9
        assert engine.get_by_path("guidelines/logging.md") is not None
        assert engine.status().generation == 2

    def test_invalidate_rebuilds_on_next_query(self, engine, corpus_dir):
        engine.get_all_summaries()
        (corpus_dir / "README.md").unlink()

        engine.invalidate()

        assert len(engine.get_all_summaries()) == 7
        assert engine.status().generation == 2

    def test_duplicate_id_keeps_previous_generation(self, engine, corpus_dir):
        engine.get_all_summaries()
        (corpus_dir / "other").mkdir()
        (corpus_dir / "other" / "dup.md").write_text("---\nid: adr-0001-x\n---\n# Dup")

        with pytest.raises(DuplicateKeyError):
            engine.refresh()

        status = engine.status()
        assert status.state is CatalogState.STALE_DEGRADED
        assert status.generation == 1
        assert "adr-0001-x" in status.last_error
        assert engine.get_by_id("adr-0001-x").path == "adr/0001-x.md"
        assert len(engine.get_all_summaries()) == 8

    def test_missing_corpus_fails(self, tmp_path):
        config = SourceConfig(source_type="local", base_path=str(tmp_path / "nope"))

        with QueryEngine.from_config(config) as engine:
            with pytest.raises(SourceUnavailableError):
                engine.get_all_summaries()

            assert engine.status().state is CatalogState.FAILED
