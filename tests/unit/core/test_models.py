"""Tests for core domain models."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from citewiki.core.models import (
    ConversionReport,
    Document,
    FinalLinkFormat,
    LinkKind,
    LinkOccurrence,
)


class TestDocument:
    """Tests for Document model."""

    def test_from_path(self) -> None:
        document = Document.from_path("refs/@smith2020.md")
        assert document.name == "@smith2020.md"
        assert document.basename == "@smith2020"
        assert document.extension == "md"
        assert document.folder == "refs"
        assert document.is_markdown

    def test_from_path_at_root(self) -> None:
        document = Document.from_path("index.md")
        assert document.folder == ""

    def test_from_path_without_extension(self) -> None:
        document = Document.from_path("notes/README")
        assert document.extension == ""
        assert document.basename == "README"
        assert not document.is_markdown

    def test_from_path_with_dots_in_name(self) -> None:
        document = Document.from_path("v1.2 notes.md")
        assert document.basename == "v1.2 notes"
        assert document.extension == "md"

    def test_from_path_normalises_separators(self) -> None:
        assert Document.from_path("\\a\\b.md").path == "a/b.md"

    def test_dotfile(self) -> None:
        document = Document.from_path(".hidden")
        assert document.basename == ".hidden"
        assert document.extension == ""


class TestLinkOccurrence:
    """Tests for LinkOccurrence model."""

    def test_defaults(self) -> None:
        occurrence = LinkOccurrence(kind=LinkKind.WIKI_LINK, raw_text="[[@a]]", target="@a")
        assert occurrence.auxiliary == ""
        assert occurrence.source_path == ""

    def test_is_immutable(self) -> None:
        occurrence = LinkOccurrence(kind=LinkKind.WIKI_LINK, raw_text="[[@a]]", target="@a")
        with pytest.raises(ValidationError):
            occurrence.target = "@b"  # type: ignore[misc]


class TestEnums:
    """Tests for link enums."""

    def test_transclusion_kinds(self) -> None:
        assert LinkKind.WIKI_TRANSCLUSION.is_transclusion
        assert LinkKind.CITATION_TRANSCLUSION.is_transclusion
        assert not LinkKind.WIKI_LINK.is_transclusion
        assert not LinkKind.CITATION_LINK.is_transclusion

    def test_path_modes_exclude_not_change(self) -> None:
        assert FinalLinkFormat.NOT_CHANGE not in FinalLinkFormat.path_modes()
        assert len(FinalLinkFormat.path_modes()) == 3

    def test_values(self) -> None:
        assert FinalLinkFormat("shortest-path") == FinalLinkFormat.SHORTEST_PATH
        assert LinkKind("citation_transclusion") == LinkKind.CITATION_TRANSCLUSION


class TestConversionReport:
    """Tests for ConversionReport model."""

    def test_defaults(self) -> None:
        report = ConversionReport()
        assert report.path is None
        assert report.changed is False
        assert report.notice is None
