"""Integration test: full conversion flow over a vault on disk."""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from citewiki.config import CitewikiConfig
from citewiki.container import Container
from citewiki.converter import LinkConverter
from citewiki.core.models import Document, FinalLinkFormat, LinkFormat

TODAY = Document.from_path("notes/today.md")
OLD_TIME_NS = 1_500_000_000 * 1_000_000_000


@pytest.fixture()
def converter(vault_container: Container) -> LinkConverter:
    """Converter wired with the real filesystem adapters."""
    return LinkConverter(vault_container)


class TestConversionFlow:
    """End-to-end: read, scan, resolve, rewrite, write."""

    @pytest.mark.asyncio
    async def test_round_trip(self, converter: LinkConverter, vault: Path) -> None:
        document = vault / "notes" / "today.md"

        report = await converter.convert_document(TODAY, LinkFormat.CITATION)
        assert report.changed is True
        assert document.read_text() == "Reading [@smith2020] today.\n"

        report = await converter.convert_document(TODAY, LinkFormat.WIKI)
        assert report.changed is True
        assert document.read_text() == "Reading [[@smith2020]] today.\n"

    @pytest.mark.asyncio
    async def test_second_conversion_is_a_no_op(self, converter: LinkConverter, vault: Path) -> None:
        await converter.convert_document(TODAY, LinkFormat.CITATION)
        mtime = (vault / "notes" / "today.md").stat().st_mtime_ns

        report = await converter.convert_document(TODAY, LinkFormat.CITATION)

        assert report.changed is False
        assert (vault / "notes" / "today.md").stat().st_mtime_ns == mtime

    @pytest.mark.asyncio
    async def test_mixed_document(self, converter: LinkConverter, vault: Path) -> None:
        document = vault / "notes" / "today.md"
        document.write_text(
            "Intro [[@doe2019 - Deep Notes]].\n"
            "Quote [[@smith2020#^k2]] and [@smith2020].\n"
            "Web [@https://example.com] stays.\n"
        )

        report = await converter.convert_document(TODAY, LinkFormat.CITATION)

        assert report.rewritten == 2
        assert document.read_text() == (
            "Intro [@doe2019].\n"
            "Quote [@smith2020.md] and [@smith2020].\n"
            "Web [@https://example.com] stays.\n"
        )

    @pytest.mark.asyncio
    async def test_keep_mtime(self, vault: Path, vault_container: Container) -> None:
        document = vault / "notes" / "today.md"
        os.utime(document, ns=(OLD_TIME_NS, OLD_TIME_NS))
        vault_container.config = CitewikiConfig(keep_mtime=True)

        await LinkConverter(vault_container).convert_document(TODAY, LinkFormat.CITATION)

        assert document.read_text() == "Reading [@smith2020] today.\n"
        assert document.stat().st_mtime_ns == OLD_TIME_NS

    @pytest.mark.asyncio
    async def test_reformat_relative(self, converter: LinkConverter, vault: Path) -> None:
        document = vault / "notes" / "today.md"
        document.write_text("See [[@smith2020#^b]].\n")

        await converter.convert_links_to_preferred_format(TODAY, FinalLinkFormat.RELATIVE_PATH)
        assert document.read_text() == "See [[../refs/@smith2020]].\n"

    @pytest.mark.asyncio
    async def test_shortest_path_with_duplicate_names(
        self, converter: LinkConverter, vault: Path
    ) -> None:
        (vault / "archive").mkdir()
        (vault / "archive" / "@smith2020.md").write_text("# Old copy\n")
        document = vault / "notes" / "today.md"
        document.write_text("See [[@smith2020#^b]].\n")

        await converter.convert_links_to_preferred_format(TODAY, FinalLinkFormat.SHORTEST_PATH)

        assert document.read_text() == "See [[refs/@smith2020]].\n"

    @pytest.mark.asyncio
    async def test_active_document_is_newest(self, converter: LinkConverter, vault: Path) -> None:
        for path in vault.rglob("*"):
            if path.is_file():
                os.utime(path, ns=(OLD_TIME_NS, OLD_TIME_NS))
        (vault / "topics" / "Topic.md").write_text("About [[@smith2020]].\n")

        report = await converter.convert_active_document(LinkFormat.CITATION)

        assert report.path == "topics/Topic.md"
        assert (vault / "topics" / "Topic.md").read_text() == "About [@smith2020].\n"
