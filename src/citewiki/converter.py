"""Conversion driver: scan, resolve, rewrite and save one document at a time."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from citewiki.container import Container
from citewiki.core.errors import UnsupportedDocumentError
from citewiki.core.models import (
    ConversionReport,
    Document,
    FinalLinkFormat,
    LinkFormat,
    LinkKind,
    LinkOccurrence,
)
from citewiki.links.paths import format_path
from citewiki.links.resolver import LinkResolver
from citewiki.links.rewriter import LinkRewriter
from citewiki.links.scanner import reference_destination_end, scan

logger = logging.getLogger(__name__)

ACTIVE_NOT_MARKDOWN_NOTICE = "Active file is not a Markdown file"

# (source kind, destination kind) pairs, applied in this order
_CONVERSIONS: dict[LinkFormat, list[tuple[LinkKind, LinkKind]]] = {
    LinkFormat.CITATION: [
        (LinkKind.WIKI_LINK, LinkKind.CITATION_LINK),
        (LinkKind.WIKI_TRANSCLUSION, LinkKind.CITATION_TRANSCLUSION),
    ],
    LinkFormat.WIKI: [
        (LinkKind.CITATION_LINK, LinkKind.WIKI_LINK),
        (LinkKind.CITATION_TRANSCLUSION, LinkKind.WIKI_TRANSCLUSION),
    ],
}

_CITATION_KINDS = (LinkKind.CITATION_LINK, LinkKind.CITATION_TRANSCLUSION)


class LinkConverter:
    """Rewrites the links of vault documents.

    Every call re-reads the document, re-scans it and re-lists the vault;
    the document is written once, at the end, and only if its text changed.
    """

    def __init__(self, container: Container) -> None:
        self._container = container
        self._resolver = LinkResolver(container.link_index)

    async def convert_document(self, document: Document, direction: LinkFormat) -> ConversionReport:
        """Convert links in one document to wiki or citation syntax.

        Raises:
            UnsupportedDocumentError: If the document is not a Markdown note.
        """
        _require_markdown(document)
        store = self._container.document_store
        final_format = self._container.config.final_link_format

        text = await store.read_text(document.path)
        occurrences = scan(text, document.path)
        rewriter = LinkRewriter(store.list_documents())

        new_text = text
        rewritten = 0
        for source_kind, dest_kind in _CONVERSIONS[direction]:
            cursor = 0
            for occurrence in occurrences:
                if occurrence.kind != source_kind:
                    continue
                resolved = self._resolver.resolve(occurrence.target, document.path)
                replacement = rewriter.render(
                    dest_kind,
                    occurrence.target,
                    occurrence.auxiliary,
                    document,
                    resolved,
                    final_format,
                )
                new_text, cursor = substitute(new_text, occurrence, replacement, cursor)
                rewritten += 1
                logger.debug("%s -> %s", occurrence.raw_text, replacement)

        return await self._save(document, text, new_text, len(occurrences), rewritten)

    async def convert_active_document(self, direction: LinkFormat) -> ConversionReport:
        """Convert the active document, or report why it was skipped."""
        document = self._container.document_store.get_active_document()
        if document is None or not document.is_markdown:
            logger.warning(ACTIVE_NOT_MARKDOWN_NOTICE)
            return ConversionReport(
                path=document.path if document else None,
                notice=ACTIVE_NOT_MARKDOWN_NOTICE,
            )
        return await self.convert_document(document, direction)

    async def convert_documents(
        self, documents: Iterable[Document], direction: LinkFormat
    ) -> list[ConversionReport]:
        """Convert several documents in turn; non-Markdown files are reported, not converted."""
        reports = []
        for document in documents:
            if not document.is_markdown:
                reports.append(
                    ConversionReport(path=document.path, notice=f"Not a Markdown file: {document.path}")
                )
                continue
            reports.append(await self.convert_document(document, direction))
        return reports

    async def convert_links_to_preferred_format(
        self, document: Document, path_mode: FinalLinkFormat
    ) -> ConversionReport:
        """Rewrite every resolvable link target of a document into ``path_mode``.

        Links keep their kind; unresolved links are left untouched.

        Raises:
            UnsupportedDocumentError: If the document is not a Markdown note.
            ValueError: If ``path_mode`` is not a path format.
        """
        if path_mode not in FinalLinkFormat.path_modes():
            raise ValueError(f"Not a path format: {path_mode.value}")
        _require_markdown(document)
        store = self._container.document_store

        text = await store.read_text(document.path)
        occurrences = scan(text, document.path)
        documents = store.list_documents()
        rewriter = LinkRewriter(documents)

        new_text = text
        rewritten = 0
        # one cursor per bracket family; each family is scanned in text order
        cursors: dict[bool, int] = {}
        for occurrence in occurrences:
            resolved = self._resolver.resolve(occurrence.target, document.path)
            if resolved is None:
                continue
            link = format_path(resolved, document, path_mode, documents)
            replacement = rewriter.render(
                occurrence.kind, link, occurrence.auxiliary, document, resolved, path_mode
            )
            family = occurrence.kind in _CITATION_KINDS
            new_text, cursors[family] = substitute(
                new_text, occurrence, replacement, cursors.get(family, 0)
            )
            rewritten += 1
            logger.debug("%s -> %s", occurrence.raw_text, replacement)

        return await self._save(document, text, new_text, len(occurrences), rewritten)

    async def _save(
        self, document: Document, text: str, new_text: str, found: int, rewritten: int
    ) -> ConversionReport:
        changed = new_text != text
        if changed:
            await self._container.document_store.write_text(
                document.path, new_text, preserve_mtime=self._container.config.keep_mtime
            )
            logger.info("Rewrote %d link(s) in %s", rewritten, document.path)
        else:
            logger.info("No link changes in %s", document.path)
        return ConversionReport(
            path=document.path, occurrences=found, rewritten=rewritten, changed=changed
        )


def substitute(
    text: str, occurrence: LinkOccurrence, replacement: str, start: int = 0
) -> tuple[str, int]:
    """Replace the first literal occurrence of ``occurrence.raw_text`` at or after ``start``.

    A citation-family match directly preceded by ``[`` is part of a wiki link
    and is skipped, as is a plain citation match that opens a
    ``[@Alt](File#ref)`` transclusion. Returns the new text and the index
    just past the replacement (``start`` unchanged when nothing was replaced).
    """
    raw = occurrence.raw_text
    index = text.find(raw, start)
    while index != -1 and _inside_other_link(text, index, occurrence):
        index = text.find(raw, index + 1)
    if index == -1:
        return text, start
    return text[:index] + replacement + text[index + len(raw) :], index + len(replacement)


def _inside_other_link(text: str, index: int, occurrence: LinkOccurrence) -> bool:
    if occurrence.kind not in _CITATION_KINDS:
        return False
    if index > 0 and text[index - 1] == "[":
        return True
    if occurrence.kind.is_transclusion:
        return False
    end = index + len(occurrence.raw_text)
    return reference_destination_end(text, end) != end


def _require_markdown(document: Document) -> None:
    if not document.is_markdown:
        raise UnsupportedDocumentError(document.path)
