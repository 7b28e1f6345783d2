"""Link scanner: finds and classifies link occurrences in note text.

Scanning runs in two passes. The span pass walks the text once per link
family and cuts out bracketed spans:

- wiki family: ``[[@`` up to the first ``]]`` on the same line,
- citation family: ``[@`` (not preceded by ``[``) up to the first ``]`` on
  the same line that is not followed by another ``]``, extended over a
  directly following ``(File#ref)`` destination.

The classification pass then decides, per span, between the plain and the
transclusion kind of the family and extracts the target and auxiliary text.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from enum import Enum

from citewiki.core.models import LinkKind, LinkOccurrence

logger = logging.getLogger(__name__)

_WIKI_OPEN = "[[@"
_WIKI_CLOSE = "]]"
_CITATION_OPEN = "[@"
_REF_SEPARATOR = "#"
_WEB_SCHEME = "http"


class LinkFamily(str, Enum):
    """Bracket family a span was cut from."""

    WIKI = "wiki"
    CITATION = "citation"


def scan(text: str, source_path: str = "") -> list[LinkOccurrence]:
    """Find every convertible link in ``text``.

    Wiki-family occurrences come first, then citation-family ones, each
    group in text order. External (``http``) links are left out.
    """
    occurrences: list[LinkOccurrence] = []
    for family, spans in (
        (LinkFamily.WIKI, _wiki_spans(text)),
        (LinkFamily.CITATION, _citation_spans(text)),
    ):
        for span in spans:
            occurrence = classify(span, family, source_path)
            if occurrence is not None:
                occurrences.append(occurrence)

    logger.debug("Found %d link(s) in %s", len(occurrences), source_path or "<text>")
    return occurrences


def classify(span: str, family: LinkFamily, source_path: str = "") -> LinkOccurrence | None:
    """Classify one bracketed span into a LinkOccurrence.

    Returns None for external links and for spans with no link text.
    """
    if family == LinkFamily.WIKI:
        transclusion_kind, plain_kind = LinkKind.WIKI_TRANSCLUSION, LinkKind.WIKI_LINK
        reference = _wiki_reference(span)
        link_text = _cut_link_text(span[2:])
    else:
        transclusion_kind, plain_kind = LinkKind.CITATION_TRANSCLUSION, LinkKind.CITATION_LINK
        reference = _markdown_reference(span)
        link_text = _cut_link_text(span[1:])
        if link_text is not None:
            link_text = link_text.removeprefix("[")

    if reference is not None:
        file_name, block_ref = reference
        if file_name and block_ref:
            if file_name.startswith(_WEB_SCHEME):
                return None
            return LinkOccurrence(
                kind=transclusion_kind,
                raw_text=span,
                target=file_name,
                auxiliary=block_ref,
                source_path=source_path,
            )

    if link_text is None or link_text.startswith(_WEB_SCHEME):
        return None
    return LinkOccurrence(
        kind=plain_kind,
        raw_text=span,
        target=link_text,
        source_path=source_path,
    )


def _line_end(text: str, start: int) -> int:
    end = text.find("\n", start)
    return len(text) if end == -1 else end


def _wiki_spans(text: str) -> Iterator[str]:
    start = text.find(_WIKI_OPEN)
    while start != -1:
        close = text.find(_WIKI_CLOSE, start + len(_WIKI_OPEN), _line_end(text, start))
        if close == -1:
            start = text.find(_WIKI_OPEN, start + 1)
            continue
        end = close + len(_WIKI_CLOSE)
        yield text[start:end]
        start = text.find(_WIKI_OPEN, end)


def _citation_spans(text: str) -> Iterator[str]:
    start = text.find(_CITATION_OPEN)
    while start != -1:
        # "[[@" belongs to the wiki family
        if start > 0 and text[start - 1] == "[":
            start = text.find(_CITATION_OPEN, start + 1)
            continue

        line_end = _line_end(text, start)
        close = text.find("]", start + len(_CITATION_OPEN), line_end)
        while close != -1 and text[close + 1 : close + 2] == "]":
            close = text.find("]", close + 1, line_end)
        if close == -1:
            start = text.find(_CITATION_OPEN, start + 1)
            continue

        end = reference_destination_end(text, close + 1)
        yield text[start:end]
        start = text.find(_CITATION_OPEN, end)


def _cut_link_text(inner: str) -> str | None:
    """Text up to the first ']' or '|', or None if neither occurs."""
    cut = min((i for i in (inner.find("]"), inner.find("|")) if i != -1), default=-1)
    if cut == -1:
        return None
    return inner[:cut]


def reference_destination_end(text: str, end: int) -> int:
    """End of a citation span closing at ``end``, extended over a ``(File#ref)`` destination.

    Returns ``end`` unchanged unless a destination with a non-empty file name
    and reference directly follows on the same line.
    """
    if text[end : end + 1] != "(":
        return end
    destination_end = text.find(")", end, _line_end(text, end))
    if destination_end == -1 or not _is_reference_destination(text[end + 1 : destination_end]):
        return end
    return destination_end + 1


def _is_reference_destination(destination: str) -> bool:
    reference = _split_reference(destination)
    if reference is None:
        return False
    file_name, block_ref = reference
    return bool(file_name and block_ref) and not file_name.startswith(_WEB_SCHEME)


def _split_reference(destination: str) -> tuple[str, str] | None:
    """Split ``File#ref`` into file name (up to the last '#') and ref (after the first)."""
    if _REF_SEPARATOR not in destination:
        return None
    file_name = destination.rpartition(_REF_SEPARATOR)[0]
    block_ref = destination.partition(_REF_SEPARATOR)[2]
    return file_name, block_ref


def _wiki_reference(span: str) -> tuple[str, str] | None:
    """Reference parts of a ``[[File#ref]]`` span."""
    return _split_reference(span[2 : -len(_WIKI_CLOSE)])


def _markdown_reference(span: str) -> tuple[str, str] | None:
    """Reference parts of an embedded ``[Alt](File#ref)`` destination."""
    opener = span.find("](")
    if opener == -1:
        return None
    destination_start = opener + 2
    destination_end = span.find(")", destination_start)
    if destination_end == -1:
        return None
    return _split_reference(span[destination_start:destination_end])
