"""Link rewriter: serialises a link occurrence in a destination syntax."""

from __future__ import annotations

import logging
import re
from collections.abc import Sequence
from urllib.parse import quote

from citewiki.core.models import Document, FinalLinkFormat, LinkKind
from citewiki.links.paths import format_path, strip_markdown_suffix
from citewiki.links.resolver import decode_link

logger = logging.getLogger(__name__)

# Emitted as the wiki file name when no document name matches the target
UNRESOLVED_PLACEHOLDER = "???????????"

# "Title - Subtitle": only the title is kept as citation alt text
_TITLE_SEPARATOR = re.compile(r"\s*-\s")

# Characters the note editor percent-encodes in link destinations
_HOST_ENCODED_CHARS = re.compile(r"[\\\x00\x08\x0B\x0C\x0E-\x1F ]")


def encode_uri(text: str) -> str:
    """Percent-encode ``text`` the way the note editor does internally.

    Only backslash, space and a handful of control characters are encoded;
    everything else, including non-ASCII text, stays literal.
    """
    return _HOST_ENCODED_CHARS.sub(lambda m: quote(m.group(0), safe=""), text)


def encode_block_ref(block_ref: str) -> str:
    """Encode a heading or block reference, keeping a leading ``^`` literal."""
    if block_ref.startswith("^"):
        return "^" + encode_uri(block_ref[1:])
    return encode_uri(block_ref)


class LinkRewriter:
    """Renders replacement link text against a snapshot of the vault."""

    def __init__(self, documents: Sequence[Document]) -> None:
        self._documents = list(documents)

    def render(
        self,
        dest: LinkKind,
        target: str,
        auxiliary: str,
        source: Document,
        resolved: Document | None,
        final_format: FinalLinkFormat = FinalLinkFormat.NOT_CHANGE,
    ) -> str:
        """Build the replacement text for a link.

        Args:
            dest: Kind of link to produce.
            target: Link target as written in the source text.
            auxiliary: Alt text or block reference, possibly empty.
            source: Document containing the link.
            resolved: Document the target resolves to, if any.
            final_format: Preferred path shape for resolved targets.

        Returns:
            The serialised link.
        """
        final_link = target
        if resolved is not None and final_format != FinalLinkFormat.NOT_CHANGE:
            final_link = format_path(resolved, source, final_format, self._documents)

        if dest == LinkKind.WIKI_LINK:
            return self._wiki_link(final_link, auxiliary, resolved)
        if dest == LinkKind.CITATION_LINK:
            return self._citation_link(final_link, auxiliary, resolved)
        if dest == LinkKind.WIKI_TRANSCLUSION:
            return f"[[{decode_link(final_link)}]]"
        return self._citation_transclusion(final_link, auxiliary, resolved)

    def _wiki_link(self, final_link: str, auxiliary: str, resolved: Document | None) -> str:
        alt = ""
        if auxiliary and auxiliary != decode_link(final_link):
            if resolved is None or decode_link(auxiliary) != resolved.basename:
                alt = "|" + auxiliary

        match = next((doc for doc in self._documents if doc.name.startswith(final_link)), None)
        if match is None:
            logger.warning("No document name starts with %r, emitting placeholder", final_link)
            file_link = UNRESOLVED_PLACEHOLDER
        else:
            file_link = strip_markdown_suffix(match.name)
        return f"[[{file_link}{alt}]]"

    @staticmethod
    def _citation_link(final_link: str, auxiliary: str, resolved: Document | None) -> str:
        if auxiliary:
            alt = auxiliary
        else:
            alt = resolved.basename if resolved is not None else final_link
        alt = _TITLE_SEPARATOR.split(alt, maxsplit=1)[0].strip()
        return f"[{alt}]"

    @staticmethod
    def _citation_transclusion(final_link: str, auxiliary: str, resolved: Document | None) -> str:
        extension = ".md" if resolved is not None and resolved.is_markdown else ""
        # TODO: append "#" + encoded ref once embeds in citation syntax accept it
        logger.debug("Dropping block reference %r from %r", encode_block_ref(auxiliary), final_link)
        return f"[{encode_uri(final_link)}{extension}]"
