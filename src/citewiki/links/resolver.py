"""Link resolver: maps a link target to the document it refers to."""

from __future__ import annotations

import logging
from urllib.parse import unquote

from citewiki.core.interfaces import LinkIndexPort
from citewiki.core.models import Document

logger = logging.getLogger(__name__)


def decode_link(target: str) -> str:
    """Undo percent-encoding in a link target."""
    return unquote(target)


class LinkResolver:
    """Resolves link targets through a LinkIndexPort."""

    def __init__(self, index: LinkIndexPort) -> None:
        self._index = index

    def resolve(self, target: str, source_path: str) -> Document | None:
        """Find the single document ``target`` refers to from ``source_path``."""
        document = self._index.resolve_link(decode_link(target), source_path)
        if document is None:
            logger.debug("Unresolved link %r in %s", target, source_path)
        return document
