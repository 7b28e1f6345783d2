"""Standalone link index: resolves link paths against the vault's documents."""

from __future__ import annotations

import logging
import posixpath

from citewiki.core.interfaces import DocumentStorePort, LinkIndexPort
from citewiki.core.models import Document

logger = logging.getLogger(__name__)


class VaultLinkIndex(LinkIndexPort):
    """Resolves a link to the first matching document, deterministically.

    Lookup order:
    1. the link is a vault path, with or without ``.md``
    2. the link is a path relative to the source document's folder
    3. a document path ends with the link path; ties prefer the source's
       folder, then the shortest path, then alphabetical order
    """

    def __init__(self, store: DocumentStorePort) -> None:
        self._store = store

    def resolve_link(self, link: str, source_path: str) -> Document | None:
        """Find the document ``link`` points to from ``source_path``."""
        link_path = _link_path(link)
        if not link_path:
            return None

        documents = self._store.list_documents()
        by_path = {doc.path: doc for doc in documents}

        found = _lookup(by_path, link_path)
        if found is not None:
            return found

        source_folder = Document.from_path(source_path).folder if source_path else ""
        relative = posixpath.normpath(posixpath.join(source_folder, link_path))
        if not relative.startswith(".."):
            found = _lookup(by_path, relative)
            if found is not None:
                return found

        suffix = "/" + link_path.lstrip("/")
        matches = [
            doc
            for doc in documents
            if ("/" + doc.path).endswith(suffix) or ("/" + doc.path).endswith(suffix + ".md")
        ]
        if not matches:
            return None

        matches.sort(key=lambda doc: (doc.folder != source_folder, len(doc.path), doc.path))
        if len(matches) > 1:
            logger.debug("Link %r matched %d documents, using %s", link, len(matches), matches[0].path)
        return matches[0]


def _link_path(link: str) -> str:
    """The path part of a link, without heading/block reference or alt text."""
    for separator in ("|", "#"):
        link = link.split(separator, 1)[0]
    return link.strip()


def _lookup(by_path: dict[str, Document], path: str) -> Document | None:
    path = path.lstrip("/")
    return by_path.get(path) or by_path.get(path + ".md")
