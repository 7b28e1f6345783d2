"""Filesystem-backed document store for a vault directory.

Write behaviour:
- Text is written to a temporary sibling file and moved into place, so a
  document is replaced in a single step
- With ``preserve_mtime`` the previous access and modification times are
  restored after the move
"""

from __future__ import annotations

import asyncio
import logging
import os
import tempfile
from pathlib import Path

from citewiki.core.errors import DocumentStoreError
from citewiki.core.interfaces import DocumentStorePort
from citewiki.core.models import Document

logger = logging.getLogger(__name__)


class FilesystemDocumentStore(DocumentStorePort):
    """Document store over the files below a vault root.

    Files and folders whose name starts with a dot (``.obsidian``,
    ``.git``, ``.citewiki``) are not part of the vault.
    """

    def __init__(self, root: str | Path, active: str | None = None) -> None:
        self.root = Path(root).expanduser().resolve()
        self._active = active
        if not self.root.is_dir():
            raise DocumentStoreError(f"Vault folder not found: {self.root}")

    def _full_path(self, path: str) -> Path:
        full = (self.root / path).resolve()
        if not full.is_relative_to(self.root):
            raise DocumentStoreError(f"Path escapes the vault: {path}")
        return full

    async def read_text(self, path: str) -> str:
        """Read a document as UTF-8 text."""
        full = self._full_path(path)
        try:
            return await asyncio.to_thread(self._read, full)
        except OSError as e:
            raise DocumentStoreError(f"Cannot read {path}: {e}") from e

    async def write_text(self, path: str, text: str, preserve_mtime: bool = False) -> None:
        """Replace a document's text in one step."""
        full = self._full_path(path)
        try:
            await asyncio.to_thread(self._replace, full, text, preserve_mtime)
        except OSError as e:
            raise DocumentStoreError(f"Cannot write {path}: {e}") from e
        logger.debug("Wrote %s (%d chars)", path, len(text))

    @staticmethod
    def _read(full: Path) -> str:
        with open(full, encoding="utf-8", newline="") as f:
            return f.read()

    @staticmethod
    def _replace(full: Path, text: str, preserve_mtime: bool) -> None:
        previous = full.stat() if preserve_mtime and full.exists() else None

        fd, tmp_name = tempfile.mkstemp(dir=full.parent, prefix=f".{full.name}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8", newline="") as f:
                f.write(text)
            if full.exists():
                os.chmod(tmp_name, full.stat().st_mode)
            os.replace(tmp_name, full)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

        if previous is not None:
            os.utime(full, ns=(previous.st_atime_ns, previous.st_mtime_ns))

    def list_documents(self) -> list[Document]:
        """All files in the vault, ordered by path."""
        documents = []
        for dirpath, dirnames, filenames in os.walk(self.root):
            dirnames[:] = [d for d in dirnames if not d.startswith(".")]
            folder = Path(dirpath).relative_to(self.root)
            for filename in filenames:
                if filename.startswith("."):
                    continue
                documents.append(Document.from_path((folder / filename).as_posix()))
        documents.sort(key=lambda doc: doc.path)
        return documents

    def get_active_document(self) -> Document | None:
        """The configured active document, else the most recently modified file."""
        if self._active:
            if not self._full_path(self._active).is_file():
                logger.warning("Configured active document %s does not exist", self._active)
                return None
            return Document.from_path(self._active)

        newest: tuple[int, str] | None = None
        for document in self.list_documents():
            mtime = (self.root / document.path).stat().st_mtime_ns
            if newest is None or mtime > newest[0]:
                newest = (mtime, document.path)
        return Document.from_path(newest[1]) if newest else None
