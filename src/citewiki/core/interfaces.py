"""Port interfaces for citewiki (hexagonal architecture)."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from citewiki.core.models import Document

if TYPE_CHECKING:
    from citewiki.config import CitewikiConfig


class DocumentStorePort(ABC):
    """Port for reading, writing and enumerating vault documents."""

    @abstractmethod
    async def read_text(self, path: str) -> str:
        """Read the full text of a document.

        Args:
            path: Vault-relative document path.

        Returns:
            The document text.
        """

    @abstractmethod
    async def write_text(self, path: str, text: str, preserve_mtime: bool = False) -> None:
        """Replace the full text of a document in one write.

        Args:
            path: Vault-relative document path.
            text: New document text.
            preserve_mtime: Keep the document's previous modification time.
        """

    @abstractmethod
    def list_documents(self) -> list[Document]:
        """Enumerate every document in the vault, ordered by path."""

    @abstractmethod
    def get_active_document(self) -> Document | None:
        """Return the document the user is currently working on, if any."""


class LinkIndexPort(ABC):
    """Port for resolving a raw link path to a single document."""

    @abstractmethod
    def resolve_link(self, link: str, source_path: str) -> Document | None:
        """Find the document a link points to.

        Args:
            link: Decoded link path as written (name, partial or full path).
            source_path: Path of the document containing the link.

        Returns:
            The unique best-matching Document, or None.
        """


class SettingsStorePort(ABC):
    """Port for persisting user settings."""

    @abstractmethod
    def load(self) -> CitewikiConfig:
        """Load settings, filling unset values from defaults."""

    @abstractmethod
    def save(self, config: CitewikiConfig) -> None:
        """Persist settings."""
