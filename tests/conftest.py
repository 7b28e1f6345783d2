"""Shared test fixtures for citewiki."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest

from citewiki.adapters.fs_store import FilesystemDocumentStore
from citewiki.adapters.settings_store import YamlSettingsStore
from citewiki.adapters.vault_index import VaultLinkIndex
from citewiki.config import CitewikiConfig
from citewiki.container import Container
from citewiki.core.interfaces import LinkIndexPort
from citewiki.core.models import Document

VAULT_FILES: dict[str, str] = {
    "index.md": "# Index\n",
    "notes/today.md": "Reading [[@smith2020]] today.\n",
    "refs/@smith2020.md": "# Smith 2020\n",
    "refs/@doe2019 - Deep Notes.md": "# Doe 2019\n",
    "topics/Topic.md": "# Topic\n",
    "img/pic.png": "not really a png",
}


class DictLinkIndex(LinkIndexPort):
    """Link index backed by a plain link -> Document mapping."""

    def __init__(self, links: dict[str, Document] | None = None) -> None:
        self.links = links or {}

    def resolve_link(self, link: str, source_path: str) -> Document | None:
        return self.links.get(link)


def make_documents(*paths: str) -> list[Document]:
    """Documents for the given vault-relative paths."""
    return [Document.from_path(p) for p in paths]


def make_store(text: str, documents: list[Document], active: Document | None = None) -> MagicMock:
    """A mocked document store serving one document text."""
    store = MagicMock()
    store.read_text = AsyncMock(return_value=text)
    store.write_text = AsyncMock()
    store.list_documents.return_value = documents
    store.get_active_document.return_value = active
    return store


@pytest.fixture()
def vault(tmp_path: Path) -> Path:
    """A small vault on disk."""
    root = tmp_path / "vault"
    for rel, content in VAULT_FILES.items():
        path = root / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
    (root / ".obsidian").mkdir()
    (root / ".obsidian" / "app.json").write_text("{}")
    return root


@pytest.fixture()
def fs_store(vault: Path) -> FilesystemDocumentStore:
    """Filesystem store over the test vault."""
    return FilesystemDocumentStore(vault)


@pytest.fixture()
def vault_container(vault: Path, fs_store: FilesystemDocumentStore) -> Container:
    """Container wired with the real adapters over the test vault."""
    return Container(
        config=CitewikiConfig(),
        document_store=fs_store,
        link_index=VaultLinkIndex(fs_store),
        settings_store=YamlSettingsStore(vault / ".citewiki" / "config.yaml"),
    )
