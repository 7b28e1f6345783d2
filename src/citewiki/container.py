"""Dependency injection container for citewiki."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from citewiki.config import CitewikiConfig
from citewiki.core.interfaces import DocumentStorePort, LinkIndexPort, SettingsStorePort
from citewiki.core.models import Document


@dataclass
class Container:
    """DI container holding the settings and all ports."""

    config: CitewikiConfig
    document_store: DocumentStorePort
    link_index: LinkIndexPort
    settings_store: SettingsStorePort

    @staticmethod
    def create_default(vault: str | Path, config_path: str | Path | None = None) -> Container:
        """Create a container with the filesystem adapters for a vault."""
        from citewiki.adapters.fs_store import FilesystemDocumentStore
        from citewiki.adapters.settings_store import YamlSettingsStore
        from citewiki.adapters.vault_index import VaultLinkIndex
        from citewiki.config import default_config_path

        settings_store = YamlSettingsStore(config_path or default_config_path(vault))
        config = settings_store.load()

        document_store = FilesystemDocumentStore(vault, active=config.active_document)

        return Container(
            config=config,
            document_store=document_store,
            link_index=VaultLinkIndex(document_store),
            settings_store=settings_store,
        )

    @staticmethod
    def create_for_testing(
        config: CitewikiConfig | None = None,
        document_store: DocumentStorePort | None = None,
        link_index: LinkIndexPort | None = None,
        settings_store: SettingsStorePort | None = None,
    ) -> Container:
        """Create a container with test/mock adapters.

        All parameters are optional. Provide mocks for the components
        you want to control in tests.
        """

        # Use stubs that raise if accidentally called without being mocked
        class StubDocumentStore(DocumentStorePort):
            async def read_text(self, path: str) -> str:
                raise NotImplementedError("Provide a mock document_store")

            async def write_text(self, path: str, text: str, preserve_mtime: bool = False) -> None:
                raise NotImplementedError("Provide a mock document_store")

            def list_documents(self) -> list[Document]:
                raise NotImplementedError("Provide a mock document_store")

            def get_active_document(self) -> Document | None:
                raise NotImplementedError("Provide a mock document_store")

        class StubLinkIndex(LinkIndexPort):
            def resolve_link(self, link: str, source_path: str) -> Document | None:
                raise NotImplementedError("Provide a mock link_index")

        class StubSettingsStore(SettingsStorePort):
            def load(self) -> CitewikiConfig:
                return config or CitewikiConfig()

            def save(self, config: CitewikiConfig) -> None:
                raise NotImplementedError("Provide a mock settings_store")

        return Container(
            config=config or CitewikiConfig(),
            document_store=document_store or StubDocumentStore(),
            link_index=link_index or StubLinkIndex(),
            settings_store=settings_store or StubSettingsStore(),
        )
