"""Error hierarchy for citewiki."""

from __future__ import annotations


class CitewikiError(Exception):
    """Base exception for all citewiki errors."""

    pass


class ConfigError(CitewikiError):
    """Settings loading, validation or saving error."""

    pass


class DocumentStoreError(CitewikiError):
    """Reading, writing or listing documents failed."""

    pass


class UnsupportedDocumentError(CitewikiError):
    """Conversion requested on a document that is not a Markdown note."""

    def __init__(self, path: str) -> None:
        super().__init__(f"Not a Markdown file: {path}")
        self.path = path
