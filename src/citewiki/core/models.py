"""Domain models for citewiki."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class LinkKind(str, Enum):
    """The four syntactic link shapes the scanner recognises."""

    CITATION_LINK = "citation"
    WIKI_LINK = "wiki"
    WIKI_TRANSCLUSION = "wiki_transclusion"
    CITATION_TRANSCLUSION = "citation_transclusion"

    @property
    def is_transclusion(self) -> bool:
        return self in (LinkKind.WIKI_TRANSCLUSION, LinkKind.CITATION_TRANSCLUSION)


class LinkFormat(str, Enum):
    """Direction of a syntax conversion."""

    CITATION = "citation"
    WIKI = "wiki"


class FinalLinkFormat(str, Enum):
    """Shape of the link target written into rewritten links."""

    NOT_CHANGE = "not-change"
    RELATIVE_PATH = "relative-path"
    ABSOLUTE_PATH = "absolute-path"
    SHORTEST_PATH = "shortest-path"

    @classmethod
    def path_modes(cls) -> list[FinalLinkFormat]:
        """Formats that actually reshape a path (everything but not-change)."""
        return [cls.RELATIVE_PATH, cls.ABSOLUTE_PATH, cls.SHORTEST_PATH]


class Document(BaseModel):
    """A file in the vault, addressed by its vault-relative path."""

    path: str = Field(description="Vault-relative path using '/' separators")
    name: str = Field(description="Last path segment, extension included")
    extension: str = Field(default="", description="Extension without the dot")
    basename: str = Field(description="Name without its extension")

    @classmethod
    def from_path(cls, path: str) -> Document:
        """Build a Document from a vault-relative path."""
        path = path.replace("\\", "/").strip("/")
        name = path.rsplit("/", 1)[-1]
        stem, dot, ext = name.rpartition(".")
        if not dot or not stem:
            return cls(path=path, name=name, extension="", basename=name)
        return cls(path=path, name=name, extension=ext, basename=stem)

    @property
    def folder(self) -> str:
        """Parent folder path, empty for documents at the vault root."""
        return self.path.rpartition("/")[0]

    @property
    def is_markdown(self) -> bool:
        return self.extension == "md"


class LinkOccurrence(BaseModel):
    """One link or transclusion found in a document's text."""

    model_config = ConfigDict(frozen=True)

    kind: LinkKind = Field(description="Syntactic shape of the link")
    raw_text: str = Field(description="Exact substring matched in the source text")
    target: str = Field(description="Link target as written, not yet resolved")
    auxiliary: str = Field(default="", description="Alt text or block/heading reference")
    source_path: str = Field(default="", description="Path of the containing document")


class ConversionReport(BaseModel):
    """Outcome of converting the links of one document."""

    path: str | None = Field(default=None, description="Document that was processed")
    occurrences: int = Field(default=0, description="Links found by the scanner")
    rewritten: int = Field(default=0, description="Replacements performed")
    changed: bool = Field(default=False, description="Whether the text was modified")
    notice: str | None = Field(default=None, description="User-visible reason for skipping")
