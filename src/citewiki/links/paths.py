"""Link target shapes: relative, absolute and shortest unambiguous paths."""

from __future__ import annotations

from collections.abc import Sequence

from citewiki.core.models import Document, FinalLinkFormat

_MARKDOWN_SUFFIX = ".md"


def strip_markdown_suffix(link: str) -> str:
    """Drop a trailing ``.md``; Markdown notes are addressed without it."""
    return link.removesuffix(_MARKDOWN_SUFFIX)


def relative_link(source_path: str, target_path: str) -> str:
    """Path of ``target_path`` as seen from the folder of ``source_path``.

    >>> relative_link("a/b/c.md", "a/x/y.md")
    '../x/y.md'
    >>> relative_link("a/c.md", "a/y.md")
    'y.md'
    """
    from_parts = _trim(source_path.split("/"))
    to_parts = _trim(target_path.split("/"))

    common = 0
    for from_part, to_part in zip(from_parts, to_parts):
        if from_part != to_part:
            break
        common += 1

    # the source's own file name is not a folder to climb out of
    output = [".."] * max(len(from_parts) - 1 - common, 0)
    output.extend(to_parts[common:])
    return "/".join(output)


def format_path(
    target: Document,
    source: Document,
    mode: FinalLinkFormat,
    documents: Sequence[Document],
) -> str:
    """Render the link path to ``target`` from ``source`` in the given shape.

    Args:
        target: Document the link points to.
        source: Document containing the link.
        mode: One of the path formats; NOT_CHANGE is treated as absolute.
        documents: Whole vault, consulted for shortest-path ambiguity.

    Returns:
        The path without a trailing ``.md``.
    """
    if mode == FinalLinkFormat.RELATIVE_PATH:
        link = relative_link(source.path, target.path)
    elif mode == FinalLinkFormat.SHORTEST_PATH:
        same_name = sum(1 for doc in documents if doc.name == target.name)
        link = target.name if same_name <= 1 else target.path
    else:
        link = target.path
    return strip_markdown_suffix(link)


def _trim(parts: list[str]) -> list[str]:
    """Remove empty leading and trailing segments."""
    start = 0
    while start < len(parts) and parts[start] == "":
        start += 1
    end = len(parts)
    while end > start and parts[end - 1] == "":
        end -= 1
    return parts[start:end]
