"""Front matter splitting for content and view files.

A document may start with a YAML block fenced by ``---`` lines::

    ---
    title: Hello
    ---
    <h1>{{doc.title}}</h1>

Splitting never fails: a document without an opening fence, or with an
opening fence that is never closed, is treated as body-only.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

FRONT_MATTER_DELIMITER = "---"

_FRONT_MATTER_RE = re.compile(
    r"\A---[ \t]*\r?\n"  # opening fence
    r"(?P<front_matter>.*?)"
    r"(?:\r?\n)?"
    r"^---[ \t]*(?:\r?\n|\Z)",  # closing fence
    re.DOTALL | re.MULTILINE,
)


@dataclass(frozen=True)
class SplitFrontMatter:
    """Result of splitting a document into front matter and body."""

    front_matter: str | None
    body: str


def split_front_matter(text: str) -> SplitFrontMatter:
    """Separate the leading front matter block from the document body."""
    match = _FRONT_MATTER_RE.match(text)
    if match is None:
        return SplitFrontMatter(front_matter=None, body=text)
    return SplitFrontMatter(front_matter=match.group("front_matter"), body=text[match.end() :])


def combine_front_matter(front_matter: str | None, body: str | None) -> str:
    """Inverse of :func:`split_front_matter`.

    Empty front matter is dropped so body-only documents stay body-only.
    """
    body = body or ""
    if not front_matter or not front_matter.strip():
        return body
    front_matter = front_matter.rstrip("\r\n")
    return f"{FRONT_MATTER_DELIMITER}\n{front_matter}\n{FRONT_MATTER_DELIMITER}\n{body}"
