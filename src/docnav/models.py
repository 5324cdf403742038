"""Core DocNav data models."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Tuple

PLACEHOLDER_TITLE = "Unnamed Document"

MatchKind = Literal["title", "numeric"]


@dataclass(frozen=True, slots=True)
class Document:
    """One indexed unit of content."""

    id: str
    title: str
    body: str
    source: str = ""
    categories: Tuple[str, ...] = ()

    @property
    def has_title(self) -> bool:
        """True when the title can name this document inside another body."""
        title = self.title.strip()
        return bool(title) and title != PLACEHOLDER_TITLE


@dataclass(frozen=True, slots=True)
class MatchCandidate:
    """A possibly-overlapping reference span found in a document body."""

    start: int
    length: int
    target_id: str
    display_text: str
    kind: MatchKind

    @property
    def end(self) -> int:
        return self.start + self.length


@dataclass(frozen=True, slots=True)
class Segment:
    """A literal text run, or a reference when ``target_id`` is set."""

    text: str
    target_id: str | None = None

    @property
    def is_reference(self) -> bool:
        return self.target_id is not None

    def to_dict(self) -> dict[str, str]:
        if self.target_id is None:
            return {"text": self.text}
        return {"text": self.text, "targetId": self.target_id}
