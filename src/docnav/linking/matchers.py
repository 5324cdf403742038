"""Matcher plugins that propose reference candidates inside a document body.

The title matcher is canonical. The numeric matcher is a supplementary plugin
that links bare protocol numbers; both feed the same resolver.
"""

from __future__ import annotations

import logging
from typing import Dict, Iterator, List, Protocol, Sequence, Tuple, Type

from docnav.index.corpus import CorpusIndex
from docnav.models import Document, MatchCandidate, MatchKind
from docnav.utils.text import is_whole_word, iter_numeric_tokens, iter_occurrences

LOGGER = logging.getLogger(__name__)

DEFAULT_MATCHERS: Tuple[str, ...] = ("title", "numeric")


class Matcher(Protocol):
    kind: MatchKind

    def find(self, document: Document, corpus: CorpusIndex) -> Iterator[MatchCandidate]:
        ...


class TitleMatcher:
    """Finds whole-word, case-insensitive mentions of other documents' titles."""

    kind: MatchKind = "title"

    def find(self, document: Document, corpus: CorpusIndex) -> Iterator[MatchCandidate]:
        body = document.body
        if not body:
            return
        for target_id, title in corpus.title_targets():
            if target_id == document.id:
                continue
            try:
                found = list(self._find_title(body, target_id, title))
            except Exception as exc:
                LOGGER.warning("Skipping title %r of %s: %s", title, target_id, exc)
                continue
            yield from found

    def _find_title(self, body: str, target_id: str, title: str) -> Iterator[MatchCandidate]:
        length = len(title)
        next_allowed = 0
        for start in iter_occurrences(body, title):
            if start < next_allowed or not is_whole_word(body, start, length):
                continue
            yield MatchCandidate(
                start=start,
                length=length,
                target_id=target_id,
                display_text=body[start : start + length],
                kind=self.kind,
            )
            next_allowed = start + length


class NumericMatcher:
    """Links numeric tokens such as ``7.21`` to documents with id ``7.21`` or ``7-21``."""

    kind: MatchKind = "numeric"

    def find(self, document: Document, corpus: CorpusIndex) -> Iterator[MatchCandidate]:
        for start, token in iter_numeric_tokens(document.body):
            target_id = corpus.resolve_numeric(token)
            if target_id is None or target_id == document.id:
                continue
            yield MatchCandidate(
                start=start,
                length=len(token),
                target_id=target_id,
                display_text=token,
                kind=self.kind,
            )


MATCHERS: Dict[str, Type[Matcher]] = {
    "title": TitleMatcher,
    "numeric": NumericMatcher,
}


def build_matchers(names: Sequence[str] = DEFAULT_MATCHERS) -> List[Matcher]:
    """Instantiate matchers by name, in the given order."""
    if not names:
        raise ValueError("At least one matcher must be enabled")
    matchers: List[Matcher] = []
    for name in dict.fromkeys(names):
        try:
            matchers.append(MATCHERS[name]())
        except KeyError:
            raise ValueError(
                f"Unknown matcher {name!r}, expected one of {sorted(MATCHERS)}"
            ) from None
    return matchers
