"""In-memory corpus index."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, FrozenSet, Iterable, Iterator, List, Mapping, Tuple

from docnav.ingestion.corpus_loader import documents_from_mapping, load_corpus
from docnav.models import Document
from docnav.utils.text import dotted_to_hyphenated, normalize_query

LOGGER = logging.getLogger(__name__)

SEARCH_FIELDS: Tuple[str, ...] = ("title", "id", "body")


class DuplicateDocumentError(ValueError):
    """Raised when two documents share an id."""


class CorpusIndex:
    """Read-only lookup structures over a fixed, ordered document set."""

    def __init__(self, documents: Iterable[Document]) -> None:
        ordered: List[Document] = []
        by_id: Dict[str, Document] = {}
        for document in documents:
            if document.id in by_id:
                raise DuplicateDocumentError(f"Duplicate document id: {document.id!r}")
            by_id[document.id] = document
            ordered.append(document)

        self._documents: Tuple[Document, ...] = tuple(ordered)
        self._by_id = by_id
        self._positions = {document.id: position for position, document in enumerate(ordered)}
        self._category_sets: Dict[str, FrozenSet[str]] = {
            document.id: frozenset(document.categories) for document in ordered
        }

        targets = []
        for document in ordered:
            if document.has_title:
                targets.append((document.id, document.title.strip()))
            else:
                LOGGER.debug("Document %s has no scannable title", document.id)
        self._title_targets: Tuple[Tuple[str, str], ...] = tuple(targets)
        self._search_fields: Dict[str, Dict[str, str]] = {
            document.id: {name: normalize_query(getattr(document, name)) for name in SEARCH_FIELDS}
            for document in ordered
        }

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "CorpusIndex":
        return cls(documents_from_mapping(data))

    @classmethod
    def from_path(cls, path: Path) -> "CorpusIndex":
        return cls(load_corpus(path))

    def __len__(self) -> int:
        return len(self._documents)

    def __iter__(self) -> Iterator[Document]:
        return iter(self._documents)

    def __contains__(self, doc_id: object) -> bool:
        return doc_id in self._by_id

    def by_id(self, doc_id: str) -> Document | None:
        """Return the document with ``doc_id``, or None when it is unknown."""
        return self._by_id.get(doc_id)

    def all_documents(self) -> Tuple[Document, ...]:
        """All documents in insertion order."""
        return self._documents

    def position(self, doc_id: str) -> int:
        return self._positions[doc_id]

    def category_set(self, doc_id: str) -> FrozenSet[str]:
        return self._category_sets[doc_id]

    def title_targets(self) -> Tuple[Tuple[str, str], ...]:
        """``(id, title)`` pairs for every document whose title is scannable."""
        return self._title_targets

    def search_fields(self, doc_id: str) -> Mapping[str, str]:
        """Normalized ``title``, ``id`` and ``body`` text, computed once at build time."""
        return self._search_fields[doc_id]

    def resolve_numeric(self, token: str) -> str | None:
        """Resolve a numeric token to a document id.

        Tries the token verbatim first, then with dots replaced by hyphens.
        """
        if token in self._by_id:
            return token
        hyphenated = dotted_to_hyphenated(token)
        if hyphenated in self._by_id:
            return hyphenated
        return None

    def categories(self) -> List[str]:
        """Sorted category vocabulary seen across the corpus."""
        seen: set[str] = set()
        for tags in self._category_sets.values():
            seen.update(tags)
        return sorted(seen)
