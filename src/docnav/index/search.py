"""Weighted fuzzy search over the corpus index."""

from __future__ import annotations

import logging
import math
import sys
from dataclasses import dataclass
from typing import Iterable, List, Sequence, Tuple

from rapidfuzz import fuzz

from docnav.index.corpus import SEARCH_FIELDS, CorpusIndex
from docnav.models import Document
from docnav.utils.text import normalize_query

LOGGER = logging.getLogger(__name__)

DEFAULT_THRESHOLD = 0.4
DEFAULT_FIELD_WEIGHTS: Tuple[Tuple[str, float], ...] = (
    ("title", 0.6),
    ("id", 0.5),
    ("body", 0.2),
)

_EPSILON = sys.float_info.epsilon


@dataclass(slots=True)
class SearchResult:
    document: Document
    score: float | None


def field_norm(text: str) -> float:
    """Length norm for a field: ``1 / sqrt(token count)``, three decimals."""
    tokens = len(text.split()) or 1
    return round(1 / math.sqrt(tokens), 3)


def field_distance(query: str, text: str) -> float:
    """Normalized distance in ``[0, 1]`` between a query and one field.

    Both arguments must already be normalized. A query shorter than the field
    is aligned against its best-matching substring; a longer query is compared
    against the whole field.
    """
    if not query or not text:
        return 1.0
    if len(query) <= len(text):
        similarity = fuzz.partial_ratio(query, text)
    else:
        similarity = fuzz.ratio(query, text)
    return 1.0 - similarity / 100.0


class Searcher:
    """Ranks documents by weighted approximate match on title, id and body."""

    def __init__(
        self,
        corpus: CorpusIndex,
        *,
        threshold: float = DEFAULT_THRESHOLD,
        weights: Sequence[Tuple[str, float]] = DEFAULT_FIELD_WEIGHTS,
        ignore_field_norm: bool = False,
    ) -> None:
        total = sum(weight for _, weight in weights)
        if total <= 0:
            raise ValueError("Field weights must sum to a positive value")
        unknown = {name for name, _ in weights} - set(SEARCH_FIELDS)
        if unknown:
            raise ValueError(f"Unknown search fields: {sorted(unknown)}")
        self.corpus = corpus
        self.threshold = threshold
        self.weights = tuple((name, weight / total) for name, weight in weights)
        self.ignore_field_norm = ignore_field_norm

    def search(
        self,
        query: str,
        categories: Iterable[str] = (),
        *,
        limit: int | None = None,
    ) -> List[Document]:
        return [result.document for result in self.search_scored(query, categories, limit=limit)]

    def search_scored(
        self,
        query: str,
        categories: Iterable[str] = (),
        *,
        limit: int | None = None,
    ) -> List[SearchResult]:
        required = frozenset(categories)
        candidates = [
            document
            for document in self.corpus.all_documents()
            if required <= self.corpus.category_set(document.id)
        ]

        normalized = normalize_query(query)
        if not normalized:
            results = [SearchResult(document=document, score=None) for document in candidates]
            return results[:limit] if limit is not None else results

        scored: List[Tuple[float, int, Document]] = []
        for document in candidates:
            distances = self._field_distances(normalized, document)
            if min(distance for distance, _, _ in distances) > self.threshold:
                continue
            scored.append((self._combine(distances), self.corpus.position(document.id), document))

        scored.sort(key=lambda item: (item[0], item[1]))
        if limit is not None:
            scored = scored[:limit]
        LOGGER.debug("Query %r matched %d of %d documents", query, len(scored), len(candidates))
        return [SearchResult(document=document, score=score) for score, _, document in scored]

    def score(self, normalized_query: str, document: Document) -> float:
        """Combined score for one document, lower is better.

        The best field distance is scaled by the weighted product of every
        field that falls within the threshold. Acceptance is decided on the
        raw distances in ``search_scored``; this value only orders results.
        """
        return self._combine(self._field_distances(normalized_query, document))

    def _field_distances(self, normalized_query: str, document: Document) -> List[Tuple[float, float, str]]:
        if document.id in self.corpus:
            fields = self.corpus.search_fields(document.id)
        else:
            fields = {name: normalize_query(getattr(document, name)) for name in SEARCH_FIELDS}

        distances = []
        for name, weight in self.weights:
            text = fields[name]
            try:
                distance = field_distance(normalized_query, text)
            except (TypeError, ValueError) as exc:
                LOGGER.debug("Scoring %s.%s failed, treating as no match: %s", document.id, name, exc)
                distance = 1.0
            distances.append((distance, weight, text))
        return distances

    def _combine(self, distances: List[Tuple[float, float, str]]) -> float:
        best = max(min(distance for distance, _, _ in distances), _EPSILON)
        product = 1.0
        for distance, weight, text in distances:
            if distance > self.threshold:
                continue
            norm = 1.0 if self.ignore_field_norm else field_norm(text)
            product *= max(distance, _EPSILON) ** (weight * norm)
        return best * product
