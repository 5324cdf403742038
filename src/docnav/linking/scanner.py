"""Cross-reference detection for document bodies."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Dict, List, Sequence

from docnav.index.corpus import CorpusIndex
from docnav.linking.matchers import DEFAULT_MATCHERS, Matcher, build_matchers
from docnav.linking.resolver import DEFAULT_POLICY, build_segments, get_resolver
from docnav.models import Document, MatchCandidate, Segment

LOGGER = logging.getLogger(__name__)


class ReferenceScanner:
    """Turns mentions of other documents into references.

    Candidates from every enabled matcher are pooled and resolved together,
    so title and numeric matches compete for the same text positions.
    """

    def __init__(
        self,
        corpus: CorpusIndex,
        matchers: Sequence[Matcher] | None = None,
        *,
        policy: str = DEFAULT_POLICY,
    ) -> None:
        self.corpus = corpus
        self.matchers = list(matchers) if matchers is not None else build_matchers(DEFAULT_MATCHERS)
        self.policy = policy
        self._resolve = get_resolver(policy)

    def scan(self, document: Document) -> List[MatchCandidate]:
        """Collect unresolved candidates from all matchers, ordered by start."""
        candidates: List[MatchCandidate] = []
        for matcher in self.matchers:
            candidates.extend(
                candidate
                for candidate in matcher.find(document, self.corpus)
                if candidate.target_id != document.id
            )
        candidates.sort(key=lambda candidate: candidate.start)
        return candidates

    def resolve(self, document: Document) -> List[MatchCandidate]:
        return self._resolve(self.scan(document))

    def linkify_document(self, document: Document) -> List[Segment]:
        return build_segments(document.body, self.resolve(document))

    def linkify(self, doc_id: str) -> List[Segment] | None:
        """Segments for the document with ``doc_id``, or None when it is unknown."""
        document = self.corpus.by_id(doc_id)
        if document is None:
            return None
        return self.linkify_document(document)

    def references(self, document: Document) -> List[str]:
        """Distinct ids referenced by ``document``, in order of first mention."""
        return list(dict.fromkeys(candidate.target_id for candidate in self.resolve(document)))

    def reference_map(self, *, workers: int | None = None) -> Dict[str, List[str]]:
        """Outgoing references for every document, keyed by id in corpus order.

        Each scan is independent, so with ``workers > 1`` documents are
        scanned on a thread pool.
        """
        documents = self.corpus.all_documents()
        if workers is not None and workers > 1 and len(documents) > 1:
            LOGGER.info("Scanning %d documents with %d workers", len(documents), workers)
            with ThreadPoolExecutor(max_workers=workers) as executor:
                outgoing = list(executor.map(self.references, documents))
        else:
            outgoing = [self.references(document) for document in documents]
        return {document.id: refs for document, refs in zip(documents, outgoing)}
