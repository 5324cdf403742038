"""View state for interactive front ends, driven by explicit events."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import FrozenSet, List, Union

from docnav.index.corpus import CorpusIndex
from docnav.index.search import Searcher, SearchResult
from docnav.linking.scanner import ReferenceScanner
from docnav.models import Document, Segment

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ViewState:
    query: str = ""
    categories: FrozenSet[str] = field(default_factory=frozenset)
    selected_id: str | None = None


@dataclass(frozen=True, slots=True)
class SelectDocument:
    document_id: str


@dataclass(frozen=True, slots=True)
class SetQuery:
    query: str


@dataclass(frozen=True, slots=True)
class ToggleCategory:
    category: str


@dataclass(frozen=True, slots=True)
class ClearCategories:
    pass


@dataclass(frozen=True, slots=True)
class ClearSelection:
    pass


Event = Union[SelectDocument, SetQuery, ToggleCategory, ClearCategories, ClearSelection]


def reduce(state: ViewState, event: Event, corpus: CorpusIndex) -> ViewState:
    """Apply one event and return the next state.

    Opening a document resets the query and filters. An unknown id drops back
    to the listing. Editing the query or filters closes the open document.
    """
    if isinstance(event, SelectDocument):
        if event.document_id not in corpus:
            LOGGER.warning("Unknown document %r selected, showing listing", event.document_id)
            return replace(state, selected_id=None)
        return ViewState(selected_id=event.document_id)
    if isinstance(event, SetQuery):
        return replace(state, query=event.query, selected_id=None)
    if isinstance(event, ToggleCategory):
        categories = state.categories ^ {event.category}
        return replace(state, categories=frozenset(categories), selected_id=None)
    if isinstance(event, ClearCategories):
        return replace(state, categories=frozenset(), selected_id=None)
    if isinstance(event, ClearSelection):
        return replace(state, selected_id=None)
    raise TypeError(f"Unsupported event: {event!r}")


@dataclass(slots=True)
class DocumentView:
    document: Document
    segments: List[Segment]


@dataclass(slots=True)
class ListingView:
    results: List[SearchResult]


def render_view(
    state: ViewState, searcher: Searcher, scanner: ReferenceScanner
) -> Union[DocumentView, ListingView]:
    """Build what the front end should display for ``state``."""
    if state.selected_id is not None:
        document = searcher.corpus.by_id(state.selected_id)
        if document is not None:
            return DocumentView(document=document, segments=scanner.linkify_document(document))
    return ListingView(results=searcher.search_scored(state.query, state.categories))
