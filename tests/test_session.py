"""Tests for the view-state reducer."""

from __future__ import annotations

import pytest

from docnav.index.corpus import CorpusIndex
from docnav.index.search import Searcher
from docnav.linking.scanner import ReferenceScanner
from docnav.session import (
    ClearCategories,
    ClearSelection,
    DocumentView,
    ListingView,
    SelectDocument,
    SetQuery,
    ToggleCategory,
    ViewState,
    reduce,
    render_view,
)


class TestReduce:
    """Tests for reduce."""

    def test_select_known_document_resets_filters(self, corpus_index: CorpusIndex) -> None:
        """Opening a document clears query and filters."""
        state = ViewState(query="cardiac", categories=frozenset({"adult"}))

        state = reduce(state, SelectDocument("7-21"), corpus_index)

        assert state == ViewState(selected_id="7-21")

    def test_select_unknown_document_falls_back(self, corpus_index: CorpusIndex) -> None:
        """Unknown ids drop back to the listing and keep the search."""
        state = ViewState(query="cardiac", selected_id="1-1")

        state = reduce(state, SelectDocument("gone"), corpus_index)

        assert state.selected_id is None
        assert state.query == "cardiac"

    def test_set_query_closes_document(self, corpus_index: CorpusIndex) -> None:
        """Typing a query returns to the listing."""
        state = reduce(ViewState(selected_id="1-1"), SetQuery("airway"), corpus_index)

        assert state == ViewState(query="airway")

    def test_toggle_category(self, corpus_index: CorpusIndex) -> None:
        """Toggling adds then removes a category."""
        state = reduce(ViewState(selected_id="1-1"), ToggleCategory("adult"), corpus_index)
        assert state.categories == frozenset({"adult"})
        assert state.selected_id is None

        state = reduce(state, ToggleCategory("adult"), corpus_index)
        assert state.categories == frozenset()

    def test_clear_categories(self, corpus_index: CorpusIndex) -> None:
        """All filters are removed."""
        state = ViewState(query="x", categories=frozenset({"adult", "trauma"}))

        state = reduce(state, ClearCategories(), corpus_index)

        assert state == ViewState(query="x")

    def test_clear_selection(self, corpus_index: CorpusIndex) -> None:
        """Going back keeps nothing selected."""
        assert reduce(ViewState(selected_id="1-1"), ClearSelection(), corpus_index) == ViewState()

    def test_unsupported_event(self, corpus_index: CorpusIndex) -> None:
        """Unknown event objects are rejected."""
        with pytest.raises(TypeError):
            reduce(ViewState(), object(), corpus_index)  # type: ignore[arg-type]


class TestRenderView:
    """Tests for render_view."""

    def test_listing(self, corpus_index: CorpusIndex) -> None:
        """Without a selection the filtered results are shown."""
        view = render_view(
            ViewState(categories=frozenset({"adult", "trauma"})),
            Searcher(corpus_index),
            ReferenceScanner(corpus_index),
        )

        assert isinstance(view, ListingView)
        assert [result.document.id for result in view.results] == ["7-21"]

    def test_document(self, corpus_index: CorpusIndex) -> None:
        """A selection renders the linkified document."""
        view = render_view(
            ViewState(selected_id="7-21"),
            Searcher(corpus_index),
            ReferenceScanner(corpus_index),
        )

        assert isinstance(view, DocumentView)
        assert view.document.id == "7-21"
        assert [segment.target_id for segment in view.segments if segment.is_reference] == ["1-1"]
