"""FastAPI application backing the DocNav web UI."""

from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path
from typing import Any, List, Literal, Tuple

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from docnav.config import CATEGORY_LABELS, AppConfig
from docnav.index.corpus import CorpusIndex, DuplicateDocumentError
from docnav.index.search import Searcher
from docnav.ingestion.corpus_loader import CorpusLoadError
from docnav.linking.matchers import build_matchers
from docnav.linking.scanner import ReferenceScanner
from docnav.models import Document
from docnav.session import (
    ClearCategories,
    ClearSelection,
    DocumentView,
    SelectDocument,
    SetQuery,
    ToggleCategory,
    ViewState,
    reduce,
    render_view,
)
from docnav.web.frontend import router as frontend_router

LOGGER = logging.getLogger(__name__)

app = FastAPI(title="DocNav Web", version="0.1.0")
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)
app.include_router(frontend_router)
app.state.corpus_path = None


class SearchPayload(BaseModel):
    query: str = ""
    categories: List[str] = Field(default_factory=list)
    corpus: Path | None = None
    top_k: int | None = None


class ViewStatePayload(BaseModel):
    query: str = ""
    categories: List[str] = Field(default_factory=list)
    selected_id: str | None = None


class EventPayload(BaseModel):
    type: Literal["selectDocument", "setQuery", "toggleCategory", "clearCategories", "clearSelection"]
    document_id: str | None = None
    query: str | None = None
    category: str | None = None


class ViewPayload(BaseModel):
    state: ViewStatePayload = Field(default_factory=ViewStatePayload)
    event: EventPayload | None = None
    corpus: Path | None = None


def _resolve_corpus_path(corpus: Path | None) -> Path:
    if corpus is None and app.state.corpus_path is not None:
        return Path(app.state.corpus_path)
    config = AppConfig(corpus_path=corpus if corpus is not None else AppConfig().corpus_path)
    return config.resolve_corpus_path(Path.cwd())


@lru_cache(maxsize=8)
def _build_services(path: str, mtime: float) -> Tuple[Searcher, ReferenceScanner]:
    config = AppConfig(corpus_path=Path(path))
    index = CorpusIndex.from_path(Path(path))
    searcher = Searcher(index, threshold=config.threshold)
    scanner = ReferenceScanner(index, build_matchers(config.matchers), policy=config.resolve_policy)
    return searcher, scanner


def _services(corpus: Path | None) -> Tuple[Searcher, ReferenceScanner]:
    resolved = _resolve_corpus_path(corpus)
    if not resolved.exists():
        raise HTTPException(status_code=404, detail=f"Corpus not found at {resolved}")
    try:
        return _build_services(str(resolved), resolved.stat().st_mtime)
    except (CorpusLoadError, DuplicateDocumentError) as exc:
        LOGGER.error("Unable to load corpus %s: %s", resolved, exc)
        raise HTTPException(status_code=500, detail=str(exc)) from exc


def _document_summary(document: Document) -> dict[str, Any]:
    return {
        "id": document.id,
        "title": document.title,
        "source": document.source,
        "categories": list(document.categories),
    }


def _document_detail(document: Document, scanner: ReferenceScanner) -> dict[str, Any]:
    segments = scanner.linkify_document(document)
    return {
        "document": {**_document_summary(document), "body": document.body},
        "segments": [segment.to_dict() for segment in segments],
    }


def _to_event(payload: EventPayload) -> Any:
    if payload.type == "selectDocument":
        if not payload.document_id:
            raise HTTPException(status_code=400, detail="selectDocument requires document_id")
        return SelectDocument(payload.document_id)
    if payload.type == "setQuery":
        return SetQuery(payload.query or "")
    if payload.type == "toggleCategory":
        if not payload.category:
            raise HTTPException(status_code=400, detail="toggleCategory requires category")
        return ToggleCategory(payload.category)
    if payload.type == "clearCategories":
        return ClearCategories()
    return ClearSelection()


@app.on_event("startup")
async def startup_event() -> None:
    logging.basicConfig(level=logging.INFO, format="[%(levelname)s] %(message)s")


@app.get("/documents")
async def list_documents(corpus: Path | None = None) -> dict[str, Any]:
    """List all documents in corpus order."""
    searcher, _ = _services(corpus)
    documents = searcher.corpus.all_documents()
    return {
        "documents": [_document_summary(document) for document in documents],
        "count": len(documents),
    }


@app.get("/categories")
async def list_categories(corpus: Path | None = None) -> dict[str, Any]:
    searcher, _ = _services(corpus)
    return {
        "categories": [
            {"id": tag, "label": CATEGORY_LABELS.get(tag, tag.title())}
            for tag in searcher.corpus.categories()
        ]
    }


@app.post("/search")
async def search_documents(payload: SearchPayload) -> dict[str, Any]:
    searcher, _ = _services(payload.corpus)
    top_k = max(1, min(payload.top_k, 200)) if payload.top_k is not None else None
    results = searcher.search_scored(payload.query, payload.categories, limit=top_k)
    return {
        "results": [
            {**_document_summary(result.document), "score": result.score} for result in results
        ]
    }


@app.get("/documents/{doc_id}")
async def get_document(doc_id: str, corpus: Path | None = None) -> dict[str, Any]:
    """Return a document together with its linkified body."""
    _, scanner = _services(corpus)
    document = scanner.corpus.by_id(doc_id)
    if document is None:
        raise HTTPException(status_code=404, detail=f"Document {doc_id} not found")
    return _document_detail(document, scanner)


@app.get("/documents/{doc_id}/references")
async def get_references(doc_id: str, corpus: Path | None = None) -> dict[str, Any]:
    _, scanner = _services(corpus)
    document = scanner.corpus.by_id(doc_id)
    if document is None:
        raise HTTPException(status_code=404, detail=f"Document {doc_id} not found")
    return {"id": doc_id, "references": scanner.references(document)}


@app.post("/view")
async def apply_view_event(payload: ViewPayload) -> dict[str, Any]:
    """Apply one view event and return the next state with what to display."""
    searcher, scanner = _services(payload.corpus)
    state = ViewState(
        query=payload.state.query,
        categories=frozenset(payload.state.categories),
        selected_id=payload.state.selected_id,
    )
    if state.selected_id is not None and state.selected_id not in searcher.corpus:
        state = reduce(state, SelectDocument(state.selected_id), searcher.corpus)
    if payload.event is not None:
        state = reduce(state, _to_event(payload.event), searcher.corpus)

    view = render_view(state, searcher, scanner)
    response: dict[str, Any] = {
        "state": {
            "query": state.query,
            "categories": sorted(state.categories),
            "selected_id": state.selected_id,
        }
    }
    if isinstance(view, DocumentView):
        response["view"] = "document"
        response.update(_document_detail(view.document, scanner))
    else:
        response["view"] = "listing"
        response["results"] = [
            {**_document_summary(result.document), "score": result.score} for result in view.results
        ]
    return response
