"""Static HTML frontend for DocNav web UI."""

from __future__ import annotations

import html
from functools import lru_cache
from importlib.resources import files
from pathlib import Path

from fastapi import APIRouter, Request
from fastapi.responses import HTMLResponse

from docnav import __version__

router = APIRouter()


@lru_cache(maxsize=1)
def _load_template() -> str:
    template = files("docnav.web").joinpath("templates", "index.html")
    return template.read_text(encoding="utf-8")


def render_index(corpus_path: Path | None) -> str:
    """Fill the page header with the package version and the served corpus name."""
    corpus = corpus_path.name if corpus_path is not None else "default corpus"
    return (
        _load_template()
        .replace("{{ version }}", html.escape(__version__))
        .replace("{{ corpus }}", html.escape(corpus))
    )


@router.get("/", response_class=HTMLResponse)
async def index(request: Request) -> HTMLResponse:
    corpus_path = request.app.state.corpus_path
    return HTMLResponse(content=render_index(Path(corpus_path) if corpus_path is not None else None))
