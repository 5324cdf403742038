"""Command line interface for DocNav."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.text import Text

from docnav.config import CATEGORY_LABELS, AppConfig
from docnav.index.corpus import CorpusIndex, DuplicateDocumentError
from docnav.index.search import Searcher
from docnav.ingestion.corpus_loader import CorpusLoadError
from docnav.linking.matchers import build_matchers
from docnav.linking.scanner import ReferenceScanner
from docnav.web.app import app as web_app


console = Console()
app = typer.Typer(help="DocNav - fuzzy search and cross-references for a document corpus")


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="[%(levelname)s] %(message)s")


def _load_index(config: AppConfig) -> CorpusIndex:
    resolved = config.resolve_corpus_path(Path.cwd())
    if not resolved.exists():
        raise typer.BadParameter(f"Corpus not found: {resolved}")
    try:
        return CorpusIndex.from_path(resolved)
    except (CorpusLoadError, DuplicateDocumentError) as exc:
        raise typer.BadParameter(str(exc)) from exc


def _results_table(show_score: bool) -> Table:
    table = Table(show_header=True, header_style="bold magenta")
    if show_score:
        table.add_column("Score")
    table.add_column("ID")
    table.add_column("Title")
    table.add_column("Categories")
    table.add_column("Source")
    return table


@app.command()
def search(
    query: str = typer.Argument(..., help="Query text"),
    category: Optional[List[str]] = typer.Option(None, "--category", "-c", help="Required category (repeatable)"),
    corpus: Path = typer.Option(None, "--corpus", help="Corpus JSON path"),
    threshold: float = typer.Option(AppConfig().threshold, help="Acceptance threshold (0-1, lower is stricter)"),
    top_k: int = typer.Option(10, help="Number of results to display"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """Run a fuzzy search over titles, ids and bodies."""
    _setup_logging(verbose)
    config = AppConfig(corpus_path=corpus if corpus is not None else AppConfig().corpus_path, threshold=threshold)
    index = _load_index(config)
    searcher = Searcher(index, threshold=config.threshold)

    results = searcher.search_scored(query, category or (), limit=top_k)
    if not results:
        console.print("[yellow]No matches found.[/yellow]")
        return

    table = _results_table(show_score=True)
    for result in results:
        document = result.document
        score = "-" if result.score is None else f"{result.score:.4f}"
        table.add_row(score, escape(document.id), escape(document.title), ", ".join(document.categories), escape(document.source))
    console.print(table)


@app.command("list")
def list_documents(
    category: Optional[List[str]] = typer.Option(None, "--category", "-c", help="Required category (repeatable)"),
    corpus: Path = typer.Option(None, "--corpus", help="Corpus JSON path"),
) -> None:
    """List documents in corpus order, optionally filtered by category."""
    config = AppConfig(corpus_path=corpus if corpus is not None else AppConfig().corpus_path)
    index = _load_index(config)
    documents = Searcher(index).search("", category or ())
    if not documents:
        console.print("[yellow]No documents match the selected categories.[/yellow]")
        return

    table = _results_table(show_score=False)
    for document in documents:
        table.add_row(escape(document.id), escape(document.title), ", ".join(document.categories), escape(document.source))
    console.print(table)


@app.command()
def show(
    doc_id: str = typer.Argument(..., help="Document id"),
    corpus: Path = typer.Option(None, "--corpus", help="Corpus JSON path"),
    matcher: Optional[List[str]] = typer.Option(None, "--matcher", "-m", help="Enabled matcher (repeatable)"),
    policy: str = typer.Option(AppConfig().resolve_policy, help="Overlap resolution policy"),
) -> None:
    """Print a document with references to other documents highlighted."""
    config = AppConfig(
        corpus_path=corpus if corpus is not None else AppConfig().corpus_path,
        matchers=tuple(matcher) if matcher else AppConfig().matchers,
        resolve_policy=policy,
    )
    index = _load_index(config)
    try:
        scanner = ReferenceScanner(index, build_matchers(config.matchers), policy=config.resolve_policy)
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc

    document = index.by_id(doc_id)
    if document is None:
        console.print(f"[red]Document not found: {escape(doc_id)}[/red]")
        raise typer.Exit(code=1)

    console.print(f"[bold]{escape(document.title)}[/bold] ({escape(document.id)})")
    console.print(f"Source: {document.source}", markup=False)
    if document.categories:
        console.print(f"Categories: {', '.join(document.categories)}", markup=False)
    console.print()

    body = Text()
    targets = []
    for segment in scanner.linkify_document(document):
        if segment.is_reference:
            body.append(segment.text, style="bold blue underline")
            targets.append(segment.target_id)
        else:
            body.append(segment.text)
    console.print(body)

    if targets:
        console.print()
        console.print(f"References: {', '.join(dict.fromkeys(targets))}", markup=False)


@app.command()
def refs(
    doc_id: Optional[str] = typer.Argument(None, help="Document id; omit to scan the whole corpus"),
    corpus: Path = typer.Option(None, "--corpus", help="Corpus JSON path"),
    workers: int = typer.Option(1, help="Parallel scan workers for whole-corpus scans"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """Show outgoing cross-references."""
    _setup_logging(verbose)
    config = AppConfig(corpus_path=corpus if corpus is not None else AppConfig().corpus_path)
    index = _load_index(config)
    scanner = ReferenceScanner(index, build_matchers(config.matchers), policy=config.resolve_policy)

    if doc_id is not None:
        document = index.by_id(doc_id)
        if document is None:
            console.print(f"[red]Document not found: {escape(doc_id)}[/red]")
            raise typer.Exit(code=1)
        reference_map = {document.id: scanner.references(document)}
    else:
        reference_map = scanner.reference_map(workers=workers)

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Document")
    table.add_column("References")
    for source_id, targets in reference_map.items():
        table.add_row(source_id, ", ".join(targets) if targets else "-")
    console.print(table)


@app.command()
def categories(
    corpus: Path = typer.Option(None, "--corpus", help="Corpus JSON path"),
) -> None:
    """List category tags used in the corpus."""
    config = AppConfig(corpus_path=corpus if corpus is not None else AppConfig().corpus_path)
    index = _load_index(config)
    tags = index.categories()
    if not tags:
        console.print("[yellow]No categories in corpus.[/yellow]")
        return
    for tag in tags:
        console.print(f"{tag}\t{CATEGORY_LABELS.get(tag, tag.title())}", markup=False)


@app.command()
def web(
    host: str = typer.Option("127.0.0.1", help="Host interface"),
    port: int = typer.Option(8000, help="Server port"),
    corpus: Path = typer.Option(None, "--corpus", help="Corpus JSON path"),
) -> None:
    """Start the web interface."""
    try:
        import uvicorn
    except ImportError as exc:  # pragma: no cover - defensive
        raise typer.BadParameter(
            "uvicorn is not installed. Install the web extras with \"python -m pip install '.[web]'\""
        ) from exc

    config = AppConfig(corpus_path=corpus if corpus is not None else AppConfig().corpus_path)
    resolved = config.resolve_corpus_path(Path.cwd())
    if not resolved.exists():
        console.print("[yellow]Warning: corpus not found, requests will fail.[/yellow]")

    console.print(f"Starting web interface on http://{host}:{port} (corpus: {resolved})")
    web_app.state.corpus_path = resolved
    uvicorn.run(
        web_app,
        host=host,
        port=port,
        reload=False,
        log_level="info",
    )
