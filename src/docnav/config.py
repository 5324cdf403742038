"""Application configuration defaults."""

from __future__ import annotations

import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Tuple

from docnav.index.search import DEFAULT_THRESHOLD
from docnav.linking.matchers import DEFAULT_MATCHERS
from docnav.linking.resolver import DEFAULT_POLICY

# Tag vocabulary of the reference deployment, id -> display label.
CATEGORY_LABELS = {
    "adult": "Adult",
    "pediatric": "Pediatric",
    "medical": "Medical",
    "trauma": "Trauma",
}


def _get_default_corpus_path() -> Path:
    """Get the default corpus path based on platform and execution context."""
    user_corpus = Path.home() / "Documents" / "DocNav" / "corpus.json"

    if getattr(sys, "frozen", False):
        return user_corpus

    # When running from source, prefer local data/ if it exists
    local_corpus = Path("data/corpus.json")
    if local_corpus.exists():
        return local_corpus

    return user_corpus


@dataclass(slots=True)
class AppConfig:
    corpus_path: Path | None = None
    threshold: float = DEFAULT_THRESHOLD
    matchers: Tuple[str, ...] = DEFAULT_MATCHERS
    resolve_policy: str = DEFAULT_POLICY

    def __post_init__(self) -> None:
        if self.corpus_path is None:
            self.corpus_path = _get_default_corpus_path()

    def resolve_corpus_path(self, base_dir: Path | None = None) -> Path:
        if self.corpus_path is None:
            self.corpus_path = _get_default_corpus_path()
        if Path(self.corpus_path).is_absolute() or base_dir is None:
            return Path(self.corpus_path)
        return base_dir / self.corpus_path
