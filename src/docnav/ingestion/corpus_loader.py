"""Corpus loading from JSON files or already-deserialized mappings.

Accepts the canonical record shape ``{title, body, source, categories}`` as
well as the field names used by the original protocol export
(``name``, ``content``, ``source_file``).
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Iterable, List, Mapping, Tuple

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError, field_validator

from docnav.models import PLACEHOLDER_TITLE, Document

LOGGER = logging.getLogger(__name__)


class CorpusLoadError(ValueError):
    """Raised when a corpus cannot be turned into documents."""


class DocumentRecord(BaseModel):
    """One raw corpus entry as delivered by the external loader."""

    model_config = ConfigDict(extra="ignore")

    title: str | None = Field(default=None, validation_alias=AliasChoices("title", "name"))
    body: str = Field(default="", validation_alias=AliasChoices("body", "content"))
    source: str = Field(default="", validation_alias=AliasChoices("source", "source_file"))
    categories: List[str] | None = None

    @field_validator("body", "source", mode="before")
    @classmethod
    def _none_to_empty(cls, value: Any) -> Any:
        return "" if value is None else value

    def to_document(self, doc_id: str) -> Document:
        title = self.title if self.title and self.title.strip() else PLACEHOLDER_TITLE
        categories: Tuple[str, ...] = tuple(dict.fromkeys(self.categories or ()))
        return Document(
            id=doc_id,
            title=title,
            body=self.body,
            source=self.source,
            categories=categories,
        )


def _reject_duplicate_keys(pairs: List[Tuple[str, Any]]) -> dict[str, Any]:
    result: dict[str, Any] = {}
    for key, value in pairs:
        if key in result:
            raise CorpusLoadError(f"Duplicate key in corpus: {key!r}")
        result[key] = value
    return result


def _build(doc_id: str, raw: Any) -> Document:
    if not isinstance(raw, Mapping):
        raise CorpusLoadError(f"Record {doc_id!r} must be an object, got {type(raw).__name__}")
    try:
        return DocumentRecord.model_validate(raw).to_document(doc_id)
    except ValidationError as exc:
        raise CorpusLoadError(f"Invalid record {doc_id!r}: {exc}") from exc


def documents_from_mapping(data: Mapping[str, Any]) -> List[Document]:
    """Convert an ``id -> record`` mapping into documents, keeping key order."""
    return [_build(str(doc_id), raw) for doc_id, raw in data.items()]


def documents_from_records(records: Iterable[Any]) -> List[Document]:
    """Convert a sequence of records that carry their own ``id`` field."""
    documents: List[Document] = []
    seen: set[str] = set()
    for position, raw in enumerate(records):
        if not isinstance(raw, Mapping) or raw.get("id") in (None, ""):
            raise CorpusLoadError(f"Record at position {position} has no id")
        doc_id = str(raw["id"])
        if doc_id in seen:
            raise CorpusLoadError(f"Duplicate document id in corpus: {doc_id!r}")
        seen.add(doc_id)
        documents.append(_build(doc_id, raw))
    return documents


def load_corpus(path: Path) -> List[Document]:
    """Read a JSON corpus file.

    The top level is either an object keyed by document id or a list of
    records with an ``id`` field. Order is preserved in both cases.
    """
    if not path.exists():
        raise CorpusLoadError(f"Corpus not found: {path}")

    try:
        with path.open("r", encoding="utf-8") as handle:
            data = json.load(handle, object_pairs_hook=_reject_duplicate_keys)
    except json.JSONDecodeError as exc:
        raise CorpusLoadError(f"Corpus {path} is not valid JSON: {exc}") from exc

    if isinstance(data, dict):
        documents = documents_from_mapping(data)
    elif isinstance(data, list):
        documents = documents_from_records(data)
    else:
        raise CorpusLoadError(
            f"Corpus {path} must contain an object or a list, got {type(data).__name__}"
        )

    LOGGER.info("Loaded %d documents from %s", len(documents), path)
    return documents
