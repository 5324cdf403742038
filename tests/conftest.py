"""Shared fixtures: a small protocol corpus in the original export format."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from docnav.index.corpus import CorpusIndex

SAMPLE_CORPUS = {
    "1-1": {
        "name": "Cardiac Arrest",
        "content": (
            "Cardiac Arrest is time critical. Begin CPR immediately. "
            "See Airway Management and 2.2 for details. After ROSC follow 7.21. "
            "Repeat 1.1 as needed."
        ),
        "source_file": "adult_medical.pdf",
        "categories": ["adult", "medical"],
    },
    "2-2": {
        "name": "Airway Management",
        "content": "Secure the airway. The CPRotocol handout is unrelated. If pulses are lost go to cardiac arrest.",
        "source_file": "adult_medical.pdf",
        "categories": ["adult"],
    },
    "3-1": {
        "name": "CPR",
        "content": "Push hard and fast.",
        "source_file": "pediatric.pdf",
        "categories": ["pediatric"],
    },
    "7-21": {
        "name": "Post Resuscitation Care",
        "content": "Maintain perfusion after Cardiac Arrest.",
        "source_file": "trauma.pdf",
        "categories": ["adult", "trauma"],
    },
    "9-9": {
        "name": "",
        "content": "Misc notes about Cardiac Arrest.",
        "source_file": "misc.pdf",
    },
}


@pytest.fixture
def corpus_index() -> CorpusIndex:
    return CorpusIndex.from_mapping(SAMPLE_CORPUS)


@pytest.fixture
def corpus_file(tmp_path: Path) -> Path:
    path = tmp_path / "corpus.json"
    path.write_text(json.dumps(SAMPLE_CORPUS), encoding="utf-8")
    return path


@pytest.fixture
def sample_corpus() -> dict:
    return SAMPLE_CORPUS
