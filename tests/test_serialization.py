"""
Tests for serialization and deserialization of notes objects.

These tests ensure lossless JSON/YAML round-trip using the explicit
serialization functions in `notesindex.serialization`.
"""

import json
from pathlib import Path

from notesindex.examples import build_example_meeting
from notesindex.parser import parse_document_file
from notesindex.serialization import (
    document_from_json,
    document_from_yaml,
    document_to_dict,
    document_to_json,
    document_to_yaml,
)

DATA_DIR = Path(__file__).parent / "data"


def test_dict_shape():
    d = document_to_dict(build_example_meeting())
    assert d["date"] == "2020-06-15"
    assert d["items"][0]["heading"] == "Equality dispatch"
    assert d["items"][0]["sections"][0]["code_blocks"][0]["language"] == "C#"
    assert d["items"][1]["conclusion"] is None
    assert "source" not in d


def test_json_roundtrip():
    doc = build_example_meeting()
    restored = document_from_json(document_to_json(doc))
    assert restored == doc


def test_yaml_roundtrip_of_parsed_file():
    doc = parse_document_file(DATA_DIR / "2020-06-15.md")
    restored = document_from_yaml(document_to_yaml(doc))
    assert restored == doc
    assert restored.source is None


def test_json_is_valid():
    payload = json.loads(document_to_json(build_example_meeting()))
    assert payload["title"].endswith("June 15, 2020")
