"""
Tests for the query index.

Tests verify that the index:
    - Finds documents by exact heading
    - Finds documents by heading keyword
    - Finds the document recorded on a date
    - Keeps load order and returns each document once
"""

from datetime import date
from pathlib import Path

import pytest

from notesindex.examples import build_example_meeting
from notesindex.index import NotesIndex, heading_keywords
from notesindex.parser import parse_document_string

DATA_DIR = Path(__file__).parent / "data"


@pytest.fixture
def corpus_index():
    return NotesIndex.from_directory(DATA_DIR)


class TestHeadingKeywords:
    """Keyword normalization."""

    def test_lowercase_and_markup(self):
        assert heading_keywords("`Equality` **dispatch**") == {"equality", "dispatch"}

    def test_keeps_language_names(self):
        assert heading_keywords("C# and C++ interop") == {"c#", "and", "c++", "interop"}

    def test_punctuation(self):
        assert heading_keywords("Records: `with` expressions") == {"records", "with", "expressions"}

    def test_identifier_with_underscore(self):
        assert heading_keywords("`with_expression` lowering") == {"with_expression", "lowering"}


class TestFindByHeading:
    """Exact heading lookup."""

    def test_equality_dispatch(self, corpus_index):
        """Exactly one meeting discussed "Equality dispatch": June 15, 2020."""
        found = corpus_index.find_by_heading("Equality dispatch")
        assert len(found) == 1
        assert "June 15, 2020" in found[0].title

    def test_normalized_match(self, corpus_index):
        found = corpus_index.find_by_heading("  equality   DISPATCH ")
        assert [d.date for d in found] == [date(2020, 6, 15)]

    def test_markup_in_heading(self, corpus_index):
        found = corpus_index.find_by_heading("Records: with expressions")
        assert [d.date for d in found] == [date(2020, 6, 17)]

    def test_partial_heading_does_not_match(self, corpus_index):
        assert corpus_index.find_by_heading("Equality") == []

    def test_no_match(self, corpus_index):
        assert corpus_index.find_by_heading("Pattern matching") == []


class TestFindByKeyword:
    """Keyword lookup over headings."""

    def test_keyword_in_several_documents(self, corpus_index):
        found = corpus_index.find_by_keyword("equality")
        assert [d.date for d in found] == [date(2020, 6, 15), date(2020, 7, 1)]

    def test_multi_word_query_needs_all_words(self, corpus_index):
        found = corpus_index.find_by_keyword("records equality")
        assert [d.date for d in found] == [date(2020, 7, 1)]

    def test_unknown_keyword(self, corpus_index):
        assert corpus_index.find_by_keyword("generics") == []

    def test_empty_query(self, corpus_index):
        assert corpus_index.find_by_keyword("  ") == []


class TestFindByDate:
    """Date lookup."""

    def test_by_date(self, corpus_index):
        doc = corpus_index.find_by_date(date(2020, 6, 17))
        assert doc is not None
        assert doc.headings()[0] == "Null-checked parameters"

    def test_by_iso_string(self, corpus_index):
        assert corpus_index.find_by_date("2020-07-01").date == date(2020, 7, 1)

    def test_missing_date(self, corpus_index):
        assert corpus_index.find_by_date(date(2021, 1, 1)) is None

    def test_bad_string(self, corpus_index):
        with pytest.raises(ValueError):
            corpus_index.find_by_date("June 15")

    def test_duplicate_date_keeps_first(self):
        first = parse_document_string("# Notes for June 15, 2020\n\n## A\n\nText.\n", source="a.md")
        second = parse_document_string("# Notes for June 15, 2020\n\n## B\n\nText.\n", source="b.md")
        index = NotesIndex([first, second])
        assert index.find_by_date(date(2020, 6, 15)) is first
        assert len(index) == 2


class TestIndexContents:
    """Listing what the index holds."""

    def test_len_and_iteration_order(self, corpus_index):
        assert len(corpus_index) == 3
        assert [d.date for d in corpus_index] == corpus_index.dates()

    def test_keywords(self, corpus_index):
        keywords = corpus_index.keywords()
        assert "dispatch" in keywords
        assert keywords == sorted(keywords)

    def test_equal_documents_returned_once(self):
        meeting = build_example_meeting()
        index = NotesIndex([meeting, build_example_meeting()])
        assert index.find_by_heading("Equality dispatch") == [meeting]
        assert index.find_by_keyword("dispatch") == [meeting]
