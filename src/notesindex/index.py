"""
Query index over parsed meeting documents.

Builds a keyword map from agenda-item headings and answers:
    - which documents discussed a heading (exact, normalized match)
    - which documents mention a keyword in any heading
    - which document was recorded on a given date

IMPORTANT: The index is read-only. It never modifies documents and
does no ranking or fuzzy matching.
"""

from __future__ import annotations

import logging
import re
from collections import defaultdict
from datetime import date
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Optional, Set, Union

from notesindex.model import Document, normalize_heading
from notesindex.parser import load_directory

logger = logging.getLogger(__name__)

# Word characters plus '#', '+', '.' inside a token so "C#" and "C++" survive
_KEYWORD_RE = re.compile(r"[0-9a-z_]+(?:[#+.]+[0-9a-z_]+)*[#+]*")


def heading_keywords(heading: str) -> Set[str]:
    """
    Normalized keywords of a heading.

    Examples:
        "`Equality` dispatch" -> {"equality", "dispatch"}
        "C# 9 records" -> {"c#", "9", "records"}
    """
    return set(_KEYWORD_RE.findall(normalize_heading(heading)))


class NotesIndex:
    """
    In-memory lookup structure over a set of Documents.

    Documents keep their load order; every lookup returns documents in
    that order, each at most once.
    """

    def __init__(self, documents: Iterable[Document]):
        self._documents: List[Document] = []
        self._keywords: Dict[str, Set[Document]] = defaultdict(set)
        self._headings: Dict[str, List[Document]] = defaultdict(list)
        self._by_date: Dict[date, Document] = {}

        for document in documents:
            self._add(document)

    @classmethod
    def from_directory(
        cls,
        directory: Union[str, Path],
        pattern: str = "*.md",
        on_error: str = "raise",
    ) -> NotesIndex:
        """Load every note file in a directory and index it."""
        return cls(load_directory(directory, pattern=pattern, on_error=on_error))

    def _add(self, document: Document) -> None:
        self._documents.append(document)

        for heading in document.headings():
            key = normalize_heading(heading)
            if document not in self._headings[key]:
                self._headings[key].append(document)
            for keyword in heading_keywords(heading):
                self._keywords[keyword].add(document)

        if document.date in self._by_date:
            logger.warning(
                "Duplicate meeting date %s: keeping '%s', ignoring '%s' for date lookup",
                document.date.isoformat(),
                self._by_date[document.date].source or self._by_date[document.date].title,
                document.source or document.title,
            )
        else:
            self._by_date[document.date] = document

    def _in_load_order(self, matches: Set[Document]) -> List[Document]:
        # Equal documents from different files count once, as the first loaded
        ordered: List[Document] = []
        for document in self._documents:
            if document in matches and document not in ordered:
                ordered.append(document)
        return ordered

    def find_by_heading(self, text: str) -> List[Document]:
        """
        Documents with an agenda item whose heading matches exactly.

        Args:
            text: Heading text, compared after normalization

        Returns:
            Matching documents in load order (empty list if none)
        """
        return list(self._headings.get(normalize_heading(text), []))

    def find_by_keyword(self, word: str) -> List[Document]:
        """
        Documents with the keyword in any agenda-item heading.

        A multi-word query matches documents containing all of its keywords.
        """
        keywords = heading_keywords(word)
        if not keywords:
            return []
        matches: Optional[Set[Document]] = None
        for keyword in keywords:
            found = self._keywords.get(keyword, set())
            matches = set(found) if matches is None else matches & found
        return self._in_load_order(matches or set())

    def find_by_date(self, when: Union[date, str]) -> Optional[Document]:
        """
        Document recorded on a date.

        Args:
            when: date or ISO string ("2020-06-15")

        Returns:
            Document or None if no meeting was recorded that day

        Raises:
            ValueError: If a string is not an ISO date
        """
        if isinstance(when, str):
            when = date.fromisoformat(when.strip())
        return self._by_date.get(when)

    def keywords(self) -> List[str]:
        """All indexed keywords, sorted."""
        return sorted(self._keywords)

    def dates(self) -> List[date]:
        """All meeting dates, sorted."""
        return sorted(self._by_date)

    @property
    def documents(self) -> List[Document]:
        return list(self._documents)

    def __len__(self) -> int:
        return len(self._documents)

    def __iter__(self) -> Iterator[Document]:
        return iter(self._documents)


__all__ = ["NotesIndex", "heading_keywords"]
