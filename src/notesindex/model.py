"""
Core Meeting Notes Model Objects

Defines the fundamental data structures of the notes index.

These are pure data classes representing:
    - Code blocks (literal examples embedded in discussion)
    - Discussion sections (free-form text under an agenda item)
    - Agenda items (one topic discussed in a meeting)
    - Documents (root container, one per meeting)

ARCHITECTURAL RULE:
    These objects:
        - Know nothing about markdown, files or the index
        - Are immutable once built (frozen, tuples for sequences)
        - Are hashable, so documents can live in sets
        - Represent structure, not behavior
"""

import re
from dataclasses import dataclass, field
from datetime import date
from typing import Optional, Tuple


# `_` only counts as emphasis at a word edge; "with_expression" keeps it
_EMPHASIS_RE = re.compile(r"[`*]+|(?<!\w)_+|_+(?!\w)")
_WHITESPACE_RE = re.compile(r"\s+")


def normalize_heading(text: str) -> str:
    """
    Normalize heading text for comparison.

    Strips markdown emphasis and backticks, lowercases, collapses whitespace
    and drops a trailing colon.

    Examples:
        "`Equality`  dispatch:" -> "equality dispatch"
    """
    text = _EMPHASIS_RE.sub("", text or "")
    text = _WHITESPACE_RE.sub(" ", text).strip().lower()
    return text.rstrip(":").strip()


@dataclass(frozen=True)
class CodeBlock:
    """
    A literal code example embedded in a discussion section.

    The code is opaque: it is kept verbatim and never parsed.

    Properties:
        text: Code between the fences, without the fence lines
        language: Info string after the opening fence (e.g. "C#"), if any
    """

    text: str
    language: Optional[str] = None


@dataclass(frozen=True)
class DiscussionSection:
    """
    Free-form discussion text belonging to an agenda item.

    Properties:
        text:
            Section body, including any fenced code verbatim

        heading:
            Subheading that introduced the section.
            None for text directly under the agenda-item heading.

        code_blocks:
            Code examples found in the text, in order
    """

    text: str
    heading: Optional[str] = None
    code_blocks: Tuple[CodeBlock, ...] = ()


@dataclass(frozen=True)
class AgendaItem:
    """
    One discussion topic within a meeting document.

    Properties:
        heading: Topic heading as written in the notes
        sections: Discussion sections in document order (may be empty)
        conclusion: Decision recorded for the topic, None if absent
    """

    heading: str
    sections: Tuple[DiscussionSection, ...] = ()
    conclusion: Optional[str] = None

    @property
    def has_conclusion(self) -> bool:
        return self.conclusion is not None

    @property
    def code_blocks(self) -> Tuple[CodeBlock, ...]:
        return tuple(block for section in self.sections for block in section.code_blocks)


@dataclass(frozen=True)
class Document:
    """
    Root container for one meeting record.

    INVARIANTS:
        - items are in document order and that order is stable
        - a Document is never mutated after parsing
        - two parses of the same text compare equal

    Properties:
        date:
            Calendar date of the meeting

        title:
            Title line (without the leading '#')

        items:
            Agenda items in document order

        agenda:
            Entries listed under the "Agenda" heading, if the notes have one

        quotes:
            "Quote of the day" lines, if any

        source:
            File identifier the document was read from.
            Not part of equality: the same text from two files is the same record.
    """

    date: date
    title: str
    items: Tuple[AgendaItem, ...] = ()
    agenda: Tuple[str, ...] = ()
    quotes: Tuple[str, ...] = ()
    source: Optional[str] = field(default=None, compare=False)

    def headings(self) -> Tuple[str, ...]:
        """Agenda-item headings in document order."""
        return tuple(item.heading for item in self.items)

    def get_item(self, heading: str) -> Optional[AgendaItem]:
        """
        Retrieve an agenda item by heading.

        Args:
            heading: Heading text, compared after normalization

        Returns:
            First matching AgendaItem or None if not found
        """
        wanted = normalize_heading(heading)
        for item in self.items:
            if normalize_heading(item.heading) == wanted:
                return item
        return None
