"""
Markdown Parser for meeting notes (Raw Text → Document).

Converts design-meeting notes written with markdown headings into
immutable Document objects.

Heading convention:
    # <title containing the meeting date>
    ## Agenda                 (list entries → Document.agenda)
    ## Quote of the Day       (lines → Document.quotes)
    ## Discussion             (container: items are one level below)
    ### <agenda item>
    #### <discussion section>
    #### Conclusion           (→ AgendaItem.conclusion)

Syntax Notes:
    - Without a Discussion container, agenda items are level-2 headings
    - "**Conclusion**:" or "Conclusion:" at the start of a line also opens
      the conclusion, up to the next heading
    - Nothing inside ``` or ~~~ fences is treated as structure
    - If the title carries no date, a "Date: ..." line before the first
      agenda item is used instead
"""

import logging
import re
import warnings
from dataclasses import dataclass, field
from datetime import date
from pathlib import Path
from typing import List, Optional, Tuple, Union

from notesindex.model import (
    AgendaItem,
    CodeBlock,
    DiscussionSection,
    Document,
    normalize_heading,
)

logger = logging.getLogger(__name__)


class MalformedDocument(Exception):
    """Raised when a document lacks its title or date."""

    def __init__(self, message: str, source: Optional[str] = None):
        self.message = message
        self.source = source
        if source:
            super().__init__(f"{source}: {message}")
        else:
            super().__init__(message)


AGENDA_HEADINGS = {"agenda"}
QUOTE_HEADINGS = {"quote of the day", "quotes of the day", "quote(s) of the day"}
CONTAINER_HEADINGS = {"discussion"}
CONCLUSION_HEADINGS = {"conclusion", "conclusions", "resolution", "decision"}

ON_ERROR_POLICIES = ("raise", "skip")

_MONTHS = {
    "january": 1, "february": 2, "march": 3, "april": 4, "may": 5, "june": 6,
    "july": 7, "august": 8, "september": 9, "october": 10, "november": 11,
    "december": 12,
    "jan": 1, "feb": 2, "mar": 3, "apr": 4, "jun": 6, "jul": 7, "aug": 8,
    "sep": 9, "sept": 9, "oct": 10, "nov": 11, "dec": 12,
}
# Longest names first so "June" wins over "Jun"
_MONTH_PATTERN = "|".join(sorted(_MONTHS, key=len, reverse=True))

_ISO_DATE_RE = re.compile(r"\b(\d{4})-(\d{1,2})-(\d{1,2})\b")
_MONTH_FIRST_RE = re.compile(
    rf"\b({_MONTH_PATTERN})\.?\s+(\d{{1,2}})(?:st|nd|rd|th)?,?\s+(\d{{4}})\b",
    re.IGNORECASE,
)
_DAY_FIRST_RE = re.compile(
    rf"\b(\d{{1,2}})(?:st|nd|rd|th)?\s+({_MONTH_PATTERN})\.?,?\s+(\d{{4}})\b",
    re.IGNORECASE,
)
_DATE_LINE_RE = re.compile(r"^\s*(?:\*\*|__)?date(?:\*\*|__)?\s*:\s*(?:\*\*|__)?\s*(.+)$", re.IGNORECASE)

HEADING_RE = re.compile(r"^(#{1,6})[ \t]+(.*?)(?:[ \t]+#+)?[ \t]*$")
FENCE_RE = re.compile(r"^ {0,3}(`{3,}|~{3,})\s*([^`\s]*)")
_LIST_ENTRY_RE = re.compile(r"^\s*(?:[-*+]|\d+[.)])\s+(.*\S)\s*$")
_BOLD_CONCLUSION_RE = re.compile(
    r"^\s*(?:\*\*|__)(?:conclusions?|resolution|decision)\s*:?\s*(?:\*\*|__)\s*:?\s*(.*)$",
    re.IGNORECASE,
)
_PLAIN_CONCLUSION_RE = re.compile(r"^\s*(?:conclusions?|resolution|decision)\s*:\s*(.*)$", re.IGNORECASE)


def extract_date(text: str) -> Optional[date]:
    """
    Find the first valid calendar date in a line of text.

    Recognizes:
        June 15, 2020 / June 15th, 2020 / Jun 15 2020
        15 June 2020
        2020-06-15

    Returns:
        date or None if no valid date is present
    """
    if not text:
        return None

    candidates = []
    for match in _ISO_DATE_RE.finditer(text):
        year, month, day = (int(g) for g in match.groups())
        candidates.append((match.start(), year, month, day))
    for match in _MONTH_FIRST_RE.finditer(text):
        month_name, day, year = match.groups()
        candidates.append((match.start(), int(year), _MONTHS[month_name.lower()], int(day)))
    for match in _DAY_FIRST_RE.finditer(text):
        day, month_name, year = match.groups()
        candidates.append((match.start(), int(year), _MONTHS[month_name.lower()], int(day)))

    for _, year, month, day in sorted(candidates):
        try:
            return date(year, month, day)
        except ValueError:
            # e.g. "February 30, 2020"; keep looking
            continue
    return None


@dataclass
class _Block:
    """A heading and the raw lines up to the next heading."""
    level: int
    heading: Optional[str]
    lines: List[str] = field(default_factory=list)


def _split_blocks(text: str) -> List[_Block]:
    """Split text into heading blocks, ignoring headings inside code fences."""
    blocks = [_Block(level=0, heading=None)]
    fence: Optional[str] = None

    for line in text.splitlines():
        fence_match = FENCE_RE.match(line)
        if fence is not None:
            if fence_match and fence_match.group(1)[0] == fence[0] and len(fence_match.group(1)) >= len(fence):
                fence = None
            blocks[-1].lines.append(line)
            continue
        if fence_match:
            fence = fence_match.group(1)
            blocks[-1].lines.append(line)
            continue

        heading_match = HEADING_RE.match(line)
        if heading_match:
            blocks.append(_Block(level=len(heading_match.group(1)), heading=heading_match.group(2).strip()))
        else:
            blocks[-1].lines.append(line)

    return blocks


def _trim(lines: List[str]) -> str:
    """Join lines, dropping leading/trailing blank lines and trailing spaces."""
    return "\n".join(line.rstrip() for line in lines).strip("\n")


def _extract_code_blocks(lines: List[str]) -> Tuple[CodeBlock, ...]:
    blocks = []
    fence: Optional[str] = None
    language: Optional[str] = None
    body: List[str] = []

    for line in lines:
        fence_match = FENCE_RE.match(line)
        if fence is None:
            if fence_match:
                fence = fence_match.group(1)
                language = fence_match.group(2) or None
                body = []
            continue
        if fence_match and fence_match.group(1)[0] == fence[0] and len(fence_match.group(1)) >= len(fence):
            blocks.append(CodeBlock(text="\n".join(body), language=language))
            fence = None
        else:
            body.append(line)

    if fence is not None:
        # Unterminated fence runs to the end of the section
        blocks.append(CodeBlock(text="\n".join(body), language=language))
    return tuple(blocks)


def _split_inline_conclusion(lines: List[str]) -> Tuple[List[str], Optional[List[str]]]:
    """
    Split body lines at an inline conclusion marker.

    Returns:
        (discussion lines, conclusion lines or None if there is no marker)
    """
    fence: Optional[str] = None
    for index, line in enumerate(lines):
        fence_match = FENCE_RE.match(line)
        if fence is not None:
            if fence_match and fence_match.group(1)[0] == fence[0] and len(fence_match.group(1)) >= len(fence):
                fence = None
            continue
        if fence_match:
            fence = fence_match.group(1)
            continue

        marker = _BOLD_CONCLUSION_RE.match(line) or _PLAIN_CONCLUSION_RE.match(line)
        if marker:
            rest = [marker.group(1)] if marker.group(1).strip() else []
            return lines[:index], rest + lines[index + 1:]
    return lines, None


def _list_entries(lines: List[str]) -> List[str]:
    entries = []
    for line in lines:
        match = _LIST_ENTRY_RE.match(line)
        if match:
            entries.append(match.group(1).strip())
    return entries


def _quote_lines(lines: List[str]) -> List[str]:
    quotes = []
    for line in lines:
        stripped = line.strip().lstrip(">").strip()
        match = _LIST_ENTRY_RE.match(stripped)
        if match:
            stripped = match.group(1).strip()
        if stripped:
            quotes.append(stripped)
    return quotes


class _ItemBuilder:
    """Accumulates one agenda item while walking blocks."""

    def __init__(self, heading: str):
        self.heading = heading
        self.sections: List[DiscussionSection] = []
        self.conclusion_parts: List[str] = []
        self.conclusion_level: Optional[int] = None

    def add_section(self, heading: Optional[str], lines: List[str]) -> None:
        discussion, conclusion = _split_inline_conclusion(lines)
        text = _trim(discussion)
        if heading is not None or text:
            self.sections.append(DiscussionSection(
                text=text,
                heading=heading,
                code_blocks=_extract_code_blocks(discussion),
            ))
        if conclusion is not None:
            self.add_conclusion(conclusion)

    def add_conclusion(self, lines: List[str]) -> None:
        text = _trim(lines)
        if text:
            self.conclusion_parts.append(text)

    def build(self) -> AgendaItem:
        conclusion = "\n\n".join(self.conclusion_parts) if self.conclusion_parts else None
        if not self.sections and conclusion is None:
            warnings.warn(f"Agenda item '{self.heading}' has no content", UserWarning)
        return AgendaItem(heading=self.heading, sections=tuple(self.sections), conclusion=conclusion)


def _find_item_level(blocks: List[_Block]) -> int:
    for block in blocks:
        if block.heading is not None and normalize_heading(block.heading) in CONTAINER_HEADINGS:
            return block.level + 1
    return 2


def _find_date_line(lines: List[str]) -> Optional[date]:
    for line in lines:
        match = _DATE_LINE_RE.match(line)
        if match:
            found = extract_date(match.group(1))
            if found is not None:
                return found
    return None


def parse_document_string(text: str, source: Optional[str] = None) -> Document:
    """
    Parse meeting-notes text into a Document.

    Args:
        text: Raw document text
        source: Optional file identifier, attached to the Document and to errors

    Returns:
        Document with agenda items in document order

    Raises:
        MalformedDocument: If the title or the meeting date is missing
    """
    # Byte order mark left by editors that save "UTF-8 with BOM"
    text = (text or "").lstrip("\ufeff")
    if not text or not text.strip():
        raise MalformedDocument("document is empty", source=source)

    blocks = _split_blocks(text)

    title_index = next(
        (i for i, block in enumerate(blocks) if block.level == 1),
        None,
    )
    if title_index is None:
        raise MalformedDocument("no title heading found", source=source)

    title_block = blocks[title_index]
    title = title_block.heading
    body_blocks = blocks[title_index + 1:]
    item_level = _find_item_level(body_blocks)

    meeting_date = extract_date(title)
    if meeting_date is None:
        # Preamble, the title body and front matter may carry a "Date:" line
        leading = list(blocks[0].lines) + list(title_block.lines)
        for block in body_blocks:
            if block.level > item_level or normalize_heading(block.heading) not in (
                AGENDA_HEADINGS | QUOTE_HEADINGS | CONTAINER_HEADINGS
            ):
                break
            leading.extend(block.lines)
        meeting_date = _find_date_line(leading)
    if meeting_date is None:
        raise MalformedDocument(f"no meeting date found in title '{title}'", source=source)

    agenda: List[str] = []
    quotes: List[str] = []
    items: List[AgendaItem] = []
    current: Optional[_ItemBuilder] = None

    for block in body_blocks:
        name = normalize_heading(block.heading)

        if block.level <= item_level:
            if current is not None:
                items.append(current.build())
                current = None

            if name in AGENDA_HEADINGS:
                agenda.extend(_list_entries(block.lines))
            elif name in QUOTE_HEADINGS:
                quotes.extend(_quote_lines(block.lines))
            elif name in CONTAINER_HEADINGS:
                if _trim(block.lines):
                    logger.debug("Ignoring text under '%s' heading in %s", block.heading, source or "<string>")
            else:
                current = _ItemBuilder(block.heading)
                current.add_section(None, block.lines)
            continue

        if current is None:
            logger.debug("Ignoring '%s' outside any agenda item in %s", block.heading, source or "<string>")
            continue

        if current.conclusion_level is not None and block.level > current.conclusion_level:
            current.add_conclusion([block.level * "#" + " " + block.heading] + block.lines)
        elif name in CONCLUSION_HEADINGS:
            current.conclusion_level = block.level
            current.add_conclusion(block.lines)
        else:
            current.conclusion_level = None
            current.add_section(block.heading, block.lines)

    if current is not None:
        items.append(current.build())

    seen = set()
    for item in items:
        key = normalize_heading(item.heading)
        if key in seen:
            warnings.warn(f"Duplicate agenda item heading '{item.heading}' in '{title}'", UserWarning)
        seen.add(key)

    return Document(
        date=meeting_date,
        title=title,
        items=tuple(items),
        agenda=tuple(agenda),
        quotes=tuple(quotes),
        source=source,
    )


def parse_document_file(filepath: Union[str, Path]) -> Document:
    """
    Parse a notes file into a Document.

    Args:
        filepath: Path to the markdown file

    Returns:
        Document whose source is the file path

    Raises:
        FileNotFoundError: If file doesn't exist
        MalformedDocument: If the file is not UTF-8 text or parsing fails
    """
    try:
        with open(filepath, 'r', encoding='utf-8-sig') as f:
            content = f.read()
    except FileNotFoundError:
        raise FileNotFoundError(f"Notes file not found: {filepath}")
    except UnicodeDecodeError as e:
        raise MalformedDocument(f"not valid UTF-8 text: {e}", source=str(filepath))

    return parse_document_string(content, source=str(filepath))


def load_directory(
    directory: Union[str, Path],
    pattern: str = "*.md",
    on_error: str = "raise",
) -> List[Document]:
    """
    Parse every matching file in a directory.

    Files are read in name order, so the result order is stable.

    Args:
        directory: Corpus directory
        pattern: Glob pattern for note files
        on_error: "raise" to propagate the first MalformedDocument,
                  "skip" to log it and continue

    Returns:
        Parsed documents in file-name order

    Raises:
        ValueError: If on_error is not a known policy
        FileNotFoundError: If the directory doesn't exist
        MalformedDocument: On the first malformed file when on_error="raise"
    """
    if on_error not in ON_ERROR_POLICIES:
        raise ValueError(f"Unknown on_error policy '{on_error}', expected one of {ON_ERROR_POLICIES}")

    root = Path(directory)
    if not root.is_dir():
        raise FileNotFoundError(f"Notes directory not found: {directory}")

    paths = sorted(p for p in root.glob(pattern) if p.is_file())
    logger.info("Loading %d note file(s) from %s", len(paths), root)

    documents = []
    for path in paths:
        try:
            documents.append(parse_document_file(path))
        except MalformedDocument as e:
            if on_error == "raise":
                raise
            logger.warning("Skipping malformed document %s", e)

    return documents


__all__ = [
    "MalformedDocument",
    "extract_date",
    "parse_document_string",
    "parse_document_file",
    "load_directory",
]
