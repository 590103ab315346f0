"""
Markdown writer for meeting documents.

Converts a Document back into the heading convention the parser reads:

    # <title>
    Date: <iso date>          (only when the title carries no date)
    ## Quote of the Day
    ## Agenda
    ## Discussion
    ### <agenda item>
    #### <section heading>
    #### Conclusion

Parsing the output yields the same agenda items in the same order.
"""

from typing import List

from notesindex.model import AgendaItem, Document
from notesindex.parser import FENCE_RE, HEADING_RE, extract_date

ITEM_LEVEL = 3


def _heading(level: int, text: str) -> str:
    return f"{'#' * level} {text}"


def _demote_headings(text: str, below: int) -> str:
    """
    Push headings embedded in text deeper than level `below`.

    Relative depth between the embedded headings is kept; levels past 6 are
    capped. Lines inside code fences are left alone.
    """
    lines = text.split("\n")
    headings = []
    fence = None
    for index, line in enumerate(lines):
        fence_match = FENCE_RE.match(line)
        if fence is not None:
            if fence_match and fence_match.group(1)[0] == fence[0] and len(fence_match.group(1)) >= len(fence):
                fence = None
            continue
        if fence_match:
            fence = fence_match.group(1)
            continue
        heading_match = HEADING_RE.match(line)
        if heading_match:
            headings.append((index, len(heading_match.group(1)), heading_match.group(2).strip()))

    if not headings:
        return text
    shift = below + 1 - min(level for _, level, _ in headings)
    if shift <= 0:
        return text
    for index, level, heading in headings:
        lines[index] = _heading(min(6, level + shift), heading)
    return "\n".join(lines)


def _render_item(item: AgendaItem) -> List[str]:
    lines = [_heading(ITEM_LEVEL, item.heading), ""]

    for section in item.sections:
        if section.heading is not None:
            lines.append(_heading(ITEM_LEVEL + 1, section.heading))
            lines.append("")
        if section.text:
            lines.append(section.text)
            lines.append("")

    if item.conclusion is not None:
        lines.append(_heading(ITEM_LEVEL + 1, "Conclusion"))
        lines.append("")
        lines.append(_demote_headings(item.conclusion, ITEM_LEVEL + 1))
        lines.append("")

    return lines


def render_markdown(document: Document) -> str:
    """
    Render a Document as markdown notes.

    Args:
        document: Document to write out

    Returns:
        Markdown text ending with a single newline
    """
    lines = [_heading(1, document.title), ""]

    if extract_date(document.title) != document.date:
        lines.append(f"Date: {document.date.isoformat()}")
        lines.append("")

    if document.quotes:
        lines.append(_heading(2, "Quote of the Day"))
        lines.append("")
        lines.extend(f"- {quote}" for quote in document.quotes)
        lines.append("")

    if document.agenda:
        lines.append(_heading(2, "Agenda"))
        lines.append("")
        lines.extend(f"{n}. {entry}" for n, entry in enumerate(document.agenda, start=1))
        lines.append("")

    if document.items:
        lines.append(_heading(2, "Discussion"))
        lines.append("")
        for item in document.items:
            lines.extend(_render_item(item))

    return "\n".join(lines).rstrip("\n") + "\n"


def save_markdown_file(document: Document, filename: str) -> None:
    """
    Render a Document and save it to a file.

    Args:
        document: Document to write
        filename: Output file path (.md extension recommended)
    """
    text = render_markdown(document)
    with open(filename, 'w', encoding='utf-8') as f:
        f.write(text)


__all__ = ["render_markdown", "save_markdown_file"]
