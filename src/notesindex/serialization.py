"""
Serialization helpers for notes objects (Document, AgendaItem, etc.).

Provides lossless JSON/YAML round-trip via intermediate dict representation.
Dates are written as ISO strings. The document source is not serialized.
"""
from __future__ import annotations

import json
from datetime import date
from typing import Any, Dict

import yaml

from notesindex.model import (
    AgendaItem,
    CodeBlock,
    DiscussionSection,
    Document,
)


def code_block_to_dict(c: CodeBlock) -> Dict[str, Any]:
    return {"language": c.language, "text": c.text}


def code_block_from_dict(d: Dict[str, Any]) -> CodeBlock:
    return CodeBlock(text=d.get("text", ""), language=d.get("language"))


def section_to_dict(s: DiscussionSection) -> Dict[str, Any]:
    return {
        "heading": s.heading,
        "text": s.text,
        "code_blocks": [code_block_to_dict(c) for c in s.code_blocks],
    }


def section_from_dict(d: Dict[str, Any]) -> DiscussionSection:
    return DiscussionSection(
        text=d.get("text", ""),
        heading=d.get("heading"),
        code_blocks=tuple(code_block_from_dict(c) for c in d.get("code_blocks", [])),
    )


def item_to_dict(i: AgendaItem) -> Dict[str, Any]:
    return {
        "heading": i.heading,
        "sections": [section_to_dict(s) for s in i.sections],
        "conclusion": i.conclusion,
    }


def item_from_dict(d: Dict[str, Any]) -> AgendaItem:
    return AgendaItem(
        heading=d["heading"],
        sections=tuple(section_from_dict(s) for s in d.get("sections", [])),
        conclusion=d.get("conclusion"),
    )


def document_to_dict(doc: Document) -> Dict[str, Any]:
    return {
        "date": doc.date.isoformat(),
        "title": doc.title,
        "agenda": list(doc.agenda),
        "quotes": list(doc.quotes),
        "items": [item_to_dict(i) for i in doc.items],
    }


def document_from_dict(d: Dict[str, Any]) -> Document:
    raw_date = d["date"]
    # YAML loads unquoted ISO dates as date objects already
    meeting_date = raw_date if isinstance(raw_date, date) else date.fromisoformat(raw_date)
    return Document(
        date=meeting_date,
        title=d.get("title", ""),
        items=tuple(item_from_dict(i) for i in d.get("items", [])),
        agenda=tuple(d.get("agenda", [])),
        quotes=tuple(d.get("quotes", [])),
    )


def document_to_json(doc: Document) -> str:
    return json.dumps(document_to_dict(doc), sort_keys=True)


def document_from_json(s: str) -> Document:
    d = json.loads(s)
    return document_from_dict(d)


def document_to_yaml(doc: Document) -> str:
    return yaml.safe_dump(document_to_dict(doc), sort_keys=False, allow_unicode=True)


def document_from_yaml(s: str) -> Document:
    d = yaml.safe_load(s)
    return document_from_dict(d)
