"""
Corpus Analyzer: inventory and diagnostics over parsed meeting notes.

This module provides lightweight analysis of a set of Documents:
    - Document, item, section and code-example counts
    - Conclusion coverage (items with no recorded decision)
    - Date range and duplicate dates
    - Topics discussed in more than one meeting
    - Warning flags for notes that need attention

IMPORTANT: It does NOT modify documents. It only produces read-only reports.
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
from datetime import date
from typing import Dict, Iterable, List, Optional, Tuple

from notesindex.model import Document, normalize_heading


@dataclass
class CorpusReport:
    """Analysis report for a set of meeting documents."""

    total_documents: int = 0
    total_items: int = 0
    total_sections: int = 0
    total_code_blocks: int = 0

    # Conclusion coverage
    items_with_conclusion: int = 0
    conclusion_coverage_percent: float = 0.0
    # (document title, item heading) pairs
    items_without_conclusion: List[Tuple[str, str]] = field(default_factory=list)

    # Dates
    first_date: Optional[date] = None
    last_date: Optional[date] = None
    duplicate_dates: List[date] = field(default_factory=list)

    # Topics: normalized heading -> meeting dates it was discussed on
    recurring_topics: Dict[str, List[date]] = field(default_factory=dict)

    documents_without_items: List[str] = field(default_factory=list)

    warnings: List[str] = field(default_factory=list)

    def add_warning(self, msg: str) -> None:
        """Add a warning to the report."""
        if msg not in self.warnings:
            self.warnings.append(msg)


def analyze_corpus(documents: Iterable[Document]) -> CorpusReport:
    """
    Perform analysis of a set of Documents.

    Checks for:
    - Items missing a conclusion
    - Meetings recorded twice for the same date
    - Documents with no agenda items
    - Topics that recur across meetings

    Returns a CorpusReport with metrics and warnings.
    """
    documents = list(documents)
    report = CorpusReport(total_documents=len(documents))

    date_counts: Dict[date, int] = defaultdict(int)
    topic_dates: Dict[str, List[date]] = defaultdict(list)

    for doc in documents:
        date_counts[doc.date] += 1

        if not doc.items:
            report.documents_without_items.append(doc.title)

        for item in doc.items:
            report.total_items += 1
            report.total_sections += len(item.sections)
            report.total_code_blocks += len(item.code_blocks)

            if item.has_conclusion:
                report.items_with_conclusion += 1
            else:
                report.items_without_conclusion.append((doc.title, item.heading))

            key = normalize_heading(item.heading)
            if doc.date not in topic_dates[key]:
                topic_dates[key].append(doc.date)

    if report.total_items > 0:
        report.conclusion_coverage_percent = (report.items_with_conclusion / report.total_items) * 100

    if date_counts:
        report.first_date = min(date_counts)
        report.last_date = max(date_counts)
    report.duplicate_dates = sorted(d for d, count in date_counts.items() if count > 1)

    report.recurring_topics = {
        topic: sorted(dates)
        for topic, dates in sorted(topic_dates.items())
        if len(dates) > 1
    }

    # Warning flags

    if report.duplicate_dates:
        report.add_warning(
            f"Duplicate meeting dates: {', '.join(d.isoformat() for d in report.duplicate_dates)}"
        )

    if report.documents_without_items:
        report.add_warning(
            f"Documents without agenda items: {', '.join(report.documents_without_items)}"
        )

    if report.items_without_conclusion:
        report.add_warning(
            f"Items without conclusion: {len(report.items_without_conclusion)} of {report.total_items}"
        )

    return report


__all__ = ["CorpusReport", "analyze_corpus"]
