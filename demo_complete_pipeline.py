#!/usr/bin/env python3
"""
Complete Pipeline Demo: Notes → Documents → Index → Report → Markdown

Shows the full workflow:
1. Parse a directory of meeting notes
2. Query the index by heading, keyword and date
3. Analyze the corpus
4. Write a meeting back out as markdown
"""

import argparse

from notesindex.analyzer import analyze_corpus
from notesindex.backends import render_markdown
from notesindex.index import NotesIndex


def main():
    parser = argparse.ArgumentParser(description="Run the notes pipeline over a directory")
    parser.add_argument("corpus", nargs="?", default="tests/data", help="Directory of .md notes")
    parser.add_argument("--heading", default="Equality dispatch")
    args = parser.parse_args()

    print("=" * 80)
    print("COMPLETE PIPELINE DEMO: Notes → Index → Report → Markdown")
    print("=" * 80)

    # =========================================================================
    # STEP 1: Parse notes
    # =========================================================================
    print("\n1. PARSING NOTES...")
    index = NotesIndex.from_directory(args.corpus, on_error="skip")
    print(f"   ✓ Documents: {len(index)}")
    print(f"   ✓ Keywords: {len(index.keywords())}")

    # =========================================================================
    # STEP 2: Query
    # =========================================================================
    print(f"\n2. MEETINGS DISCUSSING '{args.heading}'...")
    found = index.find_by_heading(args.heading)
    for doc in found:
        print(f"   ✓ {doc.date.isoformat()}  {doc.title}")
    if not found:
        print("   (none)")

    # =========================================================================
    # STEP 3: Analyze
    # =========================================================================
    print("\n3. ANALYZING CORPUS...")
    report = analyze_corpus(index)
    print(f"   ✓ Agenda items: {report.total_items}")
    print(f"   ✓ Conclusion coverage: {report.conclusion_coverage_percent:.1f}%")
    for warning in report.warnings:
        print(f"      - {warning}")

    # =========================================================================
    # STEP 4: Markdown
    # =========================================================================
    if found:
        print("\n4. FIRST MATCH AS MARKDOWN:")
        print("-" * 80)
        lines = render_markdown(found[0]).splitlines()
        for line in lines[:20]:
            print(f"   {line}")
        if len(lines) > 20:
            print(f"   ... ({len(lines) - 20} more lines)")

    print("\n" + "=" * 80)
    print("PIPELINE COMPLETE!")
    print("=" * 80)


if __name__ == "__main__":
    main()
