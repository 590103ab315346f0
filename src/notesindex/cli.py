"""
Command-line front end: load a notes directory and query it.

Usage:
    notesindex --corpus meetings/ heading "Equality dispatch"
    notesindex --corpus meetings/ date 2020-06-15
    notesindex --config notesindex.yaml report
"""

import argparse
import json
import logging
import sys
from typing import List, Optional

import yaml

from notesindex import __version__
from notesindex.analyzer import CorpusReport, analyze_corpus
from notesindex.backends import render_markdown
from notesindex.config import ConfigError, Settings, load_settings
from notesindex.index import NotesIndex
from notesindex.model import Document
from notesindex.parser import MalformedDocument
from notesindex.serialization import document_to_dict

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_NOT_FOUND = 1
EXIT_ERROR = 2


def create_argument_parser() -> argparse.ArgumentParser:
    """Create and configure argument parser."""
    parser = argparse.ArgumentParser(prog="notesindex", description="Index and query design meeting notes")
    parser.add_argument('--version', action='version', version=f"%(prog)s {__version__}")
    parser.add_argument('--config', help='YAML settings file')
    parser.add_argument('--corpus', help='Directory of note files (overrides config)')
    parser.add_argument('--pattern', help='Glob pattern for note files (default *.md)')
    parser.add_argument('--skip-malformed', action='store_true', help='Skip files without title/date instead of failing')
    parser.add_argument('-v', '--verbose', action='store_true', help='Log progress')

    commands = parser.add_subparsers(dest='command', required=True)
    commands.add_parser('list', help='List meetings by date')

    heading = commands.add_parser('heading', help='Meetings with an agenda item of exactly this heading')
    heading.add_argument('text')

    keyword = commands.add_parser('keyword', help='Meetings with the keyword in an agenda-item heading')
    keyword.add_argument('word')

    on_date = commands.add_parser('date', help='Agenda of the meeting held on a date')
    on_date.add_argument('when', metavar='YYYY-MM-DD')

    show = commands.add_parser('show', help='Print a meeting as markdown')
    show.add_argument('when', metavar='YYYY-MM-DD')

    export = commands.add_parser('export', help='Dump all meetings as JSON or YAML')
    export.add_argument('--format', choices=['json', 'yaml'], default='json')

    commands.add_parser('report', help='Corpus statistics and warnings')
    return parser


def resolve_settings(args: argparse.Namespace) -> Settings:
    settings = load_settings(args.config) if args.config else Settings()
    return settings.override(
        corpus_dir=args.corpus,
        pattern=args.pattern,
        on_error='skip' if args.skip_malformed else None,
    )


def _summary_line(doc: Document) -> str:
    return f"{doc.date.isoformat()}  {doc.title}  ({len(doc.items)} item(s))"


def print_report(report: CorpusReport) -> None:
    """Pretty-print a CorpusReport."""
    print("=" * 70)
    print("CORPUS REPORT")
    print("=" * 70)
    print(f"  Documents:             {report.total_documents}")
    print(f"  Agenda Items:          {report.total_items}")
    print(f"  Discussion Sections:   {report.total_sections}")
    print(f"  Code Examples:         {report.total_code_blocks}")
    if report.first_date:
        print(f"  Date Range:            {report.first_date.isoformat()} .. {report.last_date.isoformat()}")
    print(f"  Conclusion Coverage:   {report.conclusion_coverage_percent:.1f}%")
    print()

    if report.recurring_topics:
        print("  Recurring Topics:")
        for topic, dates in report.recurring_topics.items():
            print(f"    {topic}: {', '.join(d.isoformat() for d in dates)}")
        print()

    if report.warnings:
        print("  Warnings:")
        for i, warning in enumerate(report.warnings, 1):
            print(f"  {i}. {warning}")
    else:
        print("  No warnings")


def run(args: argparse.Namespace, index: NotesIndex) -> int:
    if args.command == 'list':
        for doc in sorted(index, key=lambda d: d.date):
            print(_summary_line(doc))
        return EXIT_OK

    if args.command in ('heading', 'keyword'):
        if args.command == 'heading':
            query = args.text
            found = index.find_by_heading(query)
        else:
            query = args.word
            found = index.find_by_keyword(query)
        if not found:
            logger.warning("No meeting matches %s '%s'", args.command, query)
            return EXIT_NOT_FOUND
        for doc in found:
            print(_summary_line(doc))
        return EXIT_OK

    if args.command in ('date', 'show'):
        doc = index.find_by_date(args.when)
        if doc is None:
            logger.warning("No meeting recorded on %s", args.when)
            return EXIT_NOT_FOUND
        if args.command == 'show':
            sys.stdout.write(render_markdown(doc))
        else:
            print(doc.title)
            for item in doc.items:
                marker = "✓" if item.has_conclusion else " "
                print(f"  [{marker}] {item.heading}")
        return EXIT_OK

    if args.command == 'export':
        payload = [document_to_dict(doc) for doc in index]
        if args.format == 'yaml':
            sys.stdout.write(yaml.safe_dump(payload, sort_keys=False, allow_unicode=True))
        else:
            print(json.dumps(payload, indent=2, ensure_ascii=False))
        return EXIT_OK

    if args.command == 'report':
        print_report(analyze_corpus(index))
        return EXIT_OK

    raise ValueError(f"Unknown command: {args.command}")


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = create_argument_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format='%(asctime)s %(levelname)s %(message)s',
    )

    try:
        settings = resolve_settings(args)
        index = NotesIndex.from_directory(
            settings.corpus_dir,
            pattern=settings.pattern,
            on_error=settings.on_error,
        )
        return run(args, index)
    except MalformedDocument as e:
        logger.error("Malformed document: %s", e)
        return EXIT_ERROR
    except (ConfigError, FileNotFoundError, ValueError) as e:
        logger.error("%s", e)
        return EXIT_ERROR


if __name__ == "__main__":
    sys.exit(main())
