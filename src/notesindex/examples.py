"""
Example document builder for demos and tests.

Builds a language design meeting with two agenda items: one with a
decision and a code example, one left open without a conclusion.
"""
from datetime import date

from notesindex.model import AgendaItem, CodeBlock, DiscussionSection, Document


def build_example_meeting(meeting_date: date = date(2020, 6, 15)) -> Document:
    title = f"C# Language Design Notes for {meeting_date:%B} {meeting_date.day}, {meeting_date.year}"

    code = "public record Point(int X, int Y);\n\nvar equal = p1 == p2;"
    dispatch = AgendaItem(
        heading="Equality dispatch",
        sections=(
            DiscussionSection(
                text=(
                    "Records compare by value. We looked at how `==` should dispatch\n"
                    "when the operands have different runtime types.\n"
                    "\n"
                    "```C#\n" + code + "\n```"
                ),
                code_blocks=(CodeBlock(text=code, language="C#"),),
            ),
            DiscussionSection(
                heading="Derived types",
                text="A derived record must not compare equal to its base.",
            ),
        ),
        conclusion="Equality checks the runtime type through EqualityContract.",
    )

    init_only = AgendaItem(
        heading="Init-only accessors",
        sections=(
            DiscussionSection(text="Should `init` accessors be allowed on readonly fields?"),
        ),
    )

    return Document(
        date=meeting_date,
        title=title,
        items=(dispatch, init_only),
        agenda=("Equality dispatch", "Init-only accessors"),
        quotes=("Equality is hard.",),
    )
