"""
Meeting Notes Index Package

Parses design-meeting notes (a dated title, agenda items, discussion
sections and conclusions) into immutable Document values and answers
lookups by heading, keyword or date.

ARCHITECTURAL GUARANTEE:
------------------------
The model contains ZERO knowledge of:
    - Markdown syntax
    - Files and directories
    - The subject matter being discussed

Parsing, indexing and rendering happen in separate layers.
All of them consume the model unchanged.
"""

__version__ = "0.1.0"
