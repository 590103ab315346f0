"""Backends for notes output generation (markdown)."""

from .markdown import render_markdown, save_markdown_file

__all__ = ["render_markdown", "save_markdown_file"]
