"""Report generation."""

from .markdown import generate_markdown, render_markdown

__all__ = ["generate_markdown", "render_markdown"]
