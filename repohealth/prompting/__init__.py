"""Prompt templates and rendering."""

from .builder import PromptBuilder, format_dependencies

__all__ = ["PromptBuilder", "format_dependencies"]
