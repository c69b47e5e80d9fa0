"""Input parsers for the lesson pipeline."""

from lessongen.parsers.outline_parser import load_outline

__all__ = ["load_outline"]
