"""Lesson generators.

This module provides the generator that turns outline entries into
Markdown lesson files with YAML front matter.
"""

from lessongen.generators.lesson_generator import (
    LessonGenerator,
    build_filename,
    extract_image_keyword,
    slugify,
)

__all__ = [
    "LessonGenerator",
    "build_filename",
    "extract_image_keyword",
    "slugify",
]
