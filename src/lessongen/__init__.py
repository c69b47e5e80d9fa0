"""
Lesson Generation Pipeline for Static Course Sites

This package contains the batch pipeline that turns a lesson outline (JSON)
into Markdown lesson files with YAML front matter, using an OpenAI-compatible
chat-completion API (DeepSeek by default) to write each lesson body.

**Version**: 0.1.0
**Python**: >=3.11
**Key Dependencies**: openai, pydantic, pyyaml, python-dotenv
"""

__version__ = "0.1.0"

# Pipeline metadata
DEFAULT_OUTLINE_PATH = "scripts/outline.json"
DEFAULT_OUTPUT_DIR = "src/content/lessons"

__all__ = [
    "__version__",
    "DEFAULT_OUTLINE_PATH",
    "DEFAULT_OUTPUT_DIR",
]
