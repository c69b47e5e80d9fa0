"""File I/O utilities for outline input and Markdown lesson output."""

import json
import logging
import re
from pathlib import Path
from typing import Any, List, Optional, Tuple, Union

logger = logging.getLogger(__name__)

FRONT_MATTER_PATTERN = re.compile(r"\A---\r?\n(.*?)\r?\n---\r?\n?(.*)\Z", re.DOTALL)


# ============================================================================
# JSON Functions
# ============================================================================


def read_json(file_path: Union[str, Path]) -> Any:
    """Read JSON file and return the parsed value.

    Args:
        file_path: Path to JSON file

    Returns:
        Parsed JSON (object, array or scalar)

    Raises:
        FileNotFoundError: If file doesn't exist
        json.JSONDecodeError: If file contains invalid JSON
    """
    file_path = Path(file_path)
    logger.debug(f"Reading JSON from {file_path}")

    with open(file_path, "r", encoding="utf-8") as f:
        return json.load(f)


# ============================================================================
# Text / Markdown Functions
# ============================================================================


def write_text(content: str, file_path: Union[str, Path]) -> Path:
    """Write UTF-8 text, replacing any existing file.

    Creates parent directories if they don't exist.

    Returns:
        The path written
    """
    file_path = Path(file_path)
    file_path.parent.mkdir(parents=True, exist_ok=True)

    with open(file_path, "w", encoding="utf-8", newline="\n") as f:
        f.write(content)

    logger.debug(f"Wrote {len(content)} characters to {file_path}")
    return file_path


def read_markdown(file_path: Union[str, Path]) -> str:
    """Read markdown file and return content as string.

    Raises:
        FileNotFoundError: If file doesn't exist
    """
    file_path = Path(file_path)
    logger.debug(f"Reading markdown from {file_path}")

    with open(file_path, "r", encoding="utf-8") as f:
        return f.read()


def split_front_matter(markdown_text: str) -> Tuple[Optional[str], str]:
    """Split a Markdown document into its front matter block and body.

    Args:
        markdown_text: Full document text

    Returns:
        (front matter text without the `---` fences, body). The front matter
        is None when the document does not start with a `---` block.
    """
    match = FRONT_MATTER_PATTERN.match(markdown_text)
    if not match:
        return None, markdown_text
    return match.group(1), match.group(2)


def list_files(
    directory: Union[str, Path],
    pattern: str = "*",
    recursive: bool = False,
) -> List[Path]:
    """List files in directory matching pattern, sorted by name.

    Example:
        >>> list_files('src/content/lessons', '*.md')
        [Path('src/content/lessons/01-xx.md'), ...]
    """
    directory = Path(directory)

    if not directory.exists():
        logger.warning(f"Directory does not exist: {directory}")
        return []

    files = directory.rglob(pattern) if recursive else directory.glob(pattern)
    files = sorted(f for f in files if f.is_file())

    logger.debug(f"Found {len(files)} files in {directory} matching '{pattern}'")
    return files
