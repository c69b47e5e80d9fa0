"""Lesson generator: outline entry in, Markdown lesson file out.

For each entry the generator:

1. Builds the prompt and asks the completion client for a lesson body
2. Pulls the optional `unsplash: <keywords>` line out of the body
3. Derives the filename `{order:02d}-{slug}.md`
4. Writes YAML front matter (title, unit, order, keywords, image) plus body

Front matter is serialized with PyYAML so quotes, colons and backslashes in
titles are escaped properly.
"""

import logging
import re
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple
from urllib.parse import quote

import yaml

from lessongen.config import DEFAULT_IMAGE_URL_TEMPLATE, GeneratorConfig
from lessongen.errors import FileWriteError
from lessongen.prompts.lesson_prompts import build_lesson_prompt
from lessongen.utils.file_io import write_text
from lessongen.utils.llm_client import LLMClient
from lessongen.validators.schema import OutlineEntry

logger = logging.getLogger(__name__)

SLUG_MAX_LENGTH = 48
SLUG_FALLBACK = "lesson"

# Anything outside ASCII letters/digits and the CJK Unified Ideographs block
_SLUG_SEPARATOR = re.compile(r"[^a-z0-9一-龥]+")

_IMAGE_KEYWORD_LINE = re.compile(
    r"^[^\n]*?[*_`]*unsplash:[*_`]*[^\S\n]*(?P<keyword>[^\n]*?)[^\S\n]*(?:\n|\Z)",
    re.IGNORECASE | re.MULTILINE,
)

# Characters JavaScript's encodeURIComponent leaves alone besides A-Za-z0-9_.-~
_URL_SAFE = "!*'()"


# ============================================================================
# Pure helpers
# ============================================================================


def slugify(title: str) -> str:
    """Turn a title into a filesystem/URL-safe slug.

    Lowercases, collapses runs of characters other than a-z, 0-9 and CJK
    ideographs into single hyphens, trims hyphens and caps the length at 48.
    Returns "lesson" when nothing usable is left. slugify(slugify(x)) == slugify(x).
    """
    slug = _SLUG_SEPARATOR.sub("-", str(title).strip().lower()).strip("-")
    slug = slug[:SLUG_MAX_LENGTH].rstrip("-")
    return slug or SLUG_FALLBACK


def build_filename(entry: OutlineEntry) -> str:
    """`{order:02d}-{slug}.md`, e.g. `01-小小工程师.md`."""
    return f"{entry.order:02d}-{slugify(entry.title)}.md"


def extract_image_keyword(text: str) -> Tuple[Optional[str], str]:
    """Split an `unsplash: <keywords>` line out of a completion.

    The marker is matched case-insensitively anywhere on a line (list bullets,
    quotes, labels or Markdown emphasis before it are tolerated) and the whole
    line is removed.

    Returns:
        (keyword or None, remaining text)
    """
    match = _IMAGE_KEYWORD_LINE.search(text)
    if not match:
        return None, text

    keyword = match.group("keyword").strip().strip("\"'“”`").strip()
    body = text[: match.start()] + text[match.end():]
    return (keyword or None), body


def build_image_url(
    keyword: str,
    order: int,
    template: str = DEFAULT_IMAGE_URL_TEMPLATE,
) -> str:
    """Image URL for a keyword; the order is appended as a cache-busting sig."""
    return template.format(keyword=quote(keyword, safe=_URL_SAFE), order=order)


def build_front_matter(entry: OutlineEntry, image: Optional[str] = None) -> Dict[str, Any]:
    """Front matter fields in output order; optional fields only when set."""
    fields: Dict[str, Any] = {"title": entry.title}
    if entry.unit:
        fields["unit"] = entry.unit
    fields["order"] = entry.order
    if entry.keywords:
        fields["keywords"] = list(entry.keywords)
    if image:
        fields["image"] = image
    return fields


class _FrontMatterDumper(yaml.SafeDumper):
    """SafeDumper that double-quotes string values and inlines lists."""


def _represent_str(dumper: yaml.SafeDumper, data: str) -> yaml.ScalarNode:
    return dumper.represent_scalar("tag:yaml.org,2002:str", data, style='"')


def _represent_list(dumper: yaml.SafeDumper, data: List[Any]) -> yaml.SequenceNode:
    return dumper.represent_sequence("tag:yaml.org,2002:seq", data, flow_style=True)


_FrontMatterDumper.add_representer(str, _represent_str)
_FrontMatterDumper.add_representer(list, _represent_list)


def render_front_matter(fields: Dict[str, Any]) -> str:
    """Serialize front matter fields to YAML, keeping insertion order.

    Keys are emitted plain, string values double-quoted, lists in flow style:

        title: "小小工程师"
        order: 1
        keywords: ["设计", "材料"]
    """
    lines = []
    for key, value in fields.items():
        dumped = yaml.dump(
            value,
            Dumper=_FrontMatterDumper,
            allow_unicode=True,
            default_flow_style=True,
            width=float("inf"),
        )
        # Scalars come back with a document-end marker
        dumped = dumped.removesuffix("\n...\n").rstrip("\n")
        lines.append(f"{key}: {dumped}")
    return "\n".join(lines) + "\n"


def render_document(fields: Dict[str, Any], body: str) -> str:
    """Front matter block, a blank line, the trimmed body and a final newline."""
    return f"---\n{render_front_matter(fields)}---\n\n{body.strip()}\n"


# ============================================================================
# Generator
# ============================================================================


class LessonGenerator:
    """Generates and writes one lesson file per outline entry."""

    def __init__(self, config: GeneratorConfig, llm_client: Optional[LLMClient] = None):
        """Initialize generator.

        Args:
            config: Run configuration
            llm_client: Completion client; only needed for generate()
        """
        self.config = config
        self.llm_client = llm_client

    def build_prompt(self, entry: OutlineEntry) -> str:
        return build_lesson_prompt(
            entry,
            include_image_directive=self.config.extract_image_keyword,
            course_label=self.config.course_label,
        )

    def output_path(self, entry: OutlineEntry) -> Path:
        return self.config.output_dir / build_filename(entry)

    def render_lesson(self, entry: OutlineEntry, completion: str) -> str:
        """Turn a raw completion into the full lesson document."""
        image = None
        body = completion
        if self.config.extract_image_keyword:
            keyword, body = extract_image_keyword(completion)
            if keyword:
                image = build_image_url(keyword, entry.order, self.config.image_url_template)
            else:
                logger.debug(f"No image keyword in completion for order={entry.order}")

        return render_document(build_front_matter(entry, image), body)

    def write_lesson(self, entry: OutlineEntry, completion: str) -> Path:
        """Write the lesson file, replacing any existing one.

        Raises:
            FileWriteError: If the directory or file cannot be written
        """
        path = self.output_path(entry)
        document = self.render_lesson(entry, completion)
        try:
            write_text(document, path)
        except OSError as e:
            raise FileWriteError(path, e.strerror or str(e)) from e
        return path

    def generate(self, entry: OutlineEntry) -> Path:
        """Prompt, complete and write one lesson.

        Raises:
            NetworkError, EmptyCompletionError: From the completion client
            FileWriteError: If the file cannot be written
        """
        if self.llm_client is None:
            raise RuntimeError("LessonGenerator.generate() requires an llm_client")

        prompt = self.build_prompt(entry)
        completion = self.llm_client.complete(prompt)
        return self.write_lesson(entry, completion)
