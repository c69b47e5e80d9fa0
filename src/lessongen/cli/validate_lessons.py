"""CLI for checking generated lessons before the site build.

Usage:
    python -m lessongen.cli.validate_lessons \
        --lessons-dir src/content/lessons \
        --strict

Checks every `*.md` file in the lessons directory:
- front matter is present, parses as YAML and matches the `lessons`
  content collection schema (LessonFrontMatter)
- the body contains every required `##` section header

Schema failures always exit with 1. Missing sections are reported as
warnings, and only fail the run with --strict.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional, Sequence

import yaml
from pydantic import BaseModel, Field, ValidationError

from lessongen import DEFAULT_OUTPUT_DIR
from lessongen.prompts.lesson_prompts import REQUIRED_SECTIONS
from lessongen.utils.file_io import list_files, read_markdown, split_front_matter
from lessongen.utils.logging_config import configure_logging
from lessongen.validators.schema import LessonFrontMatter

logger = logging.getLogger(__name__)


class LessonReport(BaseModel):
    """Validation outcome for one lesson file."""

    path: Path
    schema_errors: List[str] = Field(default_factory=list)
    missing_sections: List[str] = Field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.schema_errors and not self.missing_sections


def find_missing_sections(body: str) -> List[str]:
    """Required section names with no `##` header line in the body.

    A header counts when it starts with the section name, so
    `## 预习目标（3条）` satisfies `预习目标`.
    """
    headers = [
        line.lstrip()[2:].strip()
        for line in body.splitlines()
        if line.lstrip().startswith("## ")
    ]
    return [
        section
        for section in REQUIRED_SECTIONS
        if not any(header.startswith(section) for header in headers)
    ]


def validate_lesson(path: Path) -> LessonReport:
    """Validate one lesson file's front matter and section headers."""
    report = LessonReport(path=path)
    front_matter, body = split_front_matter(read_markdown(path))

    if front_matter is None:
        report.schema_errors.append("missing front matter block")
    else:
        try:
            data = yaml.safe_load(front_matter)
        except yaml.YAMLError as e:
            report.schema_errors.append(f"invalid YAML: {e}")
        else:
            if not isinstance(data, dict):
                report.schema_errors.append("front matter is not a mapping")
            else:
                try:
                    LessonFrontMatter.model_validate(data)
                except ValidationError as e:
                    report.schema_errors.extend(
                        f"{'.'.join(str(loc) for loc in err['loc'])}: {err['msg']}"
                        for err in e.errors()
                    )

    report.missing_sections = find_missing_sections(body)
    return report


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Validate generated lesson Markdown files",
    )

    parser.add_argument(
        "--lessons-dir",
        type=Path,
        default=Path(DEFAULT_OUTPUT_DIR),
        help=f"Directory holding lesson files (default: {DEFAULT_OUTPUT_DIR})",
    )

    parser.add_argument(
        "--strict",
        action="store_true",
        help="Treat missing section headers as failures",
    )

    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level",
    )

    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main CLI entry point."""
    args = parse_args(argv)
    configure_logging(level=args.log_level, json_format=False)

    files = list_files(args.lessons_dir, "*.md")
    if not files:
        logger.error(f"No lesson files found in {args.lessons_dir}")
        return 1

    schema_failures = 0
    section_failures = 0
    for path in files:
        report = validate_lesson(path)
        for error in report.schema_errors:
            logger.error(f"{path.name}: {error}")
        if report.missing_sections:
            logger.warning(
                f"{path.name}: missing sections: {', '.join(report.missing_sections)}"
            )
        schema_failures += bool(report.schema_errors)
        section_failures += bool(report.missing_sections)

    logger.info(
        f"Checked {len(files)} lessons: {schema_failures} schema failures, "
        f"{section_failures} with missing sections"
    )

    if schema_failures or (args.strict and section_failures):
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
