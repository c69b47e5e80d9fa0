"""CLI for batch lesson generation.

Usage:
    python -m lessongen.cli.generate_lessons \
        --outline scripts/outline.json \
        --output-dir src/content/lessons \
        --max-items 3 \
        --dry-run

Reads the outline, then for each entry (strictly one at a time, in outline
order) builds the prompt, calls the chat-completion API and writes
`{order:02d}-{slug}.md`. The first failure stops the run with exit code 1;
files already written are kept, and a re-run regenerates every entry.

Environment:
    DEEPSEEK_API_KEY   API key (or scripts/.deepseek_key, or .env.local)
    DEEPSEEK_BASE_URL  default https://api.deepseek.com
    DEEPSEEK_MODEL     default deepseek-chat
"""

import argparse
import logging
import sys
import time
from pathlib import Path
from typing import List, Optional, Sequence

from pydantic import SecretStr
from tqdm import tqdm

from lessongen import DEFAULT_OUTLINE_PATH, DEFAULT_OUTPUT_DIR
from lessongen.config import GeneratorConfig
from lessongen.errors import LessonGenError
from lessongen.generators.lesson_generator import LessonGenerator, build_filename
from lessongen.parsers.outline_parser import load_outline
from lessongen.utils.credentials import resolve_api_key
from lessongen.utils.llm_client import LLMClient
from lessongen.utils.logging_config import configure_logging, stage_logger
from lessongen.validators.schema import OutlineEntry

logger = logging.getLogger(__name__)


def non_negative_int(value: str) -> int:
    """argparse type for counts that must be zero or more."""
    number = int(value)
    if number < 0:
        raise argparse.ArgumentTypeError(f"must be >= 0, got {value}")
    return number


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Generate Markdown lesson files from an outline with an LLM",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Generate every lesson in scripts/outline.json
  python -m lessongen.cli.generate_lessons

  # Preview filenames and the first prompt without calling the API
  python -m lessongen.cli.generate_lessons --dry-run

  # Env-var key only, no image keyword, first 2 lessons
  python -m lessongen.cli.generate_lessons --simple --max-items 2
        """,
    )

    parser.add_argument(
        "--outline",
        type=Path,
        default=Path(DEFAULT_OUTLINE_PATH),
        help=f"Outline JSON file (default: {DEFAULT_OUTLINE_PATH})",
    )

    parser.add_argument(
        "--output-dir",
        type=Path,
        default=Path(DEFAULT_OUTPUT_DIR),
        help=f"Directory for generated lessons (default: {DEFAULT_OUTPUT_DIR})",
    )

    parser.add_argument(
        "--model",
        default=None,
        help="Model name (default: $DEEPSEEK_MODEL or deepseek-chat)",
    )

    parser.add_argument(
        "--base-url",
        default=None,
        help="API base URL (default: $DEEPSEEK_BASE_URL or https://api.deepseek.com)",
    )

    parser.add_argument(
        "--temperature",
        type=float,
        default=None,
        help="Sampling temperature (default: 0.7)",
    )

    parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Per-request timeout in seconds (default: client default)",
    )

    parser.add_argument(
        "--course-label",
        default=None,
        help="Grade/textbook named in the prompt (default: 六年级下册（教科版）)",
    )

    parser.add_argument(
        "--simple",
        action="store_true",
        help="Read the key from the environment only and skip image keywords",
    )

    parser.add_argument(
        "--max-items",
        type=non_negative_int,
        default=None,
        help="Maximum number of lessons to generate (for testing)",
    )

    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Load the outline and show a preview without calling the API",
    )

    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level",
    )

    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Also write logs to this file",
    )

    return parser.parse_args(argv)


def run_generation(entries: List[OutlineEntry], generator: LessonGenerator) -> List[Path]:
    """Generate lessons one by one, in order.

    Each entry's request and file write finish before the next entry starts.
    The first exception propagates and later entries are not attempted.

    Returns:
        Paths written, in outline order
    """
    written = []
    for entry in tqdm(entries, desc="Generating", unit="lesson"):
        logger.info(f"[{entry.order:02d}] 生成：{entry.title}")
        path = generator.generate(entry)
        written.append(path)
        logger.info(f"写入：{path}")
    return written


def show_dry_run(entries: List[OutlineEntry], generator: LessonGenerator) -> None:
    logger.info("=" * 80)
    logger.info("DRY RUN PREVIEW")
    logger.info("=" * 80)
    for entry in entries:
        logger.info(f"  {generator.config.output_dir / build_filename(entry)}")
    if entries:
        logger.info("-" * 80)
        logger.info(f"Prompt for [{entries[0].order:02d}] {entries[0].title}:\n")
        logger.info(generator.build_prompt(entries[0]))
    logger.info("=" * 80)
    logger.info(f"Total lessons: {len(entries)}")
    logger.info("DRY RUN COMPLETE")


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main CLI entry point."""
    args = parse_args(argv)

    configure_logging(
        level=args.log_level,
        log_file=args.log_file,
        json_format=False,
        console_output=True,
    )

    try:
        config = GeneratorConfig.from_env(
            base_url=args.base_url,
            model=args.model,
            temperature=args.temperature,
            timeout=args.timeout,
            outline_path=args.outline,
            output_dir=args.output_dir,
            course_label=args.course_label,
            key_fallback=not args.simple,
            extract_image_keyword=not args.simple,
        )
    except ValueError as e:
        logger.error(f"Invalid configuration: {e}")
        return 1

    logger.info("=" * 80)
    logger.info("Lesson Generation Pipeline")
    logger.info("=" * 80)
    logger.info(f"Outline: {config.outline_path}")
    logger.info(f"Output: {config.output_dir}")
    logger.info(f"Endpoint: {config.completions_url}")
    logger.info(f"Model: {config.model}")
    logger.info(f"Image keywords: {config.extract_image_keyword}")
    if args.max_items:
        logger.info(f"Max Items: {args.max_items}")
    logger.info(f"Dry Run: {args.dry_run}")
    logger.info("=" * 80)

    start_time = time.time()
    llm_client = None
    written: List[Path] = []

    try:
        if not args.dry_run:
            with stage_logger("resolve_key"):
                api_key, source = resolve_api_key(allow_fallback=config.key_fallback)
            logger.info(f"Using API key from {source}")
            config = config.model_copy(update={"api_key": SecretStr(api_key)})

        with stage_logger("load_outline", path=str(config.outline_path)):
            entries = load_outline(config.outline_path)

        if args.max_items is not None:
            entries = entries[: args.max_items]
            logger.info(f"Limited to {len(entries)} lessons")

        if args.dry_run:
            show_dry_run(entries, LessonGenerator(config))
            return 0

        llm_client = LLMClient(
            api_key=config.api_key.get_secret_value(),
            base_url=config.base_url,
            model=config.model,
            temperature=config.temperature,
            timeout=config.timeout,
        )
        generator = LessonGenerator(config, llm_client)

        with stage_logger("generate", lessons=len(entries)):
            written = run_generation(entries, generator)

    except LessonGenError as e:
        logger.error(f"{e.__class__.__name__}: {e}")
        if llm_client and llm_client.total_usage.requests:
            logger.error(f"Stopped after {llm_client.total_usage.requests} request(s)")
        return 1

    elapsed = time.time() - start_time

    logger.info("\n" + "=" * 80)
    logger.info("GENERATION SUMMARY")
    logger.info("=" * 80)
    logger.info(f"Lessons written: {len(written)}")
    logger.info(f"Elapsed: {elapsed:.2f}s")

    usage = llm_client.get_usage_summary()
    logger.info("-" * 80)
    logger.info(f"Model: {usage['model']}")
    logger.info(f"Prompt tokens: {usage['prompt_tokens']:,}")
    logger.info(f"Completion tokens: {usage['completion_tokens']:,}")
    logger.info(f"Total tokens: {usage['total_tokens']:,}")
    logger.info("=" * 80)
    logger.info("完成：已生成全部课程 markdown。")

    return 0


if __name__ == "__main__":
    sys.exit(main())
