"""Outline loader.

Reads the lesson outline JSON (an array of lesson descriptors) into
OutlineEntry models. Any problem with the file is fatal for the run.
"""

import json
import logging
from pathlib import Path
from typing import List, Union

from pydantic import ValidationError

from lessongen.errors import OutlineReadError
from lessongen.utils.file_io import read_json
from lessongen.validators.schema import OutlineEntry

logger = logging.getLogger(__name__)


def load_outline(path: Union[str, Path]) -> List[OutlineEntry]:
    """Load and parse the outline file.

    Entries keep their order in the source array; nothing is sorted or
    deduplicated.

    Args:
        path: Path to the outline JSON file

    Returns:
        List of OutlineEntry in file order

    Raises:
        OutlineReadError: If the file is missing or unreadable, is not valid
            JSON, is not a JSON array, or an entry lacks `order`/`title`
    """
    path = Path(path)

    try:
        raw = read_json(path)
    except FileNotFoundError:
        raise OutlineReadError(path, "file not found")
    except json.JSONDecodeError as e:
        raise OutlineReadError(path, f"invalid JSON at line {e.lineno} column {e.colno}: {e.msg}")
    except (OSError, UnicodeDecodeError) as e:
        raise OutlineReadError(path, str(e))

    if not isinstance(raw, list):
        raise OutlineReadError(path, f"expected a JSON array, got {type(raw).__name__}")

    entries = []
    for index, item in enumerate(raw):
        try:
            entries.append(OutlineEntry.model_validate(item))
        except ValidationError as e:
            errors = "; ".join(
                f"{'.'.join(str(loc) for loc in err['loc']) or 'entry'}: {err['msg']}"
                for err in e.errors()
            )
            raise OutlineReadError(path, f"entry {index}: {errors}")

    logger.info(f"Loaded {len(entries)} outline entries from {path}")
    return entries
