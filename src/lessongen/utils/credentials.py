"""API key resolution for the completion endpoint.

The key is looked up once per run, in this order:

1. The ``DEEPSEEK_API_KEY`` environment variable
2. ``scripts/.deepseek_key`` - a file holding just the key
3. ``.env.local`` - a dotenv file with a ``DEEPSEEK_API_KEY=...`` line

Both files are meant to stay out of version control. Missing or unreadable
files are skipped.
"""

import logging
import os
from pathlib import Path
from typing import Optional, Tuple, Union

from dotenv import dotenv_values

from lessongen.errors import MissingCredentialError

logger = logging.getLogger(__name__)

API_KEY_ENV_VAR = "DEEPSEEK_API_KEY"
DEFAULT_KEY_FILE = Path("scripts/.deepseek_key")
DEFAULT_ENV_FILE = Path(".env.local")

MISSING_KEY_MESSAGE = (
    "缺少 DeepSeek API Key。请用以下任意一种方式提供：\n"
    "  1) 环境变量 {env_var}（推荐）\n"
    "  2) 在 {key_file} 文件中放一行 key（不会提交）\n"
    "  3) 在 {env_file} 中写 {env_var}=...（不会提交）"
)
MISSING_ENV_KEY_MESSAGE = "缺少 DeepSeek API Key。请设置环境变量 {env_var}。"


def _read_key_file(path: Path) -> Optional[str]:
    try:
        key = path.read_text(encoding="utf-8").strip()
    except (OSError, UnicodeDecodeError) as e:
        logger.debug(f"Key file not usable: {path} ({e.__class__.__name__})")
        return None
    return key or None


def _read_env_file(path: Path, env_var: str) -> Optional[str]:
    if not path.is_file():
        return None
    try:
        values = dotenv_values(path, encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        logger.debug(f"Env file not usable: {path} ({e.__class__.__name__})")
        return None

    key = (values.get(env_var) or "").strip().strip("'\"").strip()
    return key or None


def resolve_api_key(
    env_var: str = API_KEY_ENV_VAR,
    key_file: Union[str, Path] = DEFAULT_KEY_FILE,
    env_file: Union[str, Path] = DEFAULT_ENV_FILE,
    allow_fallback: bool = True,
) -> Tuple[str, str]:
    """Find the API key.

    Args:
        env_var: Environment variable holding the key
        key_file: Single-line key file checked second
        env_file: Dotenv file checked last
        allow_fallback: If False, only the environment variable is consulted

    Returns:
        (key, source) where source names where the key came from. The key
        itself must never be logged.

    Raises:
        MissingCredentialError: If no source yields a non-empty key
    """
    key = (os.environ.get(env_var) or "").strip()
    if key:
        return key, f"environment variable {env_var}"

    if allow_fallback:
        key_file = Path(key_file)
        key = _read_key_file(key_file)
        if key:
            return key, str(key_file)

        env_file = Path(env_file)
        key = _read_env_file(env_file, env_var)
        if key:
            return key, str(env_file)

    if not allow_fallback:
        raise MissingCredentialError(MISSING_ENV_KEY_MESSAGE.format(env_var=env_var))
    raise MissingCredentialError(
        MISSING_KEY_MESSAGE.format(
            env_var=env_var, key_file=Path(key_file), env_file=Path(env_file)
        )
    )
