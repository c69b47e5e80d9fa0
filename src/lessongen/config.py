"""Run configuration for lesson generation.

A single GeneratorConfig is built in the CLI from arguments and environment
variables, then passed to every component. It is frozen after construction.
"""

import os
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, SecretStr, field_validator

from lessongen import DEFAULT_OUTLINE_PATH, DEFAULT_OUTPUT_DIR

BASE_URL_ENV_VAR = "DEEPSEEK_BASE_URL"
MODEL_ENV_VAR = "DEEPSEEK_MODEL"

DEFAULT_BASE_URL = "https://api.deepseek.com"
DEFAULT_MODEL = "deepseek-chat"
DEFAULT_TEMPERATURE = 0.7
DEFAULT_COURSE_LABEL = "六年级下册（教科版）"
DEFAULT_IMAGE_URL_TEMPLATE = "https://source.unsplash.com/featured/?{keyword}&sig={order}"


class GeneratorConfig(BaseModel):
    """Immutable settings for one generation run."""

    model_config = ConfigDict(frozen=True)

    api_key: SecretStr = Field(
        default=SecretStr(""), description="Bearer token for the completion API"
    )
    base_url: str = Field(default=DEFAULT_BASE_URL, description="API root, no trailing slash")
    model: str = Field(default=DEFAULT_MODEL, description="Chat model identifier")
    temperature: float = Field(default=DEFAULT_TEMPERATURE, ge=0.0, le=2.0)
    timeout: Optional[float] = Field(
        default=None, gt=0, description="Per-request timeout in seconds (None = SDK default)"
    )

    outline_path: Path = Path(DEFAULT_OUTLINE_PATH)
    output_dir: Path = Path(DEFAULT_OUTPUT_DIR)

    course_label: str = DEFAULT_COURSE_LABEL
    key_fallback: bool = Field(
        default=True, description="Also look for the key in local fallback files"
    )
    extract_image_keyword: bool = Field(
        default=True, description="Ask for and extract an `unsplash:` image keyword"
    )
    image_url_template: str = DEFAULT_IMAGE_URL_TEMPLATE

    @field_validator("base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    @classmethod
    def from_env(cls, **overrides) -> "GeneratorConfig":
        """Build a config from DEEPSEEK_* environment variables.

        Keyword arguments that are not None take precedence over the environment.
        """
        values = {
            "base_url": os.getenv(BASE_URL_ENV_VAR) or DEFAULT_BASE_URL,
            "model": os.getenv(MODEL_ENV_VAR) or DEFAULT_MODEL,
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)

    @property
    def completions_url(self) -> str:
        return f"{self.base_url}/v1/chat/completions"
