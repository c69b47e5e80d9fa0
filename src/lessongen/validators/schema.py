"""Pydantic models for pipeline input and output.

OutlineEntry describes one lesson in the outline JSON. LessonFrontMatter
mirrors the site's `lessons` content collection schema, so generated files can
be checked before the static site build sees them.
"""

from typing import List, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictFloat,
    StrictStr,
    field_validator,
)


# ============================================================================
# Input
# ============================================================================


class OutlineEntry(BaseModel):
    """One lesson descriptor from the outline file."""

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "order": 1,
                "title": "小小工程师",
                "unit": "小小工程师",
                "summaryHint": "认识工程设计的基本步骤",
                "keywords": ["设计", "材料"],
            }
        },
    )

    order: int = Field(..., description="Sort rank; also the filename prefix and image sig")
    title: str = Field(..., description="Lesson title")
    unit: str = Field(default="", description="Unit name, empty when not provided")
    summary_hint: Optional[str] = Field(
        default=None,
        alias="summaryHint",
        description="Free-text guidance passed into the prompt",
    )
    keywords: List[str] = Field(default_factory=list)

    @field_validator("unit", mode="before")
    @classmethod
    def none_unit_to_empty(cls, v):
        return "" if v is None else v

    @field_validator("keywords", mode="before")
    @classmethod
    def none_keywords_to_empty(cls, v):
        return [] if v is None else v


# ============================================================================
# Output
# ============================================================================


class LessonFrontMatter(BaseModel):
    """Front matter accepted by the `lessons` content collection.

    Validation Rules:
    - title and order are required
    - keywords defaults to an empty list
    - no type coercion: a quoted number is not a valid `order`; ints are
      accepted as numbers and each bad field reports a single error
    - unknown keys are ignored, as the collection schema does
    """

    title: StrictStr
    unit: Optional[StrictStr] = None
    order: StrictFloat
    summary: Optional[StrictStr] = None
    keywords: List[StrictStr] = Field(default_factory=list)
    minutes: Optional[StrictFloat] = None
    image: Optional[StrictStr] = None
