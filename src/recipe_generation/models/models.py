"""Data models for recipe and image generation.

Defines Pydantic models for generation requests, the structured recipe returned
by the text provider, image results from the image providers, and the
ephemeral per-attempt record used for logging.
Recipe and image models serialize with the camelCase keys the frontend and the
text prompt use (prepTime, imageUrl, ...); Python code uses snake_case names.
"""

from enum import Enum
from typing import Any, List, Optional, Annotated

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _to_text(value: Any) -> str:
    """Coerce a loosely-typed provider scalar into a string ("" for None)."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return str(value).lower()
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


class GenerationRequest(BaseModel):
    """Immutable input for one generation invocation."""

    model_config = ConfigDict(str_strip_whitespace=True, frozen=True, populate_by_name=True)

    subject_name: Annotated[
        str,
        Field(min_length=1, max_length=200, alias="subjectName", description="Dish name (1-200 chars)"),
    ]
    subject_description: Annotated[
        Optional[str],
        Field(None, max_length=2000, alias="subjectDescription", description="Optional dish description"),
    ]


class Ingredient(BaseModel):
    """One ingredient line: item, amount and unit (amount/unit may be empty)."""

    model_config = ConfigDict(extra="ignore")

    item: str = ""
    amount: str = ""
    unit: str = ""

    @field_validator("item", "amount", "unit", mode="before")
    @classmethod
    def coerce_text(cls, v: Any) -> str:
        return _to_text(v)


class InstructionStep(BaseModel):
    model_config = ConfigDict(extra="ignore")

    step: int
    instruction: str = ""

    @field_validator("instruction", mode="before")
    @classmethod
    def coerce_text(cls, v: Any) -> str:
        return _to_text(v)


class Nutrition(BaseModel):
    """Per-serving nutrition estimate. Values are free text ("350 kcal", "12g")."""

    model_config = ConfigDict(str_strip_whitespace=True, extra="ignore")

    calories: str = ""
    protein: str = ""
    carbs: str = ""
    fat: str = ""

    @field_validator("calories", "protein", "carbs", "fat", mode="before")
    @classmethod
    def coerce_text(cls, v: Any) -> str:
        return _to_text(v)


class StructuredRecipe(BaseModel):
    """Recipe produced by the text provider.

    Only name, ingredients and instructions are guaranteed (checked by the
    schema validator before this model is built). All other fields are
    best-effort and default to empty values. Text is kept exactly as the
    provider sent it (no whitespace stripping). Scalar fields accept numbers
    and are stored as text, since providers are inconsistent about types.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    name: Annotated[str, Field(min_length=1, description="Recipe name")]
    description: str = ""
    prep_time: Annotated[str, Field("", alias="prepTime")]
    cook_time: Annotated[str, Field("", alias="cookTime")]
    servings: str = ""
    difficulty: str = ""
    ingredients: Annotated[List[Ingredient], Field(min_length=1)]
    instructions: Annotated[List[InstructionStep], Field(min_length=1)]
    tips: List[str] = Field(default_factory=list)
    nutrition: Nutrition = Field(default_factory=Nutrition)

    @field_validator("name", "description", "prep_time", "cook_time", "servings", "difficulty", mode="before")
    @classmethod
    def coerce_text(cls, v: Any) -> str:
        return _to_text(v)

    @field_validator("tips", mode="before")
    @classmethod
    def coerce_tips(cls, v: Any) -> list[str]:
        if v is None:
            return []
        if isinstance(v, str):
            return [v] if v.strip() else []
        return [_to_text(tip) for tip in v if tip is not None]

    @field_validator("nutrition", mode="before")
    @classmethod
    def coerce_nutrition(cls, v: Any) -> Any:
        # Providers sometimes send null or a plain string here
        return v if isinstance(v, (dict, Nutrition)) else {}


class ImageSource(str, Enum):
    DALLE = "dalle"
    FREEPIK = "freepik"
    NONE = "none"


class ImageAttribution(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    source: ImageSource = ImageSource.NONE
    author: Optional[str] = None
    author_url: Annotated[Optional[str], Field(None, alias="authorUrl")]
    source_url: Annotated[Optional[str], Field(None, alias="sourceUrl")]
    license: Optional[str] = None


class ImageResult(BaseModel):
    """Illustrative image for a recipe.

    generated=True: synthesized by a model, no real-world attribution.
    generated=False: sourced from a stock/search provider, carries attribution.
    """

    model_config = ConfigDict(populate_by_name=True)

    image_url: Annotated[str, Field(min_length=1, alias="imageUrl")]
    thumbnail_url: Annotated[Optional[str], Field(None, alias="thumbnailUrl")]
    generated: bool = False
    attribution: ImageAttribution = Field(default_factory=ImageAttribution)


class AttemptOutcome(str, Enum):
    SUCCESS = "success"
    TIMEOUT = "timeout"
    TRANSPORT_ERROR = "transport_error"
    VALIDATION_ERROR = "validation_error"


class ProviderAttempt(BaseModel):
    """Ephemeral record of one provider call. Logged, never persisted."""

    provider_name: str
    attempt_number: int
    outcome: AttemptOutcome
    latency_ms: int

    def log_extra(self) -> dict[str, Any]:
        """Fields passed as `extra=` so JSON logs carry them as top-level keys."""
        return {
            "provider": self.provider_name,
            "attempt": self.attempt_number,
            "outcome": self.outcome.value,
            "latency_ms": self.latency_ms,
        }


class GenerationResult(BaseModel):
    """Caller-facing result: the recipe plus an optional image.

    A missing image is a soft failure; the recipe alone is a complete result.
    """

    recipe: StructuredRecipe
    image: Optional[ImageResult] = None
