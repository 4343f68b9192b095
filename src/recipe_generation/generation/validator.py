"""Schema validation for parsed recipe payloads.

Checks that name, ingredients and instructions are present and non-empty,
then builds a StructuredRecipe. String values of the required fields come
through exactly as sent (whitespace included). Deep field types are not
enforced: numbers where text is expected are coerced to their text form
(`"amount": 1` becomes `"1"`), bare-string list entries are accepted.
"""

from typing import Any

from pydantic import ValidationError

from recipe_generation.models.models import StructuredRecipe
from recipe_generation.utils.errors import SchemaValidationError

REQUIRED_FIELDS = ("name", "ingredients", "instructions")


def _is_empty(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, tuple, dict)):
        return len(value) == 0
    return False


def missing_required_fields(payload: Any) -> list[str]:
    """Required fields that are absent or empty, in REQUIRED_FIELDS order."""
    if not isinstance(payload, dict):
        return list(REQUIRED_FIELDS)
    missing = [field for field in REQUIRED_FIELDS if _is_empty(payload.get(field))]
    for field in ("ingredients", "instructions"):
        if field not in missing and not isinstance(payload[field], list):
            missing.append(field)
    return missing


def _normalize_ingredients(entries: list) -> list:
    # "2 eggs" -> {"item": "2 eggs"}
    return [{"item": entry} if isinstance(entry, str) else entry for entry in entries]


def _normalize_instructions(entries: list) -> list:
    # "Bake" -> {"step": <position>, "instruction": "Bake"}; missing step numbers get their position
    normalized = []
    for position, entry in enumerate(entries, start=1):
        if isinstance(entry, str):
            normalized.append({"step": position, "instruction": entry})
        elif isinstance(entry, dict) and entry.get("step") in (None, ""):
            normalized.append({**entry, "step": position})
        else:
            normalized.append(entry)
    return normalized


def validate_recipe_payload(payload: Any) -> StructuredRecipe:
    """Validate a parsed payload and build the StructuredRecipe.

    Args:
        payload: Result of json.loads() on the normalized provider text.

    Returns:
        StructuredRecipe with the required fields populated.

    Raises:
        SchemaValidationError: Listing missing/empty required fields, or with
            the pydantic detail if the entries themselves cannot be read.
    """
    missing = missing_required_fields(payload)
    if missing:
        raise SchemaValidationError(missing)

    data = dict(payload)
    data["ingredients"] = _normalize_ingredients(data["ingredients"])
    data["instructions"] = _normalize_instructions(data["instructions"])

    try:
        return StructuredRecipe.model_validate(data)
    except ValidationError as e:
        fields = sorted({str(err["loc"][0]) for err in e.errors() if err.get("loc")})
        raise SchemaValidationError(
            [field for field in REQUIRED_FIELDS if field in fields],
            detail=f"{e.error_count()} invalid value(s) in: {', '.join(fields)}",
        ) from e
