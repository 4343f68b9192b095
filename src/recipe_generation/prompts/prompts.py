"""Prompts sent to the text provider.

Provides factory functions for:
- The structured recipe prompt (single JSON object, no prose)
- The image prompt derivation request (visual description for image providers)
- The deterministic fallback image prompt used when derivation fails
- The canned availability check prompt
"""

# Top-level keys demanded from the text provider, in prompt order
RECIPE_FIELDS = (
    "name",
    "description",
    "prepTime",
    "cookTime",
    "servings",
    "difficulty",
    "ingredients",
    "instructions",
    "tips",
    "nutrition",
)

AVAILABILITY_PROMPT = "Respond with just the word 'available'"


def get_recipe_prompt(subject_name: str) -> str:
    """Build the structured recipe instruction for one dish.

    The provider is asked for a single JSON object with the RECIPE_FIELDS keys.
    `ingredients[]` entries carry item/amount/unit and `instructions[]` entries
    carry an integer step plus the instruction text.

    Args:
        subject_name: Dish name, embedded verbatim.

    Returns:
        str: Prompt text.
    """
    return f"""Generate a detailed recipe for "{subject_name}".
Respond with a single JSON object only, with no additional text, prose or markdown, in exactly this format:
{{
    "name": "{subject_name}",
    "description": "Brief description of the dish",
    "prepTime": "preparation time",
    "cookTime": "cooking time",
    "servings": "number of servings",
    "difficulty": "Easy/Medium/Hard",
    "ingredients": [
        {{"item": "ingredient name", "amount": "quantity", "unit": "measurement unit"}}
    ],
    "instructions": [
        {{"step": 1, "instruction": "detailed step description"}}
    ],
    "tips": ["helpful cooking tip"],
    "nutrition": {{
        "calories": "estimated calories per serving",
        "protein": "protein content",
        "carbs": "carbohydrate content",
        "fat": "fat content"
    }}
}}

Rules:
- "step" must be an integer, starting at 1
- Include realistic cooking times, proper measurements and detailed instructions
- The response must be valid JSON. Do not include any text before or after the JSON."""


def get_image_prompt_request(subject_name: str, subject_description: str = "") -> str:
    """Build the request asking the text provider for a visual description.

    Args:
        subject_name: Dish name.
        subject_description: Optional description, included when non-empty.

    Returns:
        str: Prompt text.
    """
    description_line = f"Description: {subject_description}\n" if subject_description else ""
    return f"""Create a detailed, appetizing image prompt for the recipe: "{subject_name}"
{description_line}
Generate a photorealistic prompt that includes:
- The finished dish beautifully plated
- Proper lighting and styling
- Appetizing presentation
- Relevant garnishes or accompaniments

Format the response as a single descriptive paragraph suitable for image generation APIs.
Focus on visual details, colors, textures, and professional food photography style.
Keep it under 200 words."""


def fallback_image_prompt(subject_name: str) -> str:
    """Deterministic visual description used when prompt derivation fails."""
    return (
        f"Professional food photography of {subject_name}, beautifully plated on a white "
        "ceramic plate, garnished appropriately, soft natural lighting, appetizing "
        "presentation, high quality, detailed"
    )
