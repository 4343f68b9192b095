"""Markdown rendering of a generation result for terminal display."""

from recipe_generation.models.models import GenerationResult, ImageSource


def recipe_to_markdown(result: GenerationResult) -> str:
    recipe = result.recipe
    lines = [f"# {recipe.name}", ""]
    if recipe.description:
        lines += [recipe.description, ""]

    facts = [
        ("Prep", recipe.prep_time),
        ("Cook", recipe.cook_time),
        ("Servings", recipe.servings),
        ("Difficulty", recipe.difficulty),
    ]
    facts_line = " | ".join(f"**{label}:** {value}" for label, value in facts if value)
    if facts_line:
        lines += [facts_line, ""]

    lines += ["## Ingredients", ""]
    for ingredient in recipe.ingredients:
        quantity = " ".join(part for part in (ingredient.amount, ingredient.unit) if part)
        lines.append(f"- {quantity} {ingredient.item}" if quantity else f"- {ingredient.item}")
    lines.append("")

    lines += ["## Instructions", ""]
    for step in sorted(recipe.instructions, key=lambda s: s.step):
        lines.append(f"{step.step}. {step.instruction}")
    lines.append("")

    if recipe.tips:
        lines += ["## Tips", ""]
        lines += [f"- {tip}" for tip in recipe.tips]
        lines.append("")

    nutrition = recipe.nutrition
    nutrition_items = [
        ("Calories", nutrition.calories),
        ("Protein", nutrition.protein),
        ("Carbs", nutrition.carbs),
        ("Fat", nutrition.fat),
    ]
    if any(value for _, value in nutrition_items):
        lines += ["## Nutrition (per serving)", ""]
        lines += [f"- **{label}:** {value}" for label, value in nutrition_items if value]
        lines.append("")

    image = result.image
    if image is not None:
        lines += ["## Image", "", f"![{recipe.name}]({image.image_url})", ""]
        attribution = image.attribution
        if not image.generated and attribution.source != ImageSource.NONE:
            credit = attribution.author or attribution.source.value
            if attribution.author_url:
                credit = f"[{credit}]({attribution.author_url})"
            lines.append(f"_Photo by {credit} ({attribution.license or attribution.source.value})_")
        elif image.generated:
            lines.append(f"_Generated image ({attribution.source.value})_")

    return "\n".join(lines).rstrip() + "\n"
