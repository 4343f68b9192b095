"""Combined recipe + image generation for the surrounding application.

RecipeGenerationService is what an HTTP handler or CLI calls. Text failure is
hard (GenerationExhaustedError propagates); image failure is soft (image=None).
Persisting the result is the caller's job.
"""

from typing import Optional

from recipe_generation.generation.image_generator import ImageGenerator
from recipe_generation.generation.recipe_generator import RecipeGenerator
from recipe_generation.models.models import GenerationRequest, GenerationResult
from recipe_generation.providers.dalle import DalleImageProvider
from recipe_generation.providers.freepik import FreepikImageProvider
from recipe_generation.providers.gemini import GeminiTextProvider
from recipe_generation.utils.config import Config
from recipe_generation.utils.logger import logger


class RecipeGenerationService:
    """Runs the text orchestrator, then the image orchestrator."""

    def __init__(self, recipe_generator: RecipeGenerator, image_generator: Optional[ImageGenerator] = None) -> None:
        self.recipe_generator = recipe_generator
        self.image_generator = image_generator

    @classmethod
    def from_config(cls, config: Config, include_images: bool = True) -> "RecipeGenerationService":
        """Wire Gemini for text and DALL-E → Freepik for images from an explicit Config."""
        text_provider = GeminiTextProvider.from_config(config)
        recipe_generator = RecipeGenerator.from_config(text_provider, config)

        image_generator = None
        if include_images and config.ENABLE_IMAGE_GENERATION:
            # Priority order: generative model first, stock search second
            image_providers = [
                DalleImageProvider.from_config(config),
                FreepikImageProvider.from_config(config),
            ]
            image_generator = ImageGenerator.from_config(text_provider, image_providers, config)
        else:
            logger.info("Image generation disabled")

        return cls(recipe_generator, image_generator)

    async def generate(self, request: GenerationRequest) -> GenerationResult:
        """Generate the recipe and, best effort, its image.

        Raises:
            GenerationExhaustedError: If every text attempt failed.
        """
        recipe = await self.recipe_generator.generate_structured(request.subject_name)

        image = None
        if self.image_generator is not None:
            description = request.subject_description or recipe.description
            image = await self.image_generator.generate_image(request.subject_name, description)

        return GenerationResult(recipe=recipe, image=image)
