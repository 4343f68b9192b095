#!/usr/bin/env python3
"""Ad hoc recipe generation runner.

Generate a recipe (and image) directly, without the surrounding web backend.

Usage:
    python generate.py "Margherita Pizza"
    python generate.py --debug "Margherita Pizza"     # Show full JSON result
    python generate.py --no-image "Margherita Pizza"  # Skip the image pipeline
    python generate.py --health                       # Probe providers and exit

Exit codes:
    0: success (a missing image is still a success)
    1: invalid configuration or recipe generation exhausted all attempts
"""

import asyncio
import sys

from pydantic import ValidationError
from rich.console import Console
from rich.markdown import Markdown

from recipe_generation.generation.availability import AvailabilityProber, configured_services
from recipe_generation.generation.formatting import recipe_to_markdown
from recipe_generation.generation.service import RecipeGenerationService
from recipe_generation.models.models import GenerationRequest
from recipe_generation.providers.gemini import GeminiTextProvider
from recipe_generation.utils.config import Config
from recipe_generation.utils.errors import GenerationExhaustedError
from recipe_generation.utils.logger import logger

console = Console()

USAGE = 'Usage: python generate.py [--debug] [--no-image] [--health] "<dish name>"'


def run_health(config: Config) -> int:
    """Print configured services and Gemini availability."""
    services = configured_services(config)
    prober = AvailabilityProber(
        providers=[GeminiTextProvider.from_config(config)],
        timeout_seconds=config.AVAILABILITY_TIMEOUT_SECONDS,
    )
    results = asyncio.run(prober.check_all())

    console.print("[bold cyan]Configured services[/bold cyan]")
    for name, present in services.items():
        console.print(f"  {name:<10} {'[green]configured[/green]' if present else '[yellow]missing key[/yellow]'}")
    console.print("[bold cyan]Availability[/bold cyan]")
    for name, available in results.items():
        console.print(f"  {name:<10} {'[green]available[/green]' if available else '[red]unavailable[/red]'}")
    return 0 if all(results.values()) else 1


def run_generation(subject_name: str, config: Config, debug: bool = False, include_images: bool = True) -> int:
    """Generate one recipe and print it. Returns the process exit code."""
    try:
        request = GenerationRequest(subject_name=subject_name)
    except ValidationError as e:
        console.print(f"[red]✗ Invalid dish name: {e.errors()[0]['msg']}[/red]")
        return 1
    service = RecipeGenerationService.from_config(config, include_images=include_images)

    logger.info(f"Generating recipe: {request.subject_name}")
    try:
        result = asyncio.run(service.generate(request))
    except GenerationExhaustedError as e:
        console.print(f"[red]✗ Recipe service temporarily unavailable, try again later: {e}[/red]")
        return 1

    console.print()
    if debug:
        console.print("[bold cyan]Debug Mode: Full Result[/bold cyan]")
        console.print("[dim]" + "=" * 60 + "[/dim]")
        console.print_json(data=result.model_dump(mode="json", by_alias=True))
        console.print("[dim]" + "=" * 60 + "[/dim]")
        console.print()

    console.print(Markdown(recipe_to_markdown(result)))
    if result.image is None and include_images:
        console.print("[yellow]No image available for this recipe[/yellow]")
    return 0


def main(argv: list[str]) -> int:
    debug_mode = False
    include_images = True
    health = False
    argv_start = 0

    while argv_start < len(argv) and argv[argv_start].startswith("--"):
        flag = argv[argv_start]
        if flag == "--debug":
            debug_mode = True
        elif flag == "--no-image":
            include_images = False
        elif flag == "--health":
            health = True
        else:
            print(f"Unknown flag: {flag}")
            print(USAGE)
            return 1
        argv_start += 1

    config = Config()
    # Health reports missing keys itself, so it runs before validation
    if health:
        return run_health(config)

    try:
        config.validate()
    except ValueError as e:
        console.print(f"[red]✗ Configuration error: {e}[/red]")
        return 1

    subject_name = " ".join(argv[argv_start:]).strip()
    if not subject_name:
        print("Error: No dish name provided")
        print(USAGE)
        return 1

    try:
        return run_generation(subject_name, config, debug=debug_mode, include_images=include_images)
    except KeyboardInterrupt:
        logger.info("Generation interrupted by user.")
        return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
