"""
ChefGenie - CLI Entry Point.

Usage:
    chefgenie create -i "chicken, rice" -s 4     Generate a recipe
    chefgenie cookbook [SEARCH]                  List saved recipes
    chefgenie show TITLE                         Show a saved recipe
    chefgenie chat TITLE                         Ask the chef assistant
    chefgenie serve                              Run the passthrough server
    chefgenie --help                             Show help

Saved recipes can be referred to by exact title or by their number in
the cookbook listing.
"""

import asyncio
import logging
from pathlib import Path

import typer
from rich.console import Console
from rich.live import Live
from rich.logging import RichHandler
from rich.panel import Panel
from rich.spinner import Spinner

from chefgenie.assistant import ChefAssistant
from chefgenie.errors import GenerationError, StorageWriteError, VoiceInputUnavailable
from chefgenie.formatters import render_cookbook, render_recipe
from chefgenie.generation import ChefGenieClient, RecipeGenerator
from chefgenie.llm.client import decode_data_uri
from chefgenie.models import DEFAULT_SERVINGS, MealType, Recipe, RecipeRequest, SavedRecipe
from chefgenie.session import RecipeSession
from chefgenie.storage import SAVE_FAILED_MESSAGE, Cookbook, JsonFileStore
from chefgenie.voice import VoiceInput, default_recognizer

app = typer.Typer(
    name="chefgenie",
    help="ChefGenie - Tell us what you have, we'll cook up the rest.",
    add_completion=False,
)
console = Console()

DELETE_CONFIRM = "Are you sure you want to remove this recipe from your cookbook?"


# =============================================================================
# Wiring (patched in tests)
# =============================================================================


def get_cookbook() -> Cookbook:
    from chefgenie.config import settings

    store = JsonFileStore(settings.cookbook_path, quota_bytes=settings.cookbook_quota_bytes)
    return Cookbook(store, key=settings.cookbook_key)


def get_generator() -> RecipeGenerator:
    return ChefGenieClient()


def get_voice_input() -> VoiceInput:
    return VoiceInput(default_recognizer())


# =============================================================================
# Helpers
# =============================================================================


@app.callback()
def main(
    log_prompts: bool = typer.Option(False, "--log-prompts", "-l", help="Log all model prompts to prompt_logs/"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
) -> None:
    """ChefGenie - AI powered culinary assistant."""
    from chefgenie.config import settings
    from chefgenie.llm.prompt_logger import enable_prompt_logging

    logging.basicConfig(
        level="DEBUG" if verbose else settings.log_level,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )

    if log_prompts or settings.chefgenie_log_prompts:
        enable_prompt_logging(True)


def _resolve(cookbook: Cookbook, ref: str) -> SavedRecipe:
    """Find a saved recipe by listing number or title, or exit."""
    recipes = cookbook.list_saved()

    if ref.isdigit():
        index = int(ref) - 1
        if 0 <= index < len(recipes):
            return recipes[index]
    else:
        exact = cookbook.find(ref)
        if exact is not None:
            return exact
        folded = [r for r in recipes if r.title.casefold() == ref.casefold()]
        if len(folded) == 1:
            return folded[0]

    console.print(f"[red]No saved recipe matches {ref!r}.[/red] Run [bold]chefgenie cookbook[/bold] to list them.")
    raise typer.Exit(1)


def _save(
    cookbook: Cookbook,
    recipe: Recipe,
    image_url: str | None = None,
    rating: int | None = None,
    notes: str | None = None,
) -> SavedRecipe:
    """Save, carrying over the photo, rating and notes of a same-titled entry."""
    existing = cookbook.find(recipe.title)
    if existing is not None:
        image_url = image_url or existing.image_url
        rating = rating or existing.rating
        notes = notes if notes is not None else existing.notes

    try:
        saved = cookbook.save(recipe, image_url=image_url, rating=rating, notes=notes)
    except StorageWriteError:
        console.print(f"[red]{SAVE_FAILED_MESSAGE}[/red]")
        raise typer.Exit(1)
    console.print(f"[green]Saved to your cookbook:[/green] {saved.title}")
    return saved


def _write_image(image_url: str | None, path: Path) -> None:
    if not image_url:
        console.print("[yellow]No photo available for this recipe.[/yellow]")
        return
    mime, data = decode_data_uri(image_url)
    path.write_bytes(data)
    console.print(f"[dim]Photo ({mime}) written to {path}[/dim]")


def _dictate(audio: Path, current: str = "") -> str:
    voice = get_voice_input()
    try:
        return voice.capture(audio, current)
    except VoiceInputUnavailable as e:
        console.print(f"[yellow]{e}[/yellow]")
        return current


# =============================================================================
# Create
# =============================================================================


@app.command()
def create(
    ingredients: str = typer.Option("", "--ingredients", "-i", help="What you have, e.g. 'chicken breast, spinach, lemon'"),
    meal_type: MealType = typer.Option(MealType.DINNER, "--meal-type", "-m", case_sensitive=False, help="Kind of meal"),
    dietary: str = typer.Option("", "--dietary", "-d", help="Dietary restrictions, e.g. 'Gluten-free, Vegan'"),
    servings: int = typer.Option(DEFAULT_SERVINGS, "--servings", "-s", help="Servings (1-12)"),
    voice_file: Path | None = typer.Option(None, "--voice-file", help="Dictate the ingredients from a recording"),
    with_image: bool = typer.Option(True, "--image/--no-image", help="Also generate a food photo"),
    image_out: Path | None = typer.Option(None, "--image-out", help="Write the photo to this file"),
    save: bool | None = typer.Option(None, "--save/--no-save", help="Save to the cookbook (asks if omitted)"),
    rating: int | None = typer.Option(None, "--rating", "-r", min=1, max=5, help="Star rating when saving"),
    notes: str | None = typer.Option(None, "--notes", "-n", help="Notes when saving"),
) -> None:
    """Generate a new recipe from what you have on hand."""
    if voice_file is not None:
        ingredients = _dictate(voice_file, ingredients)

    request = RecipeRequest(
        meal_type=meal_type,
        available_ingredients=ingredients,
        dietary_restrictions=dietary or None,
        servings=servings,
    )
    cookbook = get_cookbook()
    session = RecipeSession(get_generator())

    async def run() -> None:
        with Live(Spinner("dots", text="Cooking up your recipe..."), console=console, transient=True):
            recipe = await session.create_recipe(request, load_image=with_image)

        if recipe is None:
            console.print(f"[red]⚠️  {session.error}[/red]")
            raise typer.Exit(1)

        existing = cookbook.find(recipe.title)
        console.print(render_recipe(recipe, saved=existing, image_pending=with_image))

        if with_image:
            with Live(Spinner("dots", text="Plating for the photo..."), console=console, transient=True):
                await session.wait_for_image()
            if session.image_url:
                console.print("[dim]📷 Photo ready.[/dim]")
            else:
                console.print("[dim]No photo this time.[/dim]")

    asyncio.run(run())

    recipe = session.active_recipe
    if image_out is not None:
        _write_image(session.image_url, image_out)

    if save is None:
        save = typer.confirm("Save to your cookbook?", default=False)
    if save:
        _save(cookbook, recipe, image_url=session.image_url, rating=rating, notes=notes)


# =============================================================================
# Cookbook
# =============================================================================


@app.command()
def cookbook(
    search: str = typer.Argument("", help="Filter by title or meal type"),
) -> None:
    """List your saved recipes, newest first."""
    book = get_cookbook()
    recipes = book.search(search) if search else book.list_saved()
    console.print(render_cookbook(recipes, searched=bool(search)))


@app.command()
def show(
    recipe_ref: str = typer.Argument(..., metavar="TITLE", help="Title or listing number"),
    image_out: Path | None = typer.Option(None, "--image-out", help="Write the saved photo to this file"),
) -> None:
    """Show a saved recipe."""
    book = get_cookbook()
    saved = _resolve(book, recipe_ref)
    session = RecipeSession(get_generator())
    session.select_saved(saved)
    console.print(render_recipe(session.active_recipe, image_url=session.image_url, saved=saved))
    if image_out is not None:
        _write_image(session.image_url, image_out)


@app.command()
def rate(
    recipe_ref: str = typer.Argument(..., metavar="TITLE", help="Title or listing number"),
    stars: int = typer.Argument(..., min=1, max=5, help="1 to 5 stars"),
) -> None:
    """Rate a saved recipe."""
    book = get_cookbook()
    saved = _resolve(book, recipe_ref)
    try:
        book.update_rating_or_notes(saved.title, stars, saved.notes)
    except StorageWriteError:
        console.print(f"[red]{SAVE_FAILED_MESSAGE}[/red]")
        raise typer.Exit(1)
    console.print(f"[yellow]{'★' * stars}[/yellow] {saved.title}")


@app.command()
def note(
    recipe_ref: str = typer.Argument(..., metavar="TITLE", help="Title or listing number"),
    text: str = typer.Argument(..., help="Your notes; an empty string clears them"),
) -> None:
    """Add or replace your notes on a saved recipe."""
    book = get_cookbook()
    saved = _resolve(book, recipe_ref)
    try:
        book.update_rating_or_notes(saved.title, saved.rating, text or None)
    except StorageWriteError:
        console.print(f"[red]{SAVE_FAILED_MESSAGE}[/red]")
        raise typer.Exit(1)
    console.print(f"[green]Notes updated:[/green] {saved.title}")


@app.command()
def delete(
    recipe_ref: str = typer.Argument(..., metavar="TITLE", help="Title or listing number"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Don't ask for confirmation"),
) -> None:
    """Remove a recipe from your cookbook."""
    book = get_cookbook()
    saved = _resolve(book, recipe_ref)
    if not yes and not typer.confirm(DELETE_CONFIRM, default=False):
        raise typer.Exit(0)
    book.delete(saved.title)
    console.print(f"[dim]Removed {saved.title}[/dim]")


# =============================================================================
# Assistant
# =============================================================================


@app.command()
def ask(
    recipe_ref: str = typer.Argument(..., metavar="TITLE", help="Title or listing number"),
    question: str = typer.Argument(..., help="e.g. 'How do I make this vegan?'"),
) -> None:
    """Ask the chef a question about a saved recipe."""
    saved = _resolve(get_cookbook(), recipe_ref)
    generator = get_generator()

    with Live(Spinner("dots", text="Thinking..."), console=console, transient=True):
        answer = asyncio.run(generator.ask_chef_about_recipe(saved, question))

    console.print(f"\n[bold green]Chef:[/bold green] {answer}")


@app.command()
def tweak(
    recipe_ref: str = typer.Argument(..., metavar="TITLE", help="Title or listing number"),
    feedback: str = typer.Argument(..., help="e.g. 'Remove the cilantro'"),
    save: bool = typer.Option(False, "--save", help="Save the tweaked recipe"),
) -> None:
    """Rewrite a saved recipe from your feedback."""
    book = get_cookbook()
    saved = _resolve(book, recipe_ref)
    generator = get_generator()

    try:
        with Live(Spinner("dots", text="Working on those changes..."), console=console, transient=True):
            updated = asyncio.run(generator.tweak_recipe(saved, feedback))
    except GenerationError as e:
        console.print(f"[red]Sorry, I hit a snag in the kitchen. Please try again.[/red] [dim]({e})[/dim]")
        raise typer.Exit(1)

    console.print(render_recipe(updated, saved=book.find(updated.title)))
    if save:
        _save(book, updated, image_url=saved.image_url)


@app.command()
def chat(
    recipe_ref: str = typer.Argument(..., metavar="TITLE", help="Title or listing number"),
) -> None:
    """Chat with the chef assistant about a saved recipe."""
    book = get_cookbook()
    saved = _resolve(book, recipe_ref)
    generator = get_generator()
    assistant = ChefAssistant(generator)
    session = RecipeSession(generator)
    session.select_saved(saved)

    console.print(
        Panel.fit(
            f"[bold green]Chef Assistant[/bold green] · {saved.title}\n"
            f"{assistant.last_reply}\n\n"
            "[dim]/chat or /tweak to switch mode · /voice FILE to dictate · "
            "/show · /save · /quit[/dim]",
            border_style="green",
        )
    )

    async def loop() -> None:
        while True:
            recipe = session.active_recipe
            try:
                text = console.input(f"\n[bold blue]You ({assistant.mode}):[/bold blue] ").strip()
            except (KeyboardInterrupt, EOFError):
                console.print("\n[dim]Goodbye! 👋[/dim]")
                return

            if text.lower() in ("/quit", "/exit", "exit", "quit"):
                console.print("\n[dim]Goodbye! 👋[/dim]")
                return
            if text in ("/chat", "/tweak"):
                assistant.mode = text[1:]
                console.print(f"[dim]Mode: {assistant.mode}[/dim]")
                continue
            if text == "/show":
                console.print(render_recipe(recipe, image_url=session.image_url, saved=book.find(recipe.title)))
                continue
            if text == "/save":
                _save(book, recipe, image_url=session.image_url)
                continue
            if text.startswith("/voice "):
                text = _dictate(Path(text[7:].strip()))
            if not text:
                continue

            with Live(Spinner("dots", text="Thinking..."), console=console, transient=True):
                updated = await assistant.send(text, recipe)

            for message in assistant.messages[-2:]:
                if message.role == "assistant":
                    console.print(f"[bold green]Chef:[/bold green] {message.text}")
            if updated is not None:
                session.apply_tweak(updated)
                console.print(render_recipe(updated, image_url=session.image_url, saved=book.find(updated.title)))

    asyncio.run(loop())


# =============================================================================
# Ops
# =============================================================================


@app.command()
def health() -> None:
    """Check configuration and cookbook storage."""
    from chefgenie.config import get_settings

    console.print("\n[bold]ChefGenie Health Check[/bold]\n")

    settings = get_settings()
    console.print("[green]OK[/green] Configuration loaded")
    console.print(f"   Environment: {settings.chefgenie_env}")
    console.print(f"   Log level: {settings.log_level}")
    console.print(f"   Text model: {settings.text_model} · Image model: {settings.image_model}")

    if settings.openai_api_key:
        console.print("[green]OK[/green] OpenAI API key configured")
    else:
        console.print("[yellow]WARN[/yellow] OPENAI_API_KEY not set, generation is unavailable")

    recipes = get_cookbook().list_saved()
    console.print(f"[green]OK[/green] Cookbook at {settings.cookbook_path} ({len(recipes)} recipes)")


@app.command()
def serve(
    host: str = typer.Option("127.0.0.1", "--host", help="Interface to bind"),
    port: int = typer.Option(8000, "--port", "-p", help="Port to run on"),
    reload: bool = typer.Option(False, "--reload", "-r", help="Enable auto-reload for development"),
) -> None:
    """Start the generation passthrough server."""
    import uvicorn

    console.print("\n[bold green]ChefGenie passthrough[/bold green]")
    console.print(f"Starting server on http://{host}:{port}")
    console.print("[dim]Press Ctrl+C to stop[/dim]\n")

    uvicorn.run("chefgenie.web.app:app", host=host, port=port, reload=reload)


if __name__ == "__main__":
    app()
