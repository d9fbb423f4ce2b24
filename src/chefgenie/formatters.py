"""
Terminal rendering for recipes and the cookbook.

Everything here returns rich renderables; printing is left to the caller.
"""

from __future__ import annotations

from datetime import datetime

from rich.console import Group, RenderableType
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from chefgenie.models import Recipe, SavedRecipe

EMPTY_COOKBOOK = "Your cookbook is empty. Create a recipe and save it to see it here."
NO_MATCHES = "No recipes match your search."

DIFFICULTY_STYLES = {
    "Easy": "green",
    "Medium": "yellow",
    "Hard": "red",
}


def format_stars(rating: int | None) -> str:
    """Five-star string, e.g. 3 -> ★★★☆☆."""
    filled = rating or 0
    return "★" * filled + "☆" * (5 - filled)


def format_minutes(minutes: int) -> str:
    if minutes < 60:
        return f"{minutes} min"
    hours, rest = divmod(minutes, 60)
    return f"{hours} h {rest} min" if rest else f"{hours} h"


def format_saved_at(saved_at: int) -> str:
    return datetime.fromtimestamp(saved_at / 1000).strftime("%b %d, %Y")


def recipe_stats(recipe: Recipe) -> Text:
    stats = Text()
    stats.append(f"⏱ {format_minutes(recipe.total_time_minutes)}")
    stats.append(f"  (prep {recipe.prep_time_minutes}, cook {recipe.cook_time_minutes})", style="dim")
    stats.append(f"   👥 {recipe.servings} servings")
    if recipe.calories_per_serving is not None:
        stats.append(f"   🔥 {recipe.calories_per_serving} kcal/serving")
    stats.append("   ")
    stats.append(recipe.difficulty, style=DIFFICULTY_STYLES.get(recipe.difficulty, ""))
    return stats


def render_recipe(
    recipe: Recipe,
    *,
    image_url: str | None = None,
    saved: SavedRecipe | None = None,
    image_pending: bool = False,
) -> RenderableType:
    """
    Full recipe view.

    Args:
        recipe: What to show
        image_url: Current image, if one has loaded
        saved: The cookbook entry with this title, if the recipe is saved
        image_pending: Whether an image request is still in flight
    """
    parts: list[RenderableType] = []

    if recipe.meal_type:
        parts.append(Text(recipe.meal_type.upper(), style="bold dim"))
    parts.append(Text(recipe.description, style="italic"))
    parts.append(recipe_stats(recipe))

    if image_url:
        size_kb = len(image_url) * 3 // 4 // 1024
        parts.append(Text(f"📷 Photo available ({size_kb} KB)", style="dim"))
    elif image_pending:
        parts.append(Text("📷 Photo is still being prepared...", style="dim"))

    ingredients = Table(title="Ingredients", show_header=False, box=None, title_justify="left")
    ingredients.add_column("amount", style="bold")
    ingredients.add_column("name")
    for ingredient in recipe.ingredients:
        name = ingredient.name
        if ingredient.notes:
            name += f" ({ingredient.notes})"
        ingredients.add_row(ingredient.amount, name)
    parts.append(ingredients)

    steps = Text("Instructions\n", style="bold")
    for i, step in enumerate(recipe.instructions, start=1):
        steps.append(f"{i}. ", style="bold")
        steps.append(f"{step}\n", style="")
    parts.append(steps)

    if recipe.chef_tips:
        tips = Text("Chef's Tips\n", style="bold")
        for tip in recipe.chef_tips:
            tips.append(f"• {tip}\n", style="")
        parts.append(tips)

    if saved is not None:
        footer = Text()
        footer.append("✓ In your cookbook", style="green")
        footer.append(f"   {format_stars(saved.rating)}", style="yellow")
        if saved.notes:
            footer.append(f"\nNotes: {saved.notes}", style="dim")
        parts.append(footer)

    return Panel(Group(*parts), title=f"[bold]{recipe.title}[/bold]", border_style="green")


def render_cookbook(recipes: list[SavedRecipe], *, searched: bool = False) -> RenderableType:
    """Cookbook listing, newest first."""
    if not recipes:
        return Text(NO_MATCHES if searched else EMPTY_COOKBOOK, style="dim")

    table = Table(title="My Cookbook", title_justify="left")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Title", style="bold")
    table.add_column("Meal")
    table.add_column("Time", justify="right")
    table.add_column("Rating", style="yellow")
    table.add_column("Saved", style="dim")

    for i, recipe in enumerate(recipes, start=1):
        table.add_row(
            str(i),
            recipe.title,
            recipe.meal_type,
            format_minutes(recipe.total_time_minutes),
            format_stars(recipe.rating) if recipe.rating else "",
            format_saved_at(recipe.saved_at),
        )
    return table
