"""Prompt templates for recipe generation, tweaks, chat and images."""

import json

from chefgenie.models import Recipe, RecipeRequest

CHAT_FALLBACK = "I'm having trouble thinking of an answer right now."


def build_recipe_prompt(request: RecipeRequest) -> str:
    dietary = (request.dietary_restrictions or "").strip() or "None"
    return (
        f"Create a unique, complete meal recipe for {request.meal_type.value}.\n"
        "Context: The user has the following ingredients available "
        "(try to use them but you can add others): "
        f'"{request.available_ingredients.strip()}".\n'
        f'Dietary restrictions: "{dietary}".\n'
        f"Scale the recipe exactly for {request.servings} serving(s).\n"
        "\n"
        "The recipe should be creative but practical.\n"
        "Return the response in JSON format."
    )


def build_image_prompt(title: str, description: str) -> str:
    return (
        f"A professional, appetizing food photography shot of {title}. {description}. "
        "High resolution, culinary magazine style, beautiful lighting, photorealistic."
    )


def build_chat_prompt(recipe: Recipe, question: str) -> str:
    return (
        "You are a helpful, knowledgeable chef assistant.\n"
        f"Current Recipe Context: {recipe.title}.\n"
        f'User Question: "{question}"\n'
        "Answer concisely."
    )


def build_tweak_prompt(recipe: Recipe, feedback: str) -> str:
    # Identity and annotations stay local; the model only sees the recipe itself
    original = json.dumps(
        recipe.model_dump(mode="json", by_alias=True, include=set(Recipe.model_fields))
    )
    return (
        "The user wants to modify the following recipe.\n"
        f"Original Recipe JSON: {original}\n"
        f'User Feedback: "{feedback}"\n'
        "Return the FULL updated recipe as JSON."
    )
