"""
ChefGenie - Model Router.

Selects the model configuration for each kind of call.

Operations:
- recipe: New recipe from the request form → text model, creative
- tweak: Full recipe rewrite from feedback → text model, a little tighter
- chat: Free-text Q&A about a recipe → text model, conversational
- image: Food photography for a recipe → image model
"""

from typing import Literal, TypedDict

Operation = Literal["recipe", "tweak", "chat", "image"]


class ModelConfig(TypedDict, total=False):
    """Configuration for model calls."""

    model: str
    temperature: float
    max_tokens: int


DEFAULT_TEXT_MODEL = "gpt-4.1-mini"
DEFAULT_IMAGE_MODEL = "gpt-image-1"

MODEL_CONFIGS: dict[str, ModelConfig] = {
    "recipe": {
        "model": DEFAULT_TEXT_MODEL,
        "temperature": 0.8,  # "Creative but practical"
    },
    "tweak": {
        "model": DEFAULT_TEXT_MODEL,
        "temperature": 0.5,  # Keep what the user didn't ask to change
    },
    "chat": {
        "model": DEFAULT_TEXT_MODEL,
        "temperature": 0.6,
        "max_tokens": 500,  # Answers should be concise
    },
    "image": {
        "model": DEFAULT_IMAGE_MODEL,
    },
}

DEFAULT_CONFIG: ModelConfig = {
    "model": DEFAULT_TEXT_MODEL,
    "temperature": 0.5,
}


def get_model(operation: Operation | str) -> str:
    """Get the model name for an operation."""
    return MODEL_CONFIGS.get(operation, DEFAULT_CONFIG)["model"]


def get_model_config(
    operation: Operation | str,
    *,
    text_model: str | None = None,
    image_model: str | None = None,
) -> ModelConfig:
    """
    Get a copy of the configuration for an operation.

    Args:
        operation: Which call is being made
        text_model: Override for text operations (usually from settings)
        image_model: Override for the image operation

    Returns:
        Model configuration safe to mutate
    """
    config = MODEL_CONFIGS.get(operation, DEFAULT_CONFIG).copy()

    if operation == "image":
        if image_model:
            config["model"] = image_model
    elif text_model:
        config["model"] = text_model

    return config
