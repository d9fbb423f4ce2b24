"""
ChefGenie - LLM Client.

Wraps the async OpenAI client, with Instructor for structured outputs.
All model calls go through here for consistency and prompt logging.

- call_llm: JSON constrained to a Pydantic model (recipes)
- call_llm_text: free text (chef Q&A)
- call_image: one generated image as (mime type, base64 payload)
- call_transcription: speech to text for voice input (blocking)
"""

import base64
from pathlib import Path
from typing import TypeVar

import instructor
from openai import AsyncOpenAI, OpenAI
from pydantic import BaseModel

from chefgenie.config import settings
from chefgenie.errors import ModelNotConfiguredError
from chefgenie.llm.model_router import get_model_config
from chefgenie.llm.prompt_logger import log_prompt

T = TypeVar("T", bound=BaseModel)

IMAGE_MIME_TYPES = {
    "png": "image/png",
    "jpeg": "image/jpeg",
    "webp": "image/webp",
}

# Singleton client instances
_sync_client: OpenAI | None = None
_raw_client: AsyncOpenAI | None = None
_client: instructor.AsyncInstructor | None = None


def get_raw_async_client() -> AsyncOpenAI:
    """
    Get the plain async OpenAI client.

    Uses singleton pattern to reuse connection. The SDK's own retries are
    off: a failed request surfaces on the first attempt.
    """
    global _raw_client

    if _raw_client is None:
        if not settings.openai_api_key:
            raise ModelNotConfiguredError("OPENAI_API_KEY is not set")
        _raw_client = AsyncOpenAI(
            api_key=settings.openai_api_key,
            base_url=settings.openai_base_url,
            max_retries=0,
        )

    return _raw_client


def get_sync_client() -> OpenAI:
    """Get the blocking OpenAI client, for calls made outside an event loop."""
    global _sync_client

    if _sync_client is None:
        if not settings.openai_api_key:
            raise ModelNotConfiguredError("OPENAI_API_KEY is not set")
        _sync_client = OpenAI(
            api_key=settings.openai_api_key,
            base_url=settings.openai_base_url,
            max_retries=0,
        )

    return _sync_client


def get_client() -> instructor.AsyncInstructor:
    """Get the Instructor-wrapped async OpenAI client."""
    global _client

    if _client is None:
        _client = instructor.from_openai(get_raw_async_client())

    return _client


def reset_clients() -> None:
    """Drop cached clients (after a settings change, or in tests)."""
    global _sync_client, _raw_client, _client
    _sync_client = None
    _raw_client = None
    _client = None


async def call_llm(
    *,
    response_model: type[T],
    prompt: str,
    operation: str = "recipe",
    model: str | None = None,
    max_retries: int = 1,
) -> T:
    """
    Make a structured call whose JSON must validate against response_model.

    Args:
        response_model: Pydantic model class for the response
        prompt: User message with the full request
        operation: Which call this is, for model selection and logging
        model: Text model override; defaults to settings.text_model
        max_retries: Attempts Instructor makes; 1 means a single attempt

    Returns:
        Instance of response_model with validated data

    Example:
        recipe = await call_llm(
            response_model=Recipe,
            prompt="Create a unique, complete meal recipe for Dinner...",
            operation="recipe",
        )
        print(recipe.title)
    """
    client = get_client()
    config = get_model_config(operation, text_model=model or settings.text_model)
    model = config.pop("model")

    api_kwargs = {
        "model": model,
        "messages": [{"role": "user", "content": prompt}],
        "response_model": response_model,
        "max_retries": max_retries,
        **config,
    }

    try:
        response = await client.chat.completions.create(**api_kwargs)
    except Exception as e:
        log_prompt(
            operation=operation,
            model=model,
            prompt=prompt,
            response_model=response_model.__name__,
            error=str(e),
            config=config,
        )
        raise

    log_prompt(
        operation=operation,
        model=model,
        prompt=prompt,
        response_model=response_model.__name__,
        response=response,
        config=config,
    )
    return response


async def call_llm_text(*, prompt: str, operation: str = "chat", model: str | None = None) -> str:
    """
    Make a free-text call.

    Returns:
        The message content, or "" when the model produced none
    """
    client = get_raw_async_client()
    config = get_model_config(operation, text_model=model or settings.text_model)
    model = config.pop("model")

    try:
        completion = await client.chat.completions.create(
            model=model,
            messages=[{"role": "user", "content": prompt}],
            **config,
        )
    except Exception as e:
        log_prompt(operation=operation, model=model, prompt=prompt, error=str(e), config=config)
        raise

    text = ""
    if completion.choices:
        text = completion.choices[0].message.content or ""

    log_prompt(operation=operation, model=model, prompt=prompt, response=text, config=config)
    return text


async def call_image(
    *,
    prompt: str,
    model: str | None = None,
    size: str | None = None,
) -> tuple[str, str] | None:
    """
    Generate one image.

    Returns:
        (mime type, base64 payload) of the first inline image, or None
        when the model returned no image data
    """
    client = get_raw_async_client()
    config = get_model_config("image", image_model=model or settings.image_model)
    model = config.pop("model")

    api_kwargs = {
        "model": model,
        "prompt": prompt,
        "size": size or settings.image_size,
        "n": 1,
    }
    if model.startswith("dall-e"):
        # DALL-E returns URLs unless asked otherwise; gpt-image models always return base64
        api_kwargs["response_format"] = "b64_json"

    try:
        result = await client.images.generate(**api_kwargs)
    except Exception as e:
        log_prompt(operation="image", model=model, prompt=prompt, error=str(e))
        raise

    mime = IMAGE_MIME_TYPES.get(getattr(result, "output_format", None) or "png", "image/png")
    for image in result.data or []:
        if image.b64_json:
            log_prompt(
                operation="image",
                model=model,
                prompt=prompt,
                response=f"<{mime}, {len(image.b64_json)} base64 chars>",
            )
            return mime, image.b64_json

    log_prompt(operation="image", model=model, prompt=prompt)
    return None


def call_transcription(*, audio_path: Path, language: str = "en") -> str:
    """Transcribe a recorded audio file (blocking)."""
    client = get_sync_client()
    with audio_path.open("rb") as audio:
        result = client.audio.transcriptions.create(
            model=settings.transcription_model,
            file=audio,
            language=language,
        )
    return (result.text or "").strip()


def to_data_uri(mime: str, payload: str) -> str:
    """Encode an inline image payload as a data URI."""
    return f"data:{mime};base64,{payload}"


def decode_data_uri(uri: str) -> tuple[str, bytes]:
    """Split a base64 data URI into (mime type, raw bytes)."""
    header, _, payload = uri.partition(",")
    mime = header.removeprefix("data:").split(";", 1)[0]
    return mime, base64.b64decode(payload)
