"""
ChefGenie - LLM Client.

Provides structured, text, image and transcription calls.
"""

from chefgenie.llm.client import (
    call_image,
    call_llm,
    call_llm_text,
    call_transcription,
    get_client,
    get_raw_async_client,
)
from chefgenie.llm.model_router import get_model

__all__ = [
    "get_client",
    "get_raw_async_client",
    "call_llm",
    "call_llm_text",
    "call_image",
    "call_transcription",
    "get_model",
]
