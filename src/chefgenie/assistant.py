"""
Chef assistant panel.

Two modes over one message thread: "chat" answers questions about the
current recipe, "tweak" rewrites the recipe from the user's feedback.
"""

import logging
from dataclasses import dataclass, field
from typing import Literal

from chefgenie.errors import GenerationError
from chefgenie.generation import RecipeGenerator
from chefgenie.models import Recipe

logger = logging.getLogger(__name__)

Mode = Literal["chat", "tweak"]

GREETING = (
    "Hi! I'm your Chef Assistant. Ask me questions about this dish, or tell me if you "
    "want to change something (e.g., 'Make it spicy' or 'I don't have onions')."
)
TWEAK_WORKING = "Working on those changes for you... this might take a moment."
TWEAK_DONE = "Done! I've updated the recipe above."
TWEAK_FAILED = "Sorry, I hit a snag in the kitchen. Please try again."


@dataclass
class ChatMessage:
    role: Literal["user", "assistant"]
    text: str


@dataclass
class ChefAssistant:
    """Conversation state for the assistant panel."""

    generator: RecipeGenerator
    mode: Mode = "chat"
    messages: list[ChatMessage] = field(
        default_factory=lambda: [ChatMessage("assistant", GREETING)]
    )

    async def send(self, text: str, recipe: Recipe) -> Recipe | None:
        """
        Handle one user message.

        Returns:
            The tweaked recipe in tweak mode when it succeeded, else None
        """
        text = text.strip()
        if not text:
            return None

        self.messages.append(ChatMessage("user", text))

        if self.mode == "chat":
            answer = await self.generator.ask_chef_about_recipe(recipe, text)
            self.messages.append(ChatMessage("assistant", answer))
            return None

        self.messages.append(ChatMessage("assistant", TWEAK_WORKING))
        try:
            updated = await self.generator.tweak_recipe(recipe, text)
        except GenerationError as e:
            logger.error(f"Tweak failed: {e}")
            self.messages.append(ChatMessage("assistant", TWEAK_FAILED))
            return None

        self.messages.append(ChatMessage("assistant", TWEAK_DONE))
        return updated

    @property
    def last_reply(self) -> str:
        for message in reversed(self.messages):
            if message.role == "assistant":
                return message.text
        return ""
