"""
Tests for the generation client.

The OpenAI calls are patched at the service boundary; these tests check
prompt contents and the failure policy of each operation.
"""

from unittest.mock import AsyncMock, patch

import pytest
from pydantic import ValidationError

from chefgenie.config import ChefGenieSettings
from chefgenie.errors import GenerationError
from chefgenie.generation import CHAT_FALLBACK, ChefGenieClient
from chefgenie.generation.prompts import (
    build_chat_prompt,
    build_image_prompt,
    build_recipe_prompt,
    build_tweak_prompt,
)
from chefgenie.models import MealType, Recipe, RecipeRequest, SavedRecipe

from conftest import PIXEL_PNG, make_recipe_data, run

SERVICE = "chefgenie.generation.service"


@pytest.fixture
def client() -> ChefGenieClient:
    return ChefGenieClient(ChefGenieSettings(_env_file=None, openai_api_key="test-key-not-real"))


@pytest.fixture
def request_() -> RecipeRequest:
    return RecipeRequest(
        meal_type=MealType.DINNER,
        available_ingredients="chicken, rice",
        servings=4,
    )


class TestPrompts:

    def test_recipe_prompt(self, request_):
        prompt = build_recipe_prompt(request_)
        assert "meal recipe for Dinner" in prompt
        assert '"chicken, rice"' in prompt
        assert 'Dietary restrictions: "None"' in prompt
        assert "exactly for 4 serving(s)" in prompt
        assert "JSON" in prompt

    def test_recipe_prompt_dietary(self):
        prompt = build_recipe_prompt(
            RecipeRequest(available_ingredients="tofu", dietary_restrictions="Vegan, gluten-free")
        )
        assert 'Dietary restrictions: "Vegan, gluten-free"' in prompt

    def test_image_prompt(self):
        prompt = build_image_prompt("Shakshuka", "Eggs poached in spiced tomato")
        assert prompt.startswith("A professional, appetizing food photography shot of Shakshuka.")
        assert "Eggs poached in spiced tomato" in prompt
        assert "photorealistic" in prompt

    def test_chat_prompt(self, sample_recipe):
        prompt = build_chat_prompt(sample_recipe, "Can I use brown rice?")
        assert sample_recipe.title in prompt
        assert '"Can I use brown rice?"' in prompt

    def test_tweak_prompt_sends_full_recipe_without_identity(self, sample_recipe):
        saved = SavedRecipe.from_recipe(sample_recipe, rating=5, notes="secret")
        prompt = build_tweak_prompt(saved, "No garlic")
        assert '"prepTimeMinutes": 15' in prompt
        assert "jasmine rice" in prompt
        assert '"No garlic"' in prompt
        assert saved.id not in prompt
        assert "secret" not in prompt
        assert "FULL updated recipe" in prompt


class TestGenerateRecipe:

    def test_returns_recipe(self, client, request_, sample_recipe):
        with patch(f"{SERVICE}.call_llm", new_callable=AsyncMock) as mock_llm:
            mock_llm.return_value = sample_recipe
            recipe = run(client.generate_recipe(request_))

        assert recipe is sample_recipe
        kwargs = mock_llm.call_args.kwargs
        assert kwargs["response_model"] is Recipe
        assert kwargs["operation"] == "recipe"
        assert "chicken, rice" in kwargs["prompt"]

    def test_uses_injected_text_model(self, request_, sample_recipe):
        client = ChefGenieClient(
            ChefGenieSettings(_env_file=None, openai_api_key="test-key-not-real", text_model="gpt-4o")
        )
        with patch(f"{SERVICE}.call_llm", new_callable=AsyncMock) as mock_llm:
            mock_llm.return_value = sample_recipe
            run(client.generate_recipe(request_))
        assert mock_llm.call_args.kwargs["model"] == "gpt-4o"

    def test_remote_error_becomes_generation_error(self, client, request_):
        with patch(f"{SERVICE}.call_llm", new_callable=AsyncMock) as mock_llm:
            mock_llm.side_effect = RuntimeError("connection reset")
            with pytest.raises(GenerationError, match="connection reset"):
                run(client.generate_recipe(request_))
        mock_llm.assert_awaited_once()  # No retry

    def test_invalid_shape_becomes_generation_error(self, client, request_):
        try:
            Recipe.model_validate(make_recipe_data(ingredients=[]))
        except ValidationError as e:
            validation_error = e

        with patch(f"{SERVICE}.call_llm", new_callable=AsyncMock) as mock_llm:
            mock_llm.side_effect = validation_error
            with pytest.raises(GenerationError):
                run(client.generate_recipe(request_))

    def test_empty_response_becomes_generation_error(self, client, request_):
        with patch(f"{SERVICE}.call_llm", new_callable=AsyncMock) as mock_llm:
            mock_llm.return_value = None
            with pytest.raises(GenerationError):
                run(client.generate_recipe(request_))


class TestTweakRecipe:

    def test_returns_new_recipe(self, client, sample_recipe):
        tweaked = Recipe.model_validate(make_recipe_data(title="Spicy Lemon Chicken"))
        with patch(f"{SERVICE}.call_llm", new_callable=AsyncMock) as mock_llm:
            mock_llm.return_value = tweaked
            result = run(client.tweak_recipe(sample_recipe, "Make it spicy"))

        assert result.title == "Spicy Lemon Chicken"
        assert mock_llm.call_args.kwargs["operation"] == "tweak"
        assert '"Make it spicy"' in mock_llm.call_args.kwargs["prompt"]

    def test_failure_raises(self, client, sample_recipe):
        with patch(f"{SERVICE}.call_llm", new_callable=AsyncMock) as mock_llm:
            mock_llm.side_effect = RuntimeError("empty")
            with pytest.raises(GenerationError, match="Failed to update recipe"):
                run(client.tweak_recipe(sample_recipe, "less salt"))


class TestGenerateImage:

    def test_returns_data_uri(self, client):
        with patch(f"{SERVICE}.call_image", new_callable=AsyncMock) as mock_image:
            mock_image.return_value = ("image/png", PIXEL_PNG)
            uri = run(client.generate_recipe_image("Shakshuka", "Eggs in tomato"))

        assert uri == f"data:image/png;base64,{PIXEL_PNG}"
        assert "Shakshuka" in mock_image.call_args.kwargs["prompt"]

    def test_uses_injected_image_settings(self):
        client = ChefGenieClient(
            ChefGenieSettings(
                _env_file=None, openai_api_key="test-key-not-real", image_model="dall-e-3", image_size="512x512"
            )
        )
        with patch(f"{SERVICE}.call_image", new_callable=AsyncMock) as mock_image:
            mock_image.return_value = ("image/png", PIXEL_PNG)
            run(client.generate_recipe_image("Shakshuka", "Eggs"))
        kwargs = mock_image.call_args.kwargs
        assert kwargs["model"] == "dall-e-3"
        assert kwargs["size"] == "512x512"

    def test_no_image_part_returns_none(self, client):
        with patch(f"{SERVICE}.call_image", new_callable=AsyncMock) as mock_image:
            mock_image.return_value = None
            assert run(client.generate_recipe_image("Shakshuka", "Eggs")) is None

    def test_failure_is_swallowed(self, client):
        with patch(f"{SERVICE}.call_image", new_callable=AsyncMock) as mock_image:
            mock_image.side_effect = RuntimeError("content policy")
            assert run(client.generate_recipe_image("Shakshuka", "Eggs")) is None

    def test_no_key_skips_call(self):
        client = ChefGenieClient(ChefGenieSettings(_env_file=None, openai_api_key=None))
        with patch(f"{SERVICE}.call_image", new_callable=AsyncMock) as mock_image:
            assert run(client.generate_recipe_image("Shakshuka", "Eggs")) is None
        mock_image.assert_not_awaited()


class TestAskChef:

    def test_returns_answer(self, client, sample_recipe):
        with patch(f"{SERVICE}.call_llm_text", new_callable=AsyncMock) as mock_text:
            mock_text.return_value = "  Yes, brown rice works; add 15 minutes.  "
            answer = run(client.ask_chef_about_recipe(sample_recipe, "Brown rice?"))

        assert answer == "Yes, brown rice works; add 15 minutes."
        assert mock_text.call_args.kwargs["operation"] == "chat"

    def test_failure_returns_fallback(self, client, sample_recipe):
        with patch(f"{SERVICE}.call_llm_text", new_callable=AsyncMock) as mock_text:
            mock_text.side_effect = RuntimeError("503")
            assert run(client.ask_chef_about_recipe(sample_recipe, "?")) == CHAT_FALLBACK

    def test_empty_answer_returns_fallback(self, client, sample_recipe):
        with patch(f"{SERVICE}.call_llm_text", new_callable=AsyncMock) as mock_text:
            mock_text.return_value = ""
            assert run(client.ask_chef_about_recipe(sample_recipe, "?")) == CHAT_FALLBACK
