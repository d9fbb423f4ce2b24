"""
Voice input.

Single-shot dictation: one recording in, one transcript out, and the
transcript replaces whatever the field held before.
"""

import logging
from pathlib import Path
from typing import Protocol

from chefgenie.config import ChefGenieSettings, get_settings
from chefgenie.errors import VoiceInputUnavailable
from chefgenie.llm.client import call_transcription

logger = logging.getLogger(__name__)

UNSUPPORTED_MESSAGE = "Voice input is not supported in this environment."


class SpeechRecognizer(Protocol):
    def transcribe(self, audio: Path) -> str: ...


class WhisperRecognizer:
    """Transcribes recorded audio files with the OpenAI audio API."""

    def __init__(self, language: str = "en"):
        self.language = language

    def transcribe(self, audio: Path) -> str:
        return call_transcription(audio_path=audio, language=self.language)


def default_recognizer(settings: ChefGenieSettings | None = None) -> SpeechRecognizer | None:
    """The recognizer to use, or None when speech capture isn't available."""
    settings = settings or get_settings()
    if not settings.openai_api_key:
        return None
    return WhisperRecognizer()


class VoiceInput:
    """Dictation for one text field."""

    def __init__(self, recognizer: SpeechRecognizer | None):
        self.recognizer = recognizer

    @property
    def available(self) -> bool:
        return self.recognizer is not None

    def capture(self, audio: Path, current: str = "") -> str:
        """
        Transcribe one recording.

        Returns:
            The transcript, replacing current; current unchanged if
            recognition failed or heard nothing

        Raises:
            VoiceInputUnavailable: no recognizer is available
        """
        if self.recognizer is None:
            raise VoiceInputUnavailable(UNSUPPORTED_MESSAGE)

        try:
            transcript = self.recognizer.transcribe(audio).strip()
        except Exception as e:
            logger.error(f"Speech recognition error: {e}")
            return current

        return transcript or current
