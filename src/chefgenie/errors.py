"""ChefGenie exception types."""


class ChefGenieError(Exception):
    """Base class for ChefGenie errors."""


class ModelNotConfiguredError(ChefGenieError):
    """No API key is available for the generative model."""


class GenerationError(ChefGenieError):
    """The remote model failed, returned nothing, or returned an unusable recipe."""


class StorageWriteError(ChefGenieError):
    """The cookbook store rejected a write."""


class VoiceInputUnavailable(ChefGenieError):
    """No speech recognizer is available."""
