"""Local persistence for saved recipes."""

from chefgenie.storage.backends import JsonFileStore, KeyValueStore, MemoryStore
from chefgenie.storage.cookbook import DEFAULT_KEY, SAVE_FAILED_MESSAGE, Cookbook

__all__ = [
    "Cookbook",
    "DEFAULT_KEY",
    "JsonFileStore",
    "KeyValueStore",
    "MemoryStore",
    "SAVE_FAILED_MESSAGE",
]
