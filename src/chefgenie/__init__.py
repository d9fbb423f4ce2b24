"""
ChefGenie - AI powered culinary assistant.

Describe what is in the kitchen, get a structured recipe back from a
generative model, and keep the ones you like in a local cookbook.
"""

__version__ = "1.0.0"
