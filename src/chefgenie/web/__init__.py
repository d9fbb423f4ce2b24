"""ChefGenie web endpoints."""
