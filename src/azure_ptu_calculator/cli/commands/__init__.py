"""CLI commands package."""

# Import all command modules to make them available
from . import data, history, models, quote, validate

__all__ = ["quote", "models", "validate", "history", "data"]
