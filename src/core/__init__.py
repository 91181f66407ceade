"""
Core infrastructure for the deck tools.

Logging setup shared by the CLI commands and the card data loaders.
"""

__version__ = "1.0.0"
