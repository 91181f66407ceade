"""Configuration for the deck tools."""
