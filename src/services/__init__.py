"""Deck services built on the core modules: resolution, annotation, analysis, search."""
