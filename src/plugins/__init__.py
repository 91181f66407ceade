"""Game plugins. Each subpackage exposes PLUGIN metadata and a GAME instance."""
