"""Centralized Game Registry

This module keeps track of the supported games. Each game lives in its own
package under plugins/ and exposes PLUGIN metadata plus a GAME instance;
autodiscovery imports those packages and registers them under their name and
aliases, so the CLI and services can look games up by name.
"""

import importlib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

from core.logging import get_logger
from errors import ConfigurationError

from .base import GamePlugin

logger = get_logger(__name__)


@dataclass
class PluginInfo:
    """Information about a registered game plugin."""

    name: str
    version: str
    description: str
    folder: str
    aliases: List[str] = field(default_factory=list)
    features: List[str] = field(default_factory=list)
    enabled: bool = True


class GameRegistry:
    """Registry of game plugins, keyed by name and alias."""

    def __init__(self):
        self.games: Dict[str, GamePlugin] = {}
        self.aliases: Dict[str, str] = {}
        self.plugins: Dict[str, PluginInfo] = {}
        self._discovered = False

    def register_game(
        self, game: GamePlugin, info: Optional[PluginInfo] = None
    ) -> None:
        """Register a game plugin and its aliases."""
        key = game.name.lower()
        self.games[key] = game
        self.aliases[key] = key

        if info is not None:
            self.plugins[key] = info
            for alias in info.aliases:
                self.aliases[alias.lower()] = key

        logger.debug("Registered game: {} ({})", key, game.title)

    def get_game(self, name: str) -> GamePlugin:
        """Look up a game by name or alias.

        Raises:
            ConfigurationError: If no such game is registered
        """
        key = self.aliases.get((name or "").strip().lower())
        if key is None:
            available = ", ".join(sorted(self.games)) or "none"
            raise ConfigurationError(
                f"Unknown game '{name}'. Available games: {available}"
            )
        return self.games[key]

    def list_games(self) -> List[GamePlugin]:
        """All registered games, sorted by name."""
        return [self.games[key] for key in sorted(self.games)]

    def list_plugins(self) -> List[PluginInfo]:
        """Metadata of all registered plugins."""
        return [self.plugins[key] for key in sorted(self.plugins)]

    def autodiscover_plugins(self, plugins_dir: Optional[Path] = None) -> int:
        """Import every plugins/<name> package that exposes PLUGIN and GAME."""
        if plugins_dir is None:
            plugins_dir = Path(__file__).parent

        loaded_count = 0

        for plugin_dir in sorted(plugins_dir.iterdir()):
            if not plugin_dir.is_dir() or plugin_dir.name.startswith("_"):
                continue
            if not (plugin_dir / "__init__.py").exists():
                continue
            loaded_count += self._load_plugin(plugin_dir)

        self._discovered = True
        logger.debug("Autodiscovered {} game plugins", loaded_count)
        return loaded_count

    def ensure_discovered(self) -> None:
        if not self._discovered:
            self.autodiscover_plugins()

    def _load_plugin(self, plugin_dir: Path) -> int:
        """Load one plugin package; returns 1 when a game was registered."""
        module = importlib.import_module(f"plugins.{plugin_dir.name}")

        plugin_meta = getattr(module, "PLUGIN", None)
        game = getattr(module, "GAME", None)
        if not isinstance(plugin_meta, dict) or not isinstance(game, GamePlugin):
            logger.debug("Skipping {}: no PLUGIN metadata or GAME", plugin_dir.name)
            return 0

        info = PluginInfo(
            name=plugin_meta.get("name", plugin_dir.name),
            version=plugin_meta.get("version", "1.0.0"),
            description=plugin_meta.get("description", "No description"),
            folder=plugin_dir.name,
            aliases=list(plugin_meta.get("games", [])),
            features=list(plugin_meta.get("features", [])),
        )
        self.register_game(game, info)
        return 1


# Global registry instance
registry = GameRegistry()


def get_game(name: str) -> GamePlugin:
    """Look up a game in the global registry, discovering plugins first."""
    registry.ensure_discovered()
    return registry.get_game(name)


def list_available_games() -> List[GamePlugin]:
    """All games in the global registry."""
    registry.ensure_discovered()
    return registry.list_games()
