"""
    Generic plugin discovery and loading via entry_points.

    Design Pattern: Service Locator / Registry
    ────────────────────────────────────────────
    Discovers installed plugins at runtime by scanning Python package
    entry_points.  Each plugin type (sheet parser, value plugin) uses a
    distinct entry-point group.

    PluginLoader[TPlugin] is generic over the plugin base class so the
    same loader works for SheetParserPlugin and ValuePlugin.
"""
import importlib.metadata
import logging
from typing import TypeVar, Generic, Type, Dict

from flowsheet_api.plugins.base import SheetParserPlugin, ValuePlugin

logger = logging.getLogger(__name__)

TPlugin = TypeVar('TPlugin')

# Entry-point group names (must match setup.py)
SHEET_PARSER_EP_GROUP = 'flowsheet.sheet_parser'
VALUE_PLUGIN_EP_GROUP = 'flowsheet.value_plugin'


class PluginLoader(Generic[TPlugin]):
    """
    Generic loader that discovers all installed plugins of a given type
    from a specific entry-point group.

    Usage:
        loader = PluginLoader(SheetParserPlugin, 'flowsheet.sheet_parser')
        plugins = loader.load_all()          # Dict[str, SheetParserPlugin]
    """

    def __init__(self, plugin_base_class: Type[TPlugin], group: str):
        self._base_class = plugin_base_class
        self._group = group
        self._plugins: Dict[str, TPlugin] = {}
        self._loaded = False

    def load_all(self) -> Dict[str, TPlugin]:
        """
        Discover and instantiate every plugin registered under the group.
        Broken plugins are logged and skipped.

        Returns:
            Dict mapping entry-point name → plugin instance.
        """
        if self._loaded:
            return self._plugins

        for ep in importlib.metadata.entry_points(group=self._group):
            try:
                plugin_cls = ep.load()
            except Exception as exc:
                logger.error("Failed to load plugin '%s': %s", ep.name, exc)
                continue

            if not isinstance(plugin_cls, type) or not issubclass(plugin_cls, self._base_class):
                logger.warning(
                    "Plugin '%s' does not subclass %s — skipped.",
                    ep.name, self._base_class.__name__
                )
                continue

            self._plugins[ep.name] = plugin_cls()
            logger.info("Loaded plugin: %s (%s)", ep.name, plugin_cls.__name__)

        self._loaded = True
        return self._plugins

    def __repr__(self) -> str:
        return (
            f"PluginLoader(base={self._base_class.__name__}, "
            f"group='{self._group}', loaded={len(self._plugins)})"
        )


def create_sheet_parser_loader() -> PluginLoader[SheetParserPlugin]:
    """Create a loader for sheet parser plugins."""
    return PluginLoader(SheetParserPlugin, SHEET_PARSER_EP_GROUP)


def create_value_plugin_loader() -> PluginLoader[ValuePlugin]:
    """Create a loader for value plugins."""
    return PluginLoader(ValuePlugin, VALUE_PLUGIN_EP_GROUP)
