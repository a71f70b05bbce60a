"""
    Value plugin registry — the name → function map consulted for
    ``value: {plugin: <name>, ...}`` links.

    Each engine owns its own registry, so engines with different plugin
    sets never see each other's registrations.
"""
import logging
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional

from flowsheet_api.exceptions import PluginReferenceError
from flowsheet_api.plugins.base import ValuePlugin

logger = logging.getLogger(__name__)

PluginFn = Callable[[Any, Dict[str, Any]], Any]


class ValuePluginRegistry:

    def __init__(self, plugins: Optional[Mapping[str, PluginFn]] = None):
        self._plugins: Dict[str, PluginFn] = {}
        for name, plugin_fn in (plugins or {}).items():
            self.register(name, plugin_fn)

    def register(self, name: str, plugin_fn: PluginFn) -> None:
        """
        Register ``plugin_fn`` under ``name``.  A second registration under
        the same name replaces the first one.

        :raises TypeError: If plugin_fn is not callable
        """
        if not callable(plugin_fn):
            raise TypeError("plugin_fn should be a function")
        if name in self._plugins:
            logger.debug("Value plugin '%s' overwritten", name)
        self._plugins[name] = plugin_fn

    def register_all(self, plugins: Iterable[ValuePlugin]) -> None:
        for plugin in plugins:
            self.register(plugin.get_plugin_name(), plugin)

    def call(self, link, params: Mapping[str, Any]):
        """
        Value ``link`` with the plugin named in ``params['plugin']``.

        :raises PluginReferenceError: If the name is missing or unknown
        """
        plugin_name = params.get('plugin')
        if not plugin_name:
            raise PluginReferenceError('Prop "plugin" missing in value declaration')

        plugin_fn = self._plugins.get(plugin_name)
        if plugin_fn is None:
            raise PluginReferenceError(f"Unknown plugin {plugin_name}")
        return plugin_fn(link, dict(params))

    def get_names(self) -> List[str]:
        return sorted(self._plugins.keys())

    def __contains__(self, name: str) -> bool:
        return name in self._plugins

    def __len__(self) -> int:
        return len(self._plugins)

    def __repr__(self) -> str:
        return f"ValuePluginRegistry({self.get_names()})"
