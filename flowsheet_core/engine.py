"""
    SheetEngine — single entry point for turning sheet text into resolved
    graphs.

    Design Patterns applied
    ───────────────────────
    • Facade    – hides loading, building, coloring, translation and
                  serialization behind ``parse_sheet``.
    • Strategy  – pluggable sheet parsers (by file extension) and value
                  plugins.
    • Registry  – per-engine ``ValuePluginRegistry``; nothing is global,
                  so engines with different plugins can run side by side.

    Every entry point has a blocking and an awaiting variant.  They differ
    only in how the ``get_file`` callback is called.
"""
import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping, Optional

from flowsheet_api.models.graph import Graph
from flowsheet_api.plugins.base import SheetParserPlugin

from sheet_parser_json.plugin import JsonSheetParserPlugin
from sheet_parser_yaml.plugin import YamlSheetParserPlugin

from .config import EngineConfig
from .expander import compose_title, expand_translations
from .graph_builder import GraphBuilder
from .loader import DocumentLoader, GetFile, SheetDocument
from .plugin_loader import create_sheet_parser_loader, create_value_plugin_loader
from .plugin_registry import PluginFn, ValuePluginRegistry

logger = logging.getLogger(__name__)


@dataclass
class SheetResult:
    """One (variant × translation) graph with its sheet metadata."""
    document: SheetDocument
    graph: Graph

    @property
    def title(self) -> Optional[str]:
        return compose_title(self.document.title, self.graph.suffix)

    @property
    def nodes(self):
        return self.graph.nodes

    @property
    def links(self):
        return self.graph.links


class SheetEngine:
    """
    Usage:
        engine = SheetEngine()
        engine.register_plugin('budget', lambda link, params: 42)
        results = engine.parse_sheet(text, get_file=files.get)
    """

    def __init__(self, config: Optional[EngineConfig] = None,
                 plugins: Optional[Mapping[str, PluginFn]] = None):
        """
        Args:
            config:  Engine configuration.
            plugins: Initial value plugins {name: fn(link, params)}.
        """
        self._config = config or EngineConfig()
        self._plugins = ValuePluginRegistry()
        self._parsers: List[SheetParserPlugin] = [YamlSheetParserPlugin(), JsonSheetParserPlugin()]

        if self._config.discover_plugins:
            self._discover_plugins()
        for name, plugin_fn in (plugins or {}).items():
            self._plugins.register(name, plugin_fn)

        # Imported here to avoid circular imports
        from flowsheet_services.serialization_service import SheetSerializer
        self._serializer = SheetSerializer(self._config.serialization)

    # ── Configuration ────────────────────────────────────────────

    @property
    def config(self) -> EngineConfig:
        return self._config

    @property
    def plugins(self) -> ValuePluginRegistry:
        return self._plugins

    @property
    def serializer(self):
        return self._serializer

    def register_plugin(self, name: str, plugin_fn: PluginFn) -> None:
        """Register a value plugin.  Re-registering a name replaces it."""
        self._plugins.register(name, plugin_fn)

    # ── Parsing ──────────────────────────────────────────────────

    def parse_sheet(self, text: str, get_file: Optional[GetFile] = None,
                    plain: bool = True) -> List[Any]:
        """
        Parse a sheet into one result per alternative and translation.

        Args:
            text:     Sheet text.
            get_file: Callback returning the text of embedded sheets and
                      translation tables by identifier.
            plain:    Return serialized dicts (default) or ``SheetResult``s
                      holding the live graphs.

        Raises:
            LoadError, StructuralError, PluginReferenceError
        """
        document = self.loader(get_file).load(text)
        return self._process(document, plain)

    async def parse_sheet_async(self, text: str, get_file: Optional[GetFile] = None,
                                plain: bool = True) -> List[Any]:
        """Same as ``parse_sheet``; ``get_file`` may return awaitables."""
        document = await self.loader(get_file).load_async(text)
        return self._process(document, plain)

    def parse_single_sheet(self, text: str, get_file: Optional[GetFile] = None,
                           plain: bool = True) -> Any:
        """First result of ``parse_sheet``: the untranslated first variant."""
        return self.parse_sheet(text, get_file, plain)[0]

    async def parse_single_sheet_async(self, text: str, get_file: Optional[GetFile] = None,
                                       plain: bool = True) -> Any:
        results = await self.parse_sheet_async(text, get_file, plain)
        return results[0]

    def build_graphs(self, nodes: Iterable[Dict[str, Any]]) -> List[Graph]:
        """Build colored graphs from raw node declarations."""
        return GraphBuilder(self._plugins, self._config).add_all(nodes).build()

    def loader(self, get_file: Optional[GetFile] = None) -> DocumentLoader:
        return DocumentLoader(self._parsers, get_file, self._config)

    # ── Internal helpers ─────────────────────────────────────────

    def _process(self, document: SheetDocument, plain: bool) -> List[Any]:
        graphs = self.build_graphs(document.nodes)
        graphs = expand_translations(graphs, document.translations,
                                     self._config.translation_separator)
        results = [SheetResult(document, graph) for graph in graphs]
        logger.info("Parsed sheet '%s' into %d graph(s)", document.title, len(results))

        if not plain:
            return results
        return [self._serializer.serialize(result.document, result.graph) for result in results]

    def _discover_plugins(self) -> None:
        parser_loader = create_sheet_parser_loader()
        builtin = {type(parser) for parser in self._parsers}
        for parser in parser_loader.load_all().values():
            if type(parser) not in builtin:
                self._parsers.append(parser)

        self._plugins.register_all(create_value_plugin_loader().load_all().values())

    def __repr__(self) -> str:
        return (
            f"SheetEngine(parsers={[p.get_plugin_name() for p in self._parsers]}, "
            f"plugins={self._plugins.get_names()})"
        )


# ── Convenience functions (fresh engine per call) ────────────────

def parse_sheet(text: str, get_file: Optional[GetFile] = None, plain: bool = True,
                config: Optional[EngineConfig] = None,
                plugins: Optional[Mapping[str, PluginFn]] = None) -> List[Any]:
    return SheetEngine(config, plugins).parse_sheet(text, get_file, plain)


async def parse_sheet_async(text: str, get_file: Optional[GetFile] = None, plain: bool = True,
                            config: Optional[EngineConfig] = None,
                            plugins: Optional[Mapping[str, PluginFn]] = None) -> List[Any]:
    return await SheetEngine(config, plugins).parse_sheet_async(text, get_file, plain)


def parse_single_sheet(text: str, get_file: Optional[GetFile] = None, plain: bool = True,
                       config: Optional[EngineConfig] = None,
                       plugins: Optional[Mapping[str, PluginFn]] = None) -> Any:
    return SheetEngine(config, plugins).parse_single_sheet(text, get_file, plain)


async def parse_single_sheet_async(text: str, get_file: Optional[GetFile] = None, plain: bool = True,
                                   config: Optional[EngineConfig] = None,
                                   plugins: Optional[Mapping[str, PluginFn]] = None) -> Any:
    return await SheetEngine(config, plugins).parse_single_sheet_async(text, get_file, plain)
