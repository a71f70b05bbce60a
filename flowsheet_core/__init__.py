"""
Flowsheet core — the sheet resolution engine.

Public API:
    SheetEngine         – facade: text in, resolved graphs out
    GraphBuilder        – declarations → linked, ordered, colored graphs
    DocumentLoader      – sheet text + embeds + translation tables
    ValueResolver       – node / link values from value expressions
    ColorResolver       – node colors
    ValuePluginRegistry – value plugin capability map
    EngineConfig        – top-level configuration
    SerializationConfig – output field control
    PluginLoader        – entry-point plugin discovery
"""
from .config import EngineConfig, SerializationConfig
from .plugin_registry import ValuePluginRegistry
from .value_resolver import ValueResolver
from .color_resolver import ColorResolver, palette_color
from .graph_builder import GraphBuilder, NodeCollection
from .loader import DocumentLoader, SheetDocument
from .expander import expand_translations, compose_title
from .plugin_loader import (
    PluginLoader,
    create_sheet_parser_loader,
    create_value_plugin_loader,
)
from .engine import (
    SheetEngine,
    SheetResult,
    parse_sheet,
    parse_sheet_async,
    parse_single_sheet,
    parse_single_sheet_async,
)

__all__ = [
    'SheetEngine',
    'SheetResult',
    'parse_sheet',
    'parse_sheet_async',
    'parse_single_sheet',
    'parse_single_sheet_async',
    'GraphBuilder',
    'NodeCollection',
    'DocumentLoader',
    'SheetDocument',
    'ValueResolver',
    'ColorResolver',
    'palette_color',
    'ValuePluginRegistry',
    'expand_translations',
    'compose_title',
    'EngineConfig',
    'SerializationConfig',
    'PluginLoader',
    'create_sheet_parser_loader',
    'create_value_plugin_loader',
]
