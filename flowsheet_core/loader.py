"""
    DocumentLoader — decodes a sheet and everything it references.

    The loader never opens files itself.  Embedded sheets and translation
    tables are fetched through the ``get_file(identifier)`` callback given
    by the caller, which returns the document text (or, for
    ``load_async``, optionally an awaitable of it).

    Node declarations of embedded sheets are appended depth-first after
    the embedding sheet's own declarations.  Their translation tables
    are merged into the tables of the same language; a language only an
    embedded sheet declares is added after the root sheet's languages.
    Everything else an embedded sheet declares (title, size, unit) is
    ignored.
"""
import inspect
import logging
import os
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from flowsheet_api.exceptions import LoadError
from flowsheet_api.plugins.base import SheetParserPlugin

from .config import EngineConfig

logger = logging.getLogger(__name__)

GetFile = Callable[[str], Any]

ROOT_SOURCE = "<sheet>"


@dataclass
class SheetDocument:
    """
    A sheet with its embeds merged in.

    Attributes:
        title:        Sheet title, None when not declared.
        unit:         Unit shown next to values.
        width:        Diagram width (default from config).
        height:       Diagram height (default from config).
        translations: Language code → {node name: translated name}.
        nodes:        Raw node declarations, own first, then embedded ones.
    """
    title: Optional[str] = None
    unit: Optional[str] = None
    width: int = 0
    height: int = 0
    translations: Dict[str, Dict[str, str]] = field(default_factory=dict)
    nodes: List[Dict[str, Any]] = field(default_factory=list)


class DocumentLoader:

    def __init__(
        self,
        parsers: Sequence[SheetParserPlugin],
        get_file: Optional[GetFile] = None,
        config: Optional[EngineConfig] = None,
    ):
        """
        Args:
            parsers:  Parser plugins; the first one is used for text whose
                      identifier has no known extension (e.g. the root sheet).
            get_file: Fetch callback for embeds and translations.
            config:   Engine configuration (sheet size defaults).
        """
        if not parsers:
            raise ValueError("At least one sheet parser is required")
        self._parsers = list(parsers)
        self._get_file = get_file
        self._config = config or EngineConfig()

    # ── Sync ─────────────────────────────────────────────────────

    def load(self, text: str, source: str = ROOT_SOURCE) -> SheetDocument:
        data = self._decode_sheet(text, source)
        nodes = list(data.get('nodes') or [])
        references = self._translation_references(data, source)
        self._include_embeds(data, nodes, references, [source])

        translations: Dict[str, Dict[str, str]] = {}
        for language, reference in references:
            table_text = self._fetch(reference) if isinstance(reference, str) else None
            self._merge_table(translations, language, self._decode_table(reference, table_text))
        return self._to_document(data, nodes, translations)

    def _include_embeds(self, sheet: Dict[str, Any], nodes: List[Dict[str, Any]],
                        references: List[Tuple[str, Any]], trail: List[str]) -> None:
        for identifier in self._embeds(sheet, trail[-1]):
            self._check_embed_cycle(identifier, trail)
            subsheet = self._decode_sheet(self._fetch(identifier), identifier)
            nodes.extend(subsheet.get('nodes') or [])
            references.extend(self._translation_references(subsheet, identifier))
            self._include_embeds(subsheet, nodes, references, trail + [identifier])

    def _fetch(self, identifier: str) -> str:
        result = self._call_get_file(identifier)
        if inspect.isawaitable(result):
            if inspect.iscoroutine(result):
                result.close()
            raise LoadError(
                f"Cannot load '{identifier}': get_file returned an awaitable, use the async variant"
            )
        return self._checked(identifier, result)

    # ── Async ────────────────────────────────────────────────────

    async def load_async(self, text: str, source: str = ROOT_SOURCE) -> SheetDocument:
        data = self._decode_sheet(text, source)
        nodes = list(data.get('nodes') or [])
        references = self._translation_references(data, source)
        await self._include_embeds_async(data, nodes, references, [source])

        translations: Dict[str, Dict[str, str]] = {}
        for language, reference in references:
            table_text = await self._fetch_async(reference) if isinstance(reference, str) else None
            self._merge_table(translations, language, self._decode_table(reference, table_text))
        return self._to_document(data, nodes, translations)

    async def _include_embeds_async(self, sheet: Dict[str, Any], nodes: List[Dict[str, Any]],
                                    references: List[Tuple[str, Any]], trail: List[str]) -> None:
        for identifier in self._embeds(sheet, trail[-1]):
            self._check_embed_cycle(identifier, trail)
            subsheet = self._decode_sheet(await self._fetch_async(identifier), identifier)
            nodes.extend(subsheet.get('nodes') or [])
            references.extend(self._translation_references(subsheet, identifier))
            await self._include_embeds_async(subsheet, nodes, references, trail + [identifier])

    async def _fetch_async(self, identifier: str) -> str:
        result = self._call_get_file(identifier)
        if inspect.isawaitable(result):
            try:
                result = await result
            except LoadError:
                raise
            except Exception as exc:
                raise LoadError(f"Cannot load '{identifier}': {exc}") from exc
        return self._checked(identifier, result)

    # ── Shared helpers ───────────────────────────────────────────

    def parser_for(self, identifier: str) -> SheetParserPlugin:
        """Parser chosen by file extension, the default parser otherwise."""
        if not isinstance(identifier, str):
            raise LoadError(f"Invalid document identifier: {identifier!r}")
        extension = os.path.splitext(identifier)[1].lower()
        for parser in self._parsers:
            if extension and extension in parser.get_file_extensions():
                return parser
        return self._parsers[0]

    def _call_get_file(self, identifier: str) -> Any:
        if self._get_file is None:
            raise LoadError(f"Cannot load '{identifier}': no get_file callback given")
        logger.debug("Fetching '%s'", identifier)
        try:
            return self._get_file(identifier)
        except LoadError:
            raise
        except Exception as exc:
            raise LoadError(f"Cannot load '{identifier}': {exc}") from exc

    @staticmethod
    def _checked(identifier: str, text: Any) -> str:
        if text is None:
            raise LoadError(f"Cannot load '{identifier}': not found")
        if isinstance(text, bytes):
            return text.decode("utf-8")
        return text

    def _decode_sheet(self, text: str, identifier: str) -> Dict[str, Any]:
        data = self.parser_for(identifier).parse(text)
        if data is None:
            return {}
        if not isinstance(data, dict):
            raise LoadError(f"Sheet '{identifier}' is not a mapping")
        return data

    def _decode_table(self, reference: Any, text: Optional[str]) -> Dict[str, str]:
        if isinstance(reference, dict):
            # inline table
            table = reference
        elif isinstance(reference, str):
            table = self.parser_for(reference).parse(text)
        else:
            raise LoadError(f"Invalid translation reference: {reference!r}")
        if not isinstance(table, dict):
            raise LoadError(f"Translation table '{reference}' is not a mapping")
        return {str(key): str(value) for key, value in table.items()}

    @staticmethod
    def _embeds(sheet: Dict[str, Any], source: str) -> List[str]:
        embeds = sheet.get('embed') or []
        if not isinstance(embeds, list):
            raise LoadError(f"'embed' of '{source}' must be a list, got {embeds!r}")
        for identifier in embeds:
            if not isinstance(identifier, str):
                raise LoadError(f"Invalid embed identifier in '{source}': {identifier!r}")
        return embeds

    @staticmethod
    def _translation_references(sheet: Dict[str, Any], source: str) -> List[Tuple[str, Any]]:
        translations = sheet.get('translations') or {}
        if not isinstance(translations, dict):
            raise LoadError(f"'translations' of '{source}' must be a mapping")
        return [(str(language), reference) for language, reference in translations.items()]

    @staticmethod
    def _merge_table(translations: Dict[str, Dict[str, str]], language: str,
                     table: Dict[str, str]) -> None:
        # first declared wins, so a sheet overrides the sheets it embeds
        merged = translations.setdefault(language, {})
        for key, value in table.items():
            merged.setdefault(key, value)

    @staticmethod
    def _check_embed_cycle(identifier: str, trail: List[str]) -> None:
        if identifier in trail:
            path = ' → '.join(trail + [identifier])
            raise LoadError(f"Cyclic embed: {path}")

    def _to_document(self, data: Dict[str, Any], nodes: List[Dict[str, Any]],
                     translations: Dict[str, Dict[str, str]]) -> SheetDocument:
        document = SheetDocument(
            title=data.get('title'),
            unit=data.get('unit'),
            width=data.get('width') or self._config.default_width,
            height=data.get('height') or self._config.default_height,
            translations=translations,
            nodes=nodes,
        )
        logger.debug("Loaded sheet '%s' with %d node declarations", document.title, len(nodes))
        return document
