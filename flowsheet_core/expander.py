"""
    Translation expansion on top of the variant graphs.

    Every built graph is followed by one translated copy per language,
    languages in declaration order:

        [g-1000, g-1000_fi, g-2000, g-2000_fi]
"""
import logging
from typing import Callable, Dict, List, Mapping, Optional, Union

from flowsheet_api.models.graph import Graph

logger = logging.getLogger(__name__)

Lookup = Callable[[str], Optional[str]]
TranslationTable = Union[Mapping[str, str], Lookup]


def to_lookup(table: TranslationTable) -> Lookup:
    """A lookup function for a table or an already callable lookup."""
    if callable(table):
        return table
    return table.get


def expand_translations(graphs: List[Graph], translations: Dict[str, TranslationTable],
                        separator: str = "_") -> List[Graph]:
    expanded: List[Graph] = []
    for graph in graphs:
        expanded.append(graph)
        for language, table in translations.items():
            expanded.append(graph.translate(language, to_lookup(table), separator))

    if translations:
        logger.debug("Expanded %d graph(s) into %d with languages %s",
                     len(graphs), len(expanded), list(translations))
    return expanded


def compose_title(title: Optional[str], suffix: str) -> Optional[str]:
    """Base title plus the accumulated variant / translation suffix."""
    if title is None and not suffix:
        return None
    return f"{title or ''}{suffix}"
