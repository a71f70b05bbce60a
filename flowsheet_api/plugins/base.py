"""
    Abstract base classes for plugins.
    Defines the "Contract" that all plugins must follow.
"""
from abc import ABC, abstractmethod
from typing import Any, Dict, Tuple


class SheetParserPlugin(ABC):
    """
        Abstract base class for sheet parser plugins.
        Pattern: Strategy (for document decoding).
    """

    @abstractmethod
    def get_plugin_name(self) -> str:
        """
            Returns the unique name of the plugin.
            Example: "YAML Parser"
        """
        pass

    @abstractmethod
    def get_file_extensions(self) -> Tuple[str, ...]:
        """
            File extensions (lower case, with the dot) this parser handles.
            Example: (".yaml", ".yml")
        """
        pass

    @abstractmethod
    def parse(self, text: str) -> Any:
        """
        Main method: decodes document text into plain Python data.

        Args:
            text: Document contents, as returned by the fetch callback.

        Returns:
            Decoded document (dicts, lists, scalars).

        Raises:
            LoadError: If the text is not a valid document.
        """
        pass


class ValuePlugin(ABC):
    """
        Abstract base class for link value plugins.
        A link declared with ``value: {plugin: <name>, ...}`` is valued by
        the plugin registered under that name.
    """

    @abstractmethod
    def get_plugin_name(self) -> str:
        pass

    @abstractmethod
    def compute(self, link, params: Dict[str, Any]):
        """
        Compute the value of ``link``.

        Args:
            link: The Link being valued (its nodes and their values are readable).
            params: The whole value mapping, including the ``plugin`` key.

        Returns:
            int | float
        """
        pass

    def __call__(self, link, params: Dict[str, Any]):
        return self.compute(link, params)
