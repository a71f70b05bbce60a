"""
    Engine configuration — sheet defaults, value policy and serialization fields.

    Plain dataclasses: build one, tweak what you need and hand it to
    ``SheetEngine``.  Nothing here is read from the environment.
"""
from dataclasses import dataclass, field
from typing import Optional, Set

DEFAULT_WIDTH = 800
DEFAULT_HEIGHT = 600

NODE_FIELDS = ('name', 'description', 'color', 'value')
OPTIONAL_NODE_FIELDS = ('real_value',)
LINK_FIELDS = ('source', 'target', 'color', 'value')
OPTIONAL_LINK_FIELDS = ('description',)


@dataclass
class SerializationConfig:
    """
    Controls which fields appear in serialized output.

    Attributes:
        include_node_fields:  If set, ONLY these node keys are serialized.
                              ``None`` means the default node fields.
        exclude_node_fields:  Node keys to skip.  Applied AFTER
                              ``include_node_fields``.
        include_link_fields:  Same semantics, for links.
        exclude_link_fields:  Same semantics, for links.
        indent:               Indentation used by ``to_json``.
    """
    include_node_fields: Optional[Set[str]] = None
    exclude_node_fields: Set[str] = field(default_factory=set)
    include_link_fields: Optional[Set[str]] = None
    exclude_link_fields: Set[str] = field(default_factory=set)
    indent: Optional[int] = 2

    def effective_node_fields(self):
        """Compute the final, ordered tuple of node fields to serialize."""
        return self._effective(NODE_FIELDS + OPTIONAL_NODE_FIELDS, NODE_FIELDS,
                               self.include_node_fields, self.exclude_node_fields)

    def effective_link_fields(self):
        """Compute the final, ordered tuple of link fields to serialize."""
        return self._effective(LINK_FIELDS + OPTIONAL_LINK_FIELDS, LINK_FIELDS,
                               self.include_link_fields, self.exclude_link_fields)

    @staticmethod
    def _effective(available, defaults, include, exclude):
        if include is not None:
            result = [name for name in available if name in include]
        else:
            result = list(defaults)
        return tuple(name for name in result if name not in exclude)


@dataclass
class EngineConfig:
    """
    Top-level configuration for the sheet engine.

    Attributes:
        default_width:        Width used when a sheet declares none.
        default_height:       Height used when a sheet declares none.
        zero_value_is_unset:  When True a node declared with ``value: 0`` is
                              treated like a node without a value and gets
                              the sum of its links instead.
        variant_separator:    Put between the suffix and each chosen alternative.
        translation_separator: Put between the suffix and a language code.
        discover_plugins:     Load parser and value plugins registered
                              through entry points.
        serialization:        Controls the plain output structure.
    """
    default_width: int = DEFAULT_WIDTH
    default_height: int = DEFAULT_HEIGHT
    zero_value_is_unset: bool = False
    variant_separator: str = "-"
    translation_separator: str = "_"
    discover_plugins: bool = True
    serialization: SerializationConfig = field(default_factory=SerializationConfig)
