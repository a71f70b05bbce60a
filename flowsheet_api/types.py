"""
    Value expression support: classification and parsing of declared values.
"""
import math
from enum import Enum
from typing import Any, List, Optional, Union

Number = Union[int, float]


class ValueKind(Enum):
    NUMBER = "number"
    REST = "rest"
    AUTO = "auto"
    PERCENTAGE = "percentage"
    NUMERIC_STRING = "numeric_string"
    ALTERNATIVES = "alternatives"
    PLUGIN = "plugin"
    ABSENT = "absent"
    UNKNOWN = "unknown"


REST = "rest"
AUTO = "auto"
ALTERNATIVE_SEPARATOR = "|"
RANDOM_COLOR = "random"


class ValueExpression:
    """Classification and conversion of value expressions"""

    @staticmethod
    def is_number(value: Any) -> bool:
        """True for ints and floats. YAML booleans are not numbers."""
        return isinstance(value, (int, float)) and not isinstance(value, bool)

    @staticmethod
    def classify(value: Any) -> ValueKind:
        """Detect the kind of a declared value"""
        if value is None:
            return ValueKind.ABSENT
        elif ValueExpression.is_number(value):
            return ValueKind.NUMBER
        elif isinstance(value, dict):
            return ValueKind.PLUGIN
        elif isinstance(value, str):
            text = value.strip()
            if ALTERNATIVE_SEPARATOR in text:
                return ValueKind.ALTERNATIVES
            if text == REST:
                return ValueKind.REST
            if text == AUTO:
                return ValueKind.AUTO
            if text.endswith("%"):
                return ValueKind.PERCENTAGE
            if ValueExpression.parse_number(text) is not None:
                return ValueKind.NUMERIC_STRING
            return ValueKind.UNKNOWN
        else:
            return ValueKind.UNKNOWN

    @staticmethod
    def parse_number(text: str) -> Optional[Number]:
        """
        Parse a numeric string. Returns an int when the text is integral,
        a float otherwise, and None when the text is not a finite number.
        """
        text = text.strip()
        if not text:
            return None
        try:
            return int(text)
        except ValueError:
            pass
        try:
            number = float(text)
        except ValueError:
            return None
        if not math.isfinite(number):
            return None
        return number

    @staticmethod
    def parse_percentage(text: str) -> Optional[Number]:
        """'30%' -> 30. None when the part before '%' is not a number."""
        text = text.strip()
        if not text.endswith("%"):
            return None
        return ValueExpression.parse_number(text[:-1])

    @staticmethod
    def split_alternatives(text: str) -> List[str]:
        """'1000|2000' -> ['1000', '2000']"""
        return [part.strip() for part in text.split(ALTERNATIVE_SEPARATOR)]

    @staticmethod
    def to_number(value: Any) -> Optional[Number]:
        """Numeric value of a number or numeric string, None for anything else."""
        if ValueExpression.is_number(value):
            return value
        if isinstance(value, str):
            return ValueExpression.parse_number(value)
        return None

    @staticmethod
    def round_half_up(value: Number) -> int:
        """Round .5 away from zero for positives, the way percentages are rounded."""
        return int(math.floor(value + 0.5))
