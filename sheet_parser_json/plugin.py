import json
from typing import Any, Tuple

from flowsheet_api.exceptions import LoadError
from flowsheet_api.plugins import SheetParserPlugin


class JsonSheetParserPlugin(SheetParserPlugin):
    """SheetParserPlugin for JSON sheets and translation tables."""

    def get_plugin_name(self) -> str:
        return "JSON Parser"

    def get_file_extensions(self) -> Tuple[str, ...]:
        return (".json",)

    def parse(self, text: str) -> Any:
        try:
            return json.loads(text)
        except json.JSONDecodeError as exc:
            raise LoadError(f"Invalid JSON at line {exc.lineno}, column {exc.colno}: {exc.msg}") from exc
