from typing import Any, Tuple

import yaml

from flowsheet_api.exceptions import LoadError
from flowsheet_api.plugins import SheetParserPlugin


class YamlSheetParserPlugin(SheetParserPlugin):
    """
    SheetParserPlugin for YAML sheets.  Being a superset of JSON, it is
    also the fallback for text of unknown format.
    """

    def get_plugin_name(self) -> str:
        return "YAML Parser"

    def get_file_extensions(self) -> Tuple[str, ...]:
        return (".yaml", ".yml")

    def parse(self, text: str) -> Any:
        try:
            return yaml.safe_load(text)
        except yaml.YAMLError as exc:
            raise LoadError(f"Invalid YAML: {exc}") from exc
