from .plugin import YamlSheetParserPlugin

__all__ = ['YamlSheetParserPlugin']
