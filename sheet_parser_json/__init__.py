from .plugin import JsonSheetParserPlugin

__all__ = ['JsonSheetParserPlugin']
