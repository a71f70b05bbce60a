"""
Services working on built sheet graphs.
"""
from .serialization_service import SheetSerializer, compose_title

__all__ = ['SheetSerializer', 'compose_title']
