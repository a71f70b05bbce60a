# flowsheet_api/exceptions.py
"""
    Error taxonomy shared by the engine, the models and the parser plugins.

    Every error here is fatal for the sheet being processed: nothing
    catches them inside the engine and no partial graph is returned.
"""


class SheetError(Exception):
    """Base class for all sheet processing errors."""
    pass


class StructuralError(SheetError):
    """Raised when the declared nodes form a cycle."""

    def __init__(self, path):
        self.path = list(path)
        super().__init__(f"Cyclic node: {' → '.join(self.path)}")


class PluginReferenceError(SheetError):
    """Raised when a plugin value omits the plugin name or names an unknown plugin."""
    pass


class LoadError(SheetError):
    """Raised when an embedded sheet or translation table cannot be loaded."""
    pass
