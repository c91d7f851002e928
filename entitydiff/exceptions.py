"""Custom exceptions for the entitydiff engine."""


class EntityDiffError(Exception):
    """Base exception for entitydiff errors."""
    pass


class ExtractionError(EntityDiffError):
    """Raised when an id path cannot resolve to any usable entity."""
    def __init__(self, reason: str, path: str = None):
        super().__init__(reason)
        self.reason = reason
        self.path = path


class ConfigError(EntityDiffError):
    """Raised when an options file cannot be loaded."""
    def __init__(self, message: str, path: str = None):
        super().__init__(message)
        self.message = message
        self.path = path


class DocumentLoadError(EntityDiffError):
    """Raised when an input document is missing or is not valid JSON."""
    def __init__(self, message: str, path: str = None, line: int = None, column: int = None):
        super().__init__(message)
        self.message = message
        self.path = path
        self.line = line
        self.column = column
