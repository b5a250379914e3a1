from typing import Optional


class GotoscriptError(Exception):
    """Base exception for the compiler."""

    pass


class ScriptSyntaxError(GotoscriptError):
    """Raised when script source cannot be turned into a statement tree."""

    def __init__(self, message: str, line: Optional[int] = None):
        if line:
            message = f"{message} (line {line})"
        super().__init__(message)
        self.line = line


class ConfigError(GotoscriptError):
    """Raised when compile options cannot be loaded."""

    pass


class ChunkInvariantError(RuntimeError):
    """Raised when a chunk body still holds a statement the split pass should have consumed."""

    pass
