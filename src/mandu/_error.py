"""Error classes and helpers"""

__all__ = [
    "TemplateError",
    "LexicalError",
    "StructuralError",
    "SemanticError",
    "ReleasedValueError",
]


class TemplateError(Exception):
    """Exception raised when a template cannot be cooked.

    The error is rendered as `[Error(line,col)]: message` once the
    location has been resolved against the source text.

    Args:
        message: (str) Error description
        position: (int | None) Character offset where the error was found
        line: (int | None) 1-based line of the error
        column: (int | None) 1-based column of the error

    Attributes:
        message: (str) Error description
        position: (int | None) Character offset where the error was found
        line: (int | None) 1-based line of the error
        column: (int | None) 1-based column of the error
    """

    def __init__(self, message, position=None, line=None, column=None):
        self.message = message
        self.position = position
        self.line = line
        self.column = column
        super().__init__(message)

    def __str__(self):
        if self.line is None:
            return f"[Error]: {self.message}"
        return f"[Error({self.line},{self.column})]: {self.message}"


class LexicalError(TemplateError):
    """Unterminated string, body or segment, or unexpected end of input."""


class StructuralError(TemplateError):
    """Token of the wrong class, empty list, malformed range or section."""


class SemanticError(TemplateError):
    """Unresolved variable or range with invalid operands."""


class ReleasedValueError(RuntimeError):
    """Value handle used after it was released back to its arena."""
