class FormatError(Exception):
    """Raised when a source string cannot be reformatted."""


class ParseError(FormatError):
    """Source could not be read: unbalanced delimiters or an unterminated literal."""

    def __init__(self, message: str, line: int, column: int):
        super().__init__(f"{message} at line {line}, column {column}")
        self.message = message
        self.line = line
        self.column = column
