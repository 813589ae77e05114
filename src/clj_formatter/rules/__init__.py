from .base import FormattingRule, FormattingContext, Transformation
from .indentation import IndentationRule
from .spacing import SurroundingWhitespaceRule, MissingWhitespaceRule
from .whitespace import TrailingWhitespaceRule, ConsecutiveBlankLineRule

__all__ = [
    "FormattingRule",
    "FormattingContext",
    "Transformation",
    "IndentationRule",
    "SurroundingWhitespaceRule",
    "MissingWhitespaceRule",
    "TrailingWhitespaceRule",
    "ConsecutiveBlankLineRule",
]
