"""Clojure source formatter: a bracket-aware reader plus whitespace and indentation rules."""

from .engine import FormatterEngine, default_rules, reformat_string
from .errors import FormatError, ParseError
from .indents import DEFAULT_INDENTS, lookup, parse_indents
from .models import FormatterConfig, FormatResult, IndentRule

__all__ = [
    "FormatterEngine",
    "FormatterConfig",
    "FormatResult",
    "FormatError",
    "ParseError",
    "IndentRule",
    "DEFAULT_INDENTS",
    "default_rules",
    "lookup",
    "parse_indents",
    "reformat_string",
]
