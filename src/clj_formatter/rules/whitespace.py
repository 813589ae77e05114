from typing import List

from .base import FormattingRule, FormattingContext, Transformation
from ..models import FormatterConfig
from ..reader import TokenKind


class TrailingWhitespaceRule(FormattingRule):
    """Strips spaces and tabs at the end of lines and at the end of the file."""

    def __init__(self, config: FormatterConfig):
        self.config = config

    @property
    def rule_id(self) -> str: return "F003"
    @property
    def name(self) -> str: return "remove-trailing-whitespace"

    def analyze(self, context: FormattingContext) -> List[Transformation]:
        tokens = context.tree.tokens
        transformations = []
        for i, token in enumerate(tokens):
            if token.kind is not TokenKind.WHITESPACE: continue
            following = tokens[i + 1] if i + 1 < len(tokens) else None
            if following is None or following.kind is TokenKind.NEWLINE:
                transformations.append(Transformation(token.start, token.end, ""))
        return transformations


class ConsecutiveBlankLineRule(FormattingRule):
    """Collapses runs of blank lines down to a single blank line."""

    def __init__(self, config: FormatterConfig):
        self.config = config

    @property
    def rule_id(self) -> str: return "F004"
    @property
    def name(self) -> str: return "remove-consecutive-blank-lines"

    def analyze(self, context: FormattingContext) -> List[Transformation]:
        transformations = []
        newlines = []
        for token in context.tree.tokens + [None]:
            if token is not None and token.kind is TokenKind.NEWLINE:
                newlines.append(token)
            elif token is not None and token.kind is TokenKind.WHITESPACE:
                continue
            else:
                # Three newlines in a row make two blank lines; keep the first two
                if len(newlines) >= 3:
                    transformations.append(Transformation(newlines[1].end, newlines[-1].end, ""))
                newlines = []
        return transformations
