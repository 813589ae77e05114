from typing import List, Union

from .base import FormattingRule, FormattingContext, Transformation
from ..models import FormatterConfig
from ..reader import Node, Token, TokenKind, is_element


def _is_space(item: Union[Node, Token]) -> bool:
    return isinstance(item, Token) and item.kind in (TokenKind.WHITESPACE, TokenKind.NEWLINE)


def _is_comment(item: Union[Node, Token]) -> bool:
    return isinstance(item, Token) and item.kind is TokenKind.COMMENT


class SurroundingWhitespaceRule(FormattingRule):
    """Removes whitespace just inside an opening or closing delimiter."""

    def __init__(self, config: FormatterConfig):
        self.config = config

    @property
    def rule_id(self) -> str: return "F001"
    @property
    def name(self) -> str: return "remove-surrounding-whitespace"

    def analyze(self, context: FormattingContext) -> List[Transformation]:
        transformations = []
        for node in context.tree.walk():
            if node.open is None: continue
            children = node.children

            head = 0
            while head < len(children) and _is_space(children[head]):
                head += 1
            if head:
                transformations.append(Transformation(children[0].start, children[head - 1].end, ""))
            if head == len(children): continue

            tail = len(children)
            while tail > head and _is_space(children[tail - 1]):
                tail -= 1
            # A comment needs its newline before the closing delimiter
            if tail < len(children) and not _is_comment(children[tail - 1]):
                transformations.append(Transformation(children[tail].start, children[-1].end, ""))

        return transformations


class MissingWhitespaceRule(FormattingRule):
    """Inserts a single space between elements that touch, as in ``(foo(bar))``."""

    def __init__(self, config: FormatterConfig):
        self.config = config

    @property
    def rule_id(self) -> str: return "F002"
    @property
    def name(self) -> str: return "insert-missing-whitespace"

    def analyze(self, context: FormattingContext) -> List[Transformation]:
        transformations = []
        for node in context.tree.walk():
            previous = None
            for child in node.children:
                if previous is not None and self._touches(previous, child):
                    transformations.append(Transformation(child.start, child.start, " "))
                previous = child
        return transformations

    @staticmethod
    def _touches(left: Union[Node, Token], right: Union[Node, Token]) -> bool:
        if not (is_element(left) and is_element(right)):
            return False
        # Reader prefixes bind to the form that follows them
        if isinstance(left, Token) and left.kind is TokenKind.PREFIX:
            return False
        return left.end == right.start
