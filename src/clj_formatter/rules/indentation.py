from dataclasses import dataclass, field
from typing import Dict, List, Optional

from .base import FormattingRule, FormattingContext, Transformation
from ..indents import DEFAULT_INDENTS, lookup
from ..models import FormatterConfig, IndentRule
from ..reader import Token, TokenKind


@dataclass
class _Element:
    token: Token
    line: int
    column: int


@dataclass
class _Frame:
    opener: str
    line: int
    column: int
    elements: List[_Element] = field(default_factory=list)
    after_prefix: bool = False

    @property
    def is_list(self) -> bool:
        return self.opener.endswith("(")

    @property
    def head(self) -> Optional[str]:
        if self.elements and self.elements[0].token.kind is TokenKind.ATOM:
            return self.elements[0].token.text
        return None

    def arguments_on_head_line(self) -> int:
        return sum(1 for e in self.elements[1:] if e.line == self.line)


class IndentationRule(FormattingRule):
    """Re-indents every line that does not start inside a string literal.

    Columns are tracked as they will be after re-indenting, so nested forms
    line up with their already-moved parents in a single pass.
    """

    def __init__(self, config: FormatterConfig):
        self.config = config
        self.indents: Dict[str, List[IndentRule]] = {**DEFAULT_INDENTS, **config.indents}

    @property
    def rule_id(self) -> str: return "F005"
    @property
    def name(self) -> str: return "indentation"

    def analyze(self, context: FormattingContext) -> List[Transformation]:
        tokens = context.tree.tokens
        transformations = []
        stack: List[_Frame] = []
        shifts: Dict[int, int] = {}

        edit = self._reindent(tokens, 0, 0, 0, stack, shifts)
        if edit: transformations.append(edit)

        for index, token in enumerate(tokens):
            kind = token.kind
            if kind is TokenKind.NEWLINE:
                edit = self._reindent(tokens, index + 1, token.end, token.line + 1, stack, shifts)
                if edit: transformations.append(edit)
            elif kind is TokenKind.OPEN:
                column = token.column + shifts.get(token.line, 0)
                self._add_element(stack, token, column)
                stack.append(_Frame(token.text, token.line, column))
            elif kind is TokenKind.CLOSE:
                stack.pop()
            elif kind in (TokenKind.ATOM, TokenKind.STRING, TokenKind.PREFIX):
                self._add_element(stack, token, token.column + shifts.get(token.line, 0))

        return transformations

    @staticmethod
    def _add_element(stack: List[_Frame], token: Token, column: int) -> None:
        if not stack: return
        frame = stack[-1]
        if not frame.after_prefix:
            frame.elements.append(_Element(token, token.line, column))
        frame.after_prefix = token.kind is TokenKind.PREFIX

    def _reindent(self, tokens: List[Token], position: int, start: int, line: int,
                  stack: List[_Frame], shifts: Dict[int, int]) -> Optional[Transformation]:
        """Edit the indentation of the line whose first token is ``tokens[position]``."""
        current = ""
        if position < len(tokens) and tokens[position].kind is TokenKind.WHITESPACE:
            current = tokens[position].text
            position += 1
        if position >= len(tokens) or tokens[position].kind is TokenKind.NEWLINE:
            return None

        target = self._indent_for(stack)
        shifts[line] = target - len(current)
        if current == " " * target:
            return None
        return Transformation(start, start + len(current), " " * target)

    def _indent_for(self, stack: List[_Frame]) -> int:
        if not stack: return 0
        frame = stack[-1]
        if not frame.is_list:
            return frame.column + len(frame.opener)

        body = frame.column + len(frame.opener) + 1
        for depth, ancestor in enumerate(reversed(stack)):
            if not ancestor.is_list or ancestor.head is None: continue
            for rule in lookup(self.indents, self.config.alias_map, ancestor.head):
                if rule.kind == "inner" and rule.depth == depth:
                    return body
                if rule.kind == "block" and depth == 0 and frame.arguments_on_head_line() <= rule.depth:
                    return body
        return self._list_indent(frame)

    @staticmethod
    def _list_indent(frame: _Frame) -> int:
        elements = frame.elements
        if len(elements) > 1 and elements[1].line == elements[0].line:
            return elements[1].column
        return frame.column + len(frame.opener)
