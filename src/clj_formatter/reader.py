"""Clojure source as tokens and bracketed nodes, read through tree-sitter.

The grammar comes from ``tree-sitter-language-pack``. Its syntax tree hides
whitespace, so the spans of the visible nodes are flattened into a token
stream and the text between them is kept as whitespace, newline and comma
tokens. Joining the text of every token gives back the source exactly.
"""

import re
from dataclasses import dataclass, field
from enum import Enum
from functools import lru_cache
from typing import Iterator, List, Optional, Tuple, Union

import tree_sitter
from tree_sitter_language_pack import get_language

from .errors import ParseError


class TokenKind(str, Enum):
    WHITESPACE = "whitespace"
    NEWLINE = "newline"
    COMMA = "comma"
    COMMENT = "comment"
    STRING = "string"
    ATOM = "atom"
    PREFIX = "prefix"
    OPEN = "open"
    CLOSE = "close"


TRIVIA = (TokenKind.WHITESPACE, TokenKind.NEWLINE, TokenKind.COMMA)

# Grammar node types, grouped by how they become tokens
METADATA_TYPES = ("meta_lit", "old_meta_lit")
GAP_TYPES = ("comment", "dis_expr")
STRING_TYPES = ("str_lit", "regex_lit")
PREFIXED_TYPES = (
    "quoting_lit",
    "syn_quoting_lit",
    "unquoting_lit",
    "unquote_splicing_lit",
    "derefing_lit",
    "var_quoting_lit",
    "evaling_lit",
    "tagged_or_ctor_lit",
    "dis_expr",
) + METADATA_TYPES

_TRIVIA_RE = re.compile(r"\n|,|[^\S\n]+|[^\s,]+")

Span = Tuple[TokenKind, int, int]


@dataclass
class Token:
    kind: TokenKind
    text: str
    start: int
    line: int
    column: int

    @property
    def end(self) -> int:
        return self.start + len(self.text)

    @property
    def is_trivia(self) -> bool:
        return self.kind in TRIVIA


@dataclass
class Node:
    """A bracketed form. The root node of a tree has no delimiters."""

    open: Optional[Token] = None
    close: Optional[Token] = None
    children: List[Union["Node", Token]] = field(default_factory=list)

    @property
    def start(self) -> int:
        return self.open.start if self.open else 0

    @property
    def end(self) -> int:
        return self.close.end if self.close else 0

    @property
    def line(self) -> int:
        return self.open.line if self.open else 0

    @property
    def elements(self) -> List[Union["Node", Token]]:
        """Children that carry meaning: everything except whitespace, commas and comments."""
        return [c for c in self.children if is_element(c)]


@dataclass
class SyntaxTree:
    source: str
    tokens: List[Token]
    root: Node

    def walk(self) -> Iterator[Node]:
        """Depth-first iteration over every node, root included."""
        pending = [self.root]
        while pending:
            node = pending.pop()
            yield node
            pending.extend(reversed([c for c in node.children if isinstance(c, Node)]))


def is_element(item: Union[Node, Token]) -> bool:
    if isinstance(item, Node):
        return True
    return not item.is_trivia and item.kind is not TokenKind.COMMENT


@lru_cache(maxsize=None)
def _language() -> tree_sitter.Language:
    return get_language("clojure")


def _is_collection(node: tree_sitter.Node) -> bool:
    return any(not c.is_named and c.type.endswith(("(", "[", "{")) for c in node.children)


def _collect_spans(node: tree_sitter.Node, spans: List[Span]) -> None:
    """Append the byte spans of the tokens under ``node``, in source order."""
    if node.type == "comment":
        # The comment token runs up to and including its line break
        spans.append((TokenKind.COMMENT, node.start_byte, node.start_byte + len(node.text.rstrip(b"\r\n"))))
    elif node.type in STRING_TYPES:
        spans.append((TokenKind.STRING, node.start_byte, node.end_byte))
    elif _is_collection(node):
        _collect_collection(node, spans)
    elif node.type in PREFIXED_TYPES:
        for child in node.children:
            if child.is_named:
                _collect_spans(child, spans)
            else:
                spans.append((TokenKind.PREFIX, child.start_byte, child.end_byte))
    else:
        start = node.start_byte
        for child in node.children:
            if child.type not in METADATA_TYPES + GAP_TYPES:
                start = child.start_byte
                break
            _collect_spans(child, spans)
        spans.append((TokenKind.ATOM, start, node.end_byte))


def _collect_collection(node: tree_sitter.Node, spans: List[Span]) -> None:
    children = node.children
    opening = next(i for i, c in enumerate(children) if not c.is_named and c.type.endswith(("(", "[", "{")))
    lead = 0
    while children[lead].type in METADATA_TYPES + GAP_TYPES:
        _collect_spans(children[lead], spans)
        lead += 1

    # Dispatch markers such as "#", "#?" or "#:ns" belong to the opening delimiter
    spans.append((TokenKind.OPEN, children[lead].start_byte, children[opening].end_byte))
    for child in children[opening + 1:-1]:
        _collect_spans(child, spans)
    spans.append((TokenKind.CLOSE, children[-1].start_byte, children[-1].end_byte))


def _first_error(root: tree_sitter.Node) -> Optional[tree_sitter.Node]:
    if not root.has_error:
        return None
    pending = [root]
    while pending:
        node = pending.pop()
        if node.type == "ERROR" or node.is_missing:
            return node
        pending.extend(reversed([c for c in node.children if c.has_error or c.is_missing]))
    return root


def _char_offsets(source: str) -> Optional[List[int]]:
    """Map utf-8 byte offsets to string offsets, or None when they coincide."""
    if source.isascii():
        return None
    table: List[int] = []
    for index, char in enumerate(source):
        table.extend([index] * len(char.encode("utf-8")))
    table.append(len(source))
    return table


def _position(source: str, offset: int) -> Tuple[int, int]:
    line_start = source.rfind("\n", 0, offset) + 1
    return source.count("\n", 0, offset), offset - line_start


def _syntax_error(source: str, node: tree_sitter.Node, offsets: Optional[List[int]]) -> ParseError:
    start = offsets[node.start_byte] if offsets else node.start_byte
    line, column = _position(source, start)
    if node.is_missing:
        message = f"Missing {node.type}"
    else:
        text = source[start:offsets[node.end_byte] if offsets else node.end_byte].lstrip()
        if text[:1] in (")", "]", "}"):
            message = f"Unmatched delimiter: {text[0]}"
        elif text.startswith(('"', '#"')):
            message = "Unterminated string literal"
        else:
            message = "Unexpected input"
    return ParseError(message, line + 1, column + 1)


def _tokens(source: str, spans: List[Span]) -> List[Token]:
    tokens: List[Token] = []
    line = 0
    column = 0

    def add(kind: TokenKind, start: int, end: int) -> None:
        nonlocal line, column
        text = source[start:end]
        tokens.append(Token(kind, text, start, line, column))
        newlines = text.count("\n")
        if newlines:
            line += newlines
            column = len(text) - text.rfind("\n") - 1
        else:
            column += len(text)

    def add_trivia(start: int, end: int) -> None:
        for match in _TRIVIA_RE.finditer(source, start, end):
            text = match.group()
            if text == "\n":
                kind = TokenKind.NEWLINE
            elif text == ",":
                kind = TokenKind.COMMA
            elif text.isspace():
                kind = TokenKind.WHITESPACE
            else:
                kind = TokenKind.ATOM
            add(kind, match.start(), match.end())

    position = 0
    for kind, start, end in spans:
        add_trivia(position, start)
        add(kind, start, end)
        position = end
    add_trivia(position, len(source))
    return tokens


def _nest(tokens: List[Token]) -> Node:
    root = Node()
    stack = [root]
    for token in tokens:
        if token.kind is TokenKind.OPEN:
            node = Node(open=token)
            stack[-1].children.append(node)
            stack.append(node)
        elif token.kind is TokenKind.CLOSE:
            stack.pop().close = token
        else:
            stack[-1].children.append(token)
    return root


def parse(source: str) -> SyntaxTree:
    """Build a concrete syntax tree. Raises ParseError if the grammar reports an error."""
    tree = tree_sitter.Parser(_language()).parse(source.encode("utf-8"))
    offsets = _char_offsets(source)

    error = _first_error(tree.root_node)
    if error is not None:
        raise _syntax_error(source, error, offsets)

    spans: List[Span] = []
    for child in tree.root_node.children:
        _collect_spans(child, spans)
    if offsets:
        spans = [(kind, offsets[start], offsets[end]) for kind, start, end in spans]

    tokens = _tokens(source, spans)
    return SyntaxTree(source=source, tokens=tokens, root=_nest(tokens))


def tokenize(source: str) -> List[Token]:
    """Split Clojure source into tokens, keeping every character. Raises ParseError."""
    return parse(source).tokens
