import pytest
from clj_formatter.errors import ParseError
from clj_formatter.reader import Node, TokenKind, parse, tokenize


def kinds(source):
    return [t.kind for t in tokenize(source)]


def test_tokenize_basic_forms():
    assert kinds('(foo "a b" ;c\n)') == [
        TokenKind.OPEN,
        TokenKind.ATOM,
        TokenKind.WHITESPACE,
        TokenKind.STRING,
        TokenKind.WHITESPACE,
        TokenKind.COMMENT,
        TokenKind.NEWLINE,
        TokenKind.CLOSE,
    ]


def test_tokenize_keeps_every_character():
    source = '(ns a.b\n  (:require [c.d :as d]))\n\n#{1, 2} #"\\d+" \\( @x ~@y #?(:clj 1)'
    assert "".join(t.text for t in tokenize(source)) == source


def test_tokenize_dispatch_openers_and_prefixes():
    tokens = tokenize("#{1} #(inc %) #?@(:clj [1]) '(a) #'foo #_x")
    opens = [t.text for t in tokens if t.kind is TokenKind.OPEN]
    prefixes = [t.text for t in tokens if t.kind is TokenKind.PREFIX]
    assert opens == ["#{", "#(", "#?@(", "[", "("]
    assert prefixes == ["'", "#'", "#_"]


def test_tokenize_regex_and_character_literals():
    tokens = tokenize('#"[a-z]+" \\) \\newline')
    assert tokens[0].kind is TokenKind.STRING
    assert tokens[0].text == '#"[a-z]+"'
    atoms = [t.text for t in tokens if t.kind is TokenKind.ATOM]
    assert atoms == ["\\)", "\\newline"]


def test_tokenize_tracks_lines_across_multiline_strings():
    tokens = tokenize('"a\nbc" d')
    assert tokens[0].line == 0
    assert tokens[2].text == "d"
    assert tokens[2].line == 1
    assert tokens[2].column == 4


def test_tokenize_escaped_quote_inside_string():
    tokens = tokenize('"say \\"hi\\"" x')
    assert tokens[0].text == '"say \\"hi\\""'
    assert tokens[-1].text == "x"


def test_parse_builds_nested_nodes():
    tree = parse("(a [b c] {:d 1}) ; done")
    top = tree.root.elements
    assert len(top) == 1
    form = top[0]
    assert isinstance(form, Node)
    assert form.open.text == "("
    assert form.close.text == ")"
    assert [e.open.text for e in form.elements if isinstance(e, Node)] == ["[", "{"]


def test_walk_visits_every_node_in_order():
    tree = parse("(a (b) [c]) {d 1}")
    openers = [n.open.text if n.open else None for n in tree.walk()]
    assert openers == [None, "(", "(", "[", "{"]


@pytest.mark.parametrize(
    "source",
    ["(a\n(b)", "(a))", "(foo]", '(str "abc)', "{:a 1"],
)
def test_parse_rejects_unbalanced_input(source):
    with pytest.raises(ParseError) as exc_info:
        parse(source)
    assert exc_info.value.line >= 1
    assert exc_info.value.column >= 1


def test_parse_error_reports_the_line_of_a_stray_delimiter():
    with pytest.raises(ParseError) as exc_info:
        parse("(ns a)\n\n(b))\n")
    assert exc_info.value.line == 3
    assert f"at line 3, column {exc_info.value.column}" in str(exc_info.value)


def test_parse_metadata_and_tagged_literals():
    tokens = tokenize('^:private (defn ^String f [] #inst "2020")')
    prefixes = [t.text for t in tokens if t.kind is TokenKind.PREFIX]
    assert prefixes == ["^", "^", "#"]
    assert [t.text for t in tokens if t.kind is TokenKind.OPEN] == ["(", "["]


def test_parse_handles_non_ascii_text():
    source = '(println "héllo wörld")\n(ä b)'
    tokens = tokenize(source)
    assert "".join(t.text for t in tokens) == source
    atom = next(t for t in tokens if t.text == "ä")
    assert (atom.start, atom.line, atom.column) == (source.index("(ä") + 1, 1, 1)


def test_comment_at_end_of_line_leaves_newline_token():
    tokens = tokenize("; note\nx")
    assert [t.kind for t in tokens] == [TokenKind.COMMENT, TokenKind.NEWLINE, TokenKind.ATOM]
    assert tokens[0].text == "; note"


def test_brackets_inside_strings_and_comments_are_ignored():
    tree = parse('(a "(((" ; ]]]\n)')
    assert len(tree.root.elements) == 1
