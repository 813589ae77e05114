"""Indentation rule table.

A symbol maps to a list of rules, tried in order:

* ``block N`` - the body is indented two spaces, unless more than N
  arguments share a line with the form's head.
* ``inner N`` - lists nested N levels inside the form are indented two
  spaces (``inner 0`` applies to the form itself).

Anything without a rule gets list indentation: align with the first
argument when it follows the head, otherwise one column past the opener.
"""

from typing import Any, Dict, List, Mapping

from .models import IndentRule

KINDS = ("block", "inner")


def _block(depth: int) -> List[IndentRule]:
    return [IndentRule("block", depth)]


def _inner(depth: int) -> List[IndentRule]:
    return [IndentRule("inner", depth)]


DEFAULT_INDENTS: Dict[str, List[IndentRule]] = {
    "as->": _block(2),
    "binding": _block(1),
    "case": _block(1),
    "catch": _block(2),
    "comment": _block(0),
    "cond->": _block(1),
    "cond->>": _block(1),
    "condp": _block(2),
    "def": _inner(0),
    "defmacro": _inner(0),
    "defmethod": _inner(0),
    "defmulti": _inner(0),
    "defn": _inner(0),
    "defn-": _inner(0),
    "defonce": _inner(0),
    "deftest": _inner(0),
    "delay": _block(0),
    "do": _block(0),
    "doseq": _block(1),
    "dosync": _block(0),
    "dotimes": _block(1),
    "finally": _block(0),
    "fn": _inner(0),
    "for": _block(1),
    "future": _block(0),
    "if": _block(1),
    "if-let": _block(1),
    "if-not": _block(1),
    "if-some": _block(1),
    "let": _block(1),
    "locking": _block(1),
    "loop": _block(1),
    "ns": _block(1),
    "some->": _block(1),
    "some->>": _block(1),
    "testing": _block(1),
    "try": _block(0),
    "when": _block(1),
    "when-first": _block(1),
    "when-let": _block(1),
    "when-not": _block(1),
    "when-some": _block(1),
    "while": _block(1),
    "with-open": _block(1),
    "with-redefs": _block(1),
    "defprotocol": [IndentRule("block", 1), IndentRule("inner", 1)],
    "defrecord": [IndentRule("block", 2), IndentRule("inner", 1)],
    "deftype": [IndentRule("block", 2), IndentRule("inner", 1)],
    "extend-protocol": [IndentRule("block", 1), IndentRule("inner", 1)],
    "extend-type": [IndentRule("block", 1), IndentRule("inner", 1)],
    "letfn": [IndentRule("block", 1), IndentRule("inner", 2)],
    "proxy": [IndentRule("block", 2), IndentRule("inner", 1)],
    "reify": [IndentRule("inner", 0), IndentRule("inner", 1)],
}


def parse_indents(table: Mapping[str, Any]) -> Dict[str, List[IndentRule]]:
    """Convert ``{"sym": [["block", 1]]}`` data (as read from TOML) into rules."""
    indents: Dict[str, List[IndentRule]] = {}
    for symbol, entries in table.items():
        if not isinstance(entries, (list, tuple)):
            raise ValueError(f"indent rules for {symbol!r} must be a list, got {entries!r}")
        rules = []
        for entry in entries:
            if isinstance(entry, IndentRule):
                rules.append(entry)
                continue
            if not isinstance(entry, (list, tuple)) or len(entry) != 2:
                raise ValueError(f"indent rule for {symbol!r} must be a [kind, depth] pair, got {entry!r}")
            kind, depth = entry
            if kind not in KINDS:
                raise ValueError(f"unknown indent kind {kind!r} for {symbol!r}, expected one of {KINDS}")
            if isinstance(depth, bool) or not isinstance(depth, int) or depth < 0:
                raise ValueError(f"indent depth for {symbol!r} must be a non-negative integer, got {depth!r}")
            rules.append(IndentRule(kind, depth))
        indents[str(symbol)] = rules
    return indents


def lookup(indents: Mapping[str, List[IndentRule]], alias_map: Mapping[str, str], symbol: str) -> List[IndentRule]:
    """Find the rules for a symbol, resolving namespace aliases first."""
    candidates = [symbol]
    alias, slash, name = symbol.partition("/")
    if slash and alias and name:
        namespace = alias_map.get(alias)
        if namespace:
            candidates.insert(0, f"{namespace}/{name}")
        candidates.append(name)
    for candidate in candidates:
        if candidate in indents:
            return list(indents[candidate])
    return []
