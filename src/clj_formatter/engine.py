from typing import List, Optional

from .models import FormatterConfig, FormatResult
from .reader import parse
from .rules import (
    ConsecutiveBlankLineRule,
    FormattingContext,
    FormattingRule,
    IndentationRule,
    MissingWhitespaceRule,
    SurroundingWhitespaceRule,
    TrailingWhitespaceRule,
    Transformation,
)


def default_rules(config: FormatterConfig) -> List[FormattingRule]:
    """Rules enabled by the config toggles, in the order they must run."""
    rules: List[FormattingRule] = []
    if config.remove_surrounding_whitespace: rules.append(SurroundingWhitespaceRule(config))
    if config.insert_missing_whitespace: rules.append(MissingWhitespaceRule(config))
    if config.remove_consecutive_blank_lines: rules.append(ConsecutiveBlankLineRule(config))
    if config.remove_trailing_whitespace: rules.append(TrailingWhitespaceRule(config))
    # Indentation reads final columns, so it always goes last
    if config.indentation: rules.append(IndentationRule(config))
    return rules


class FormatterEngine:
    """Core engine for formatting Clojure source through ordered rules."""

    def __init__(self, config: FormatterConfig):
        self.config = config
        self.rules: List[FormattingRule] = []

    @classmethod
    def with_default_rules(cls, config: FormatterConfig) -> "FormatterEngine":
        engine = cls(config)
        for rule in default_rules(config):
            engine.add_rule(rule)
        return engine

    def add_rule(self, rule: FormattingRule) -> None:
        """Register a new formatting rule."""
        self.rules.append(rule)

    def format_string(self, source: str) -> FormatResult:
        """Run every rule over the source, re-reading it between rules.

        Raises ParseError if the source (or a rule's output) is unbalanced.
        """
        current = source.replace("\r\n", "\n")
        tree = parse(current)

        for rule in self.rules:
            transforms = rule.analyze(FormattingContext(source=current, tree=tree))
            revised = self._apply_transformations(current, transforms)
            if revised != current:
                current = revised
                tree = parse(current)

        return FormatResult(source=current, modified=current != source)

    @staticmethod
    def _apply_transformations(source: str, transforms: List[Transformation]) -> str:
        """Splice edits into ``source``. An edit overlapping an earlier one is dropped."""
        accepted: List[Transformation] = []
        for edit in sorted(transforms, key=lambda t: (t.start, t.end)):
            if accepted and edit.start < accepted[-1].end:
                continue
            accepted.append(edit)

        # Right to left, so offsets of the edits still pending stay valid
        for edit in reversed(accepted):
            source = source[:edit.start] + edit.new_content + source[edit.end:]
        return source


def reformat_string(source: str, config: Optional[FormatterConfig] = None) -> str:
    """Return ``source`` reformatted with the rules enabled in ``config``."""
    engine = FormatterEngine.with_default_rules(config or FormatterConfig())
    return engine.format_string(source).source
