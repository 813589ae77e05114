from dataclasses import dataclass, field
from typing import Dict, List


@dataclass(frozen=True)
class IndentRule:
    kind: str  # 'block' or 'inner'
    depth: int


@dataclass
class FormatterConfig:
    indentation: bool = True
    insert_missing_whitespace: bool = True
    remove_surrounding_whitespace: bool = True
    remove_trailing_whitespace: bool = True
    remove_consecutive_blank_lines: bool = True
    indents: Dict[str, List[IndentRule]] = field(default_factory=dict)
    alias_map: Dict[str, str] = field(default_factory=dict)


@dataclass
class FormatResult:
    source: str
    modified: bool
