from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List

from ..reader import SyntaxTree


@dataclass
class Transformation:
    start: int
    end: int
    new_content: str


@dataclass
class FormattingContext:
    source: str
    tree: SyntaxTree


class FormattingRule(ABC):
    """Base class for rules that turn a parsed source into character edits."""

    @property
    @abstractmethod
    def rule_id(self) -> str:
        """Unique rule identifier (e.g., 'F001')."""
        pass

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable rule name, matching its configuration toggle."""
        pass

    @abstractmethod
    def analyze(self, context: FormattingContext) -> List[Transformation]:
        """Return non-overlapping edits against ``context.source``."""
        pass
