from dataclasses import dataclass
from functools import reduce
from pathlib import Path
from typing import Iterable, Optional, Union


@dataclass(frozen=True)
class Unchanged:
    """The formatter left the file as it was."""


@dataclass(frozen=True)
class Changed:
    original: str
    revised: str


@dataclass(frozen=True)
class Failed:
    error: BaseException
    trace: str


Outcome = Union[Unchanged, Changed, Failed]


@dataclass(frozen=True)
class Counts:
    """Tally of file outcomes. Forms a monoid under ``merge`` with ``Counts.zero()``."""

    okay: int = 0
    incorrect: int = 0
    error: int = 0

    @classmethod
    def zero(cls) -> "Counts":
        return cls()

    @classmethod
    def for_outcome(cls, outcome: Outcome) -> "Counts":
        if isinstance(outcome, Failed):
            return cls(error=1)
        if isinstance(outcome, Changed):
            return cls(incorrect=1)
        return cls(okay=1)

    def merge(self, other: "Counts") -> "Counts":
        return Counts(
            okay=self.okay + other.okay,
            incorrect=self.incorrect + other.incorrect,
            error=self.error + other.error,
        )

    __add__ = merge

    @property
    def total(self) -> int:
        return self.okay + self.incorrect + self.error


def merge_counts(counts: Iterable[Counts]) -> Counts:
    return reduce(Counts.merge, counts, Counts.zero())


def exit_code(counts: Counts) -> int:
    """2 if any file failed, else 1 if any file is incorrectly formatted, else 0."""
    if counts.error:
        return 2
    if counts.incorrect:
        return 1
    return 0


@dataclass(frozen=True)
class FileStatus:
    path: Path
    display_path: str
    outcome: Outcome
    diff: Optional[str] = None

    @property
    def counts(self) -> Counts:
        return Counts.for_outcome(self.outcome)
