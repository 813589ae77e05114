from dataclasses import dataclass
from typing import Callable

import typer

Sink = Callable[[str], None]


def _stdout(message: str) -> None:
    typer.echo(message)


def _stderr(message: str) -> None:
    typer.echo(message, err=True)


@dataclass(frozen=True)
class Output:
    """Where run output goes: notices to ``out``, warnings, diffs and traces to ``err``."""

    out: Sink = _stdout
    err: Sink = _stderr

    @classmethod
    def console(cls) -> "Output":
        return cls()

    def info(self, *parts: object) -> None:
        self.out(" ".join(str(p) for p in parts))

    def warn(self, *parts: object) -> None:
        self.err(" ".join(str(p) for p in parts))
