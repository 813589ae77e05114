import difflib

import typer

from .config import Configuration


def unified_diff(label: str, original: str, revised: str) -> str:
    """Unified diff of two texts, with ``a/label`` and ``b/label`` file headers."""
    lines = difflib.unified_diff(
        original.splitlines(keepends=True),
        revised.splitlines(keepends=True),
        fromfile=f"a/{label}",
        tofile=f"b/{label}",
    )
    return "".join(line if line.endswith("\n") else line + "\n" for line in lines).rstrip("\n")


def _colorize_line(line: str) -> str:
    if line.startswith(("---", "+++")):
        return typer.style(line, bold=True)
    if line.startswith("@@"):
        return typer.style(line, fg=typer.colors.CYAN)
    if line.startswith("+"):
        return typer.style(line, fg=typer.colors.GREEN)
    if line.startswith("-"):
        return typer.style(line, fg=typer.colors.RED)
    return line


def colorize_diff(diff_text: str) -> str:
    return "\n".join(_colorize_line(line) for line in diff_text.split("\n"))


def render_diff(config: Configuration, display_path: str, original: str, revised: str) -> str:
    diff = unified_diff(display_path, original, revised)
    return colorize_diff(diff) if config.ansi else diff
