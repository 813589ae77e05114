"""Check and fix runs over a set of paths.

Every file is classified independently; a file that cannot be read or
formatted becomes a ``Failed`` outcome and the run carries on. Only a
missing root path stops a run, and it does so before any file is read.
"""

import traceback
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Callable, Iterable, Iterator, List, Optional

from clj_formatter import reformat_string

from .config import Configuration
from .diff import render_diff
from .models import Changed, Counts, Failed, FileStatus, Outcome, Unchanged, exit_code, merge_counts
from .output import Output
from .paths import relative_path, resolve_paths


def project_path(config: Configuration, path: Path) -> str:
    return relative_path(config.project_root, path)


def _failed(exc: BaseException) -> Failed:
    return Failed(error=exc, trace="".join(traceback.format_exception(exc)).rstrip("\n"))


def classify(config: Configuration, content: str) -> Outcome:
    try:
        revised = reformat_string(content, config.to_formatter_config())
    except Exception as exc:
        return _failed(exc)
    if revised == content:
        return Unchanged()
    return Changed(original=content, revised=revised)


def _read(path: Path) -> str:
    # newline="" keeps line endings exactly as they are on disk
    with open(path, encoding="utf-8", newline="") as f:
        return f.read()


def _write(path: Path, content: str) -> None:
    with open(path, "w", encoding="utf-8", newline="") as f:
        f.write(content)


def classify_file(config: Configuration, path: Path) -> Outcome:
    try:
        content = _read(path)
    except (OSError, UnicodeDecodeError) as exc:
        return _failed(exc)
    return classify(config, content)


def check_one(config: Configuration, path: Path) -> FileStatus:
    outcome = classify_file(config, path)
    display_path = project_path(config, path)
    diff = None
    if isinstance(outcome, Changed):
        diff = render_diff(config, display_path, outcome.original, outcome.revised)
    return FileStatus(path=path, display_path=display_path, outcome=outcome, diff=diff)


def fix_one(config: Configuration, path: Path) -> FileStatus:
    """Classify a file and overwrite it when the formatter changed it."""
    outcome = classify_file(config, path)
    if isinstance(outcome, Changed):
        try:
            _write(path, outcome.revised)
        except OSError as exc:
            outcome = _failed(exc)
    return FileStatus(path=path, display_path=project_path(config, path), outcome=outcome)


def _process(config: Configuration, files: List[Path],
             worker: Callable[[Configuration, Path], FileStatus]) -> Iterator[FileStatus]:
    """Yield one status per file, in file order, whatever the number of jobs."""
    if config.jobs <= 1 or len(files) <= 1:
        for path in files:
            yield worker(config, path)
        return
    with ThreadPoolExecutor(max_workers=config.jobs) as executor:
        yield from executor.map(lambda path: worker(config, path), files)


def _print_failure(output: Output, display_path: str, outcome: Failed) -> None:
    output.warn("Failed to format file:", display_path)
    output.warn(outcome.trace)


def print_file_status(output: Output, status: FileStatus) -> None:
    outcome = status.outcome
    if isinstance(outcome, Failed):
        _print_failure(output, status.display_path, outcome)
    elif isinstance(outcome, Changed):
        output.warn(status.display_path, "has incorrect formatting")
        output.warn(status.diff)


def print_final_count(output: Output, counts: Counts) -> None:
    if counts.error:
        output.warn(counts.error, "file(s) could not be parsed for formatting")
    if counts.incorrect:
        output.warn(counts.incorrect, "file(s) formatted incorrectly")
    if not counts.error and not counts.incorrect:
        output.info("All source files formatted correctly")


def check(config: Configuration, paths: Optional[Iterable[str]] = None,
          output: Optional[Output] = None) -> int:
    """Check that the files under ``paths`` are formatted; return the exit code.

    Raises MissingPathError if any root does not exist.
    """
    output = output or Output.console()
    files = resolve_paths(config.paths if paths is None else paths, config.pattern)

    def report(status: FileStatus) -> Counts:
        print_file_status(output, status)
        return status.counts

    counts = merge_counts(report(status) for status in _process(config, files, check_one))
    print_final_count(output, counts)
    return exit_code(counts)


def fix(config: Configuration, paths: Optional[Iterable[str]] = None,
        output: Optional[Output] = None) -> None:
    """Reformat the files under ``paths`` in place.

    Raises MissingPathError if any root does not exist.
    """
    output = output or Output.console()
    files = resolve_paths(config.paths if paths is None else paths, config.pattern)

    for status in _process(config, files, fix_one):
        if isinstance(status.outcome, Changed):
            output.info("Reformatting", status.display_path)
        elif isinstance(status.outcome, Failed):
            _print_failure(output, status.display_path, status.outcome)
