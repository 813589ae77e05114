import os
import re
from pathlib import Path
from typing import Iterable, List, Pattern, Union

from .errors import MissingPathError

PathLike = Union[str, Path]


def relative_path(root: PathLike, path: PathLike) -> str:
    """POSIX path of ``path`` relative to ``root``; paths outside ``root`` come back absolute."""
    root = Path(os.path.abspath(root))
    path = Path(os.path.abspath(path))
    try:
        return path.relative_to(root).as_posix()
    except ValueError:
        return path.as_posix()


def find_files(root: PathLike, file_pattern: Union[str, Pattern[str]]) -> List[Path]:
    """Expand a root into the files to process.

    A file is returned as is. A directory is searched recursively for files
    whose path relative to it matches ``file_pattern``.
    """
    root = Path(root)
    if not root.exists():
        raise MissingPathError(root)
    if not root.is_dir():
        return [root]

    pattern = re.compile(file_pattern) if isinstance(file_pattern, str) else file_pattern
    return sorted(
        p for p in root.rglob("*")
        if p.is_file() and pattern.search(p.relative_to(root).as_posix())
    )


def resolve_paths(roots: Iterable[PathLike], file_pattern: Union[str, Pattern[str]]) -> List[Path]:
    """Expand every root up front, so a missing one aborts before any file is touched."""
    files: List[Path] = []
    for root in roots:
        files.extend(find_files(root, file_pattern))
    return files
