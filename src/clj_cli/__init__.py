"""Batch check and fix runs for the Clojure formatter."""

from .config import Configuration, load_config
from .errors import CljFmtError, ConfigError, MissingPathError
from .models import Changed, Counts, Failed, FileStatus, Unchanged, exit_code, merge_counts
from .output import Output
from .pipeline import check, classify, fix

__all__ = [
    "Configuration",
    "load_config",
    "CljFmtError",
    "ConfigError",
    "MissingPathError",
    "Changed",
    "Counts",
    "Failed",
    "FileStatus",
    "Unchanged",
    "exit_code",
    "merge_counts",
    "Output",
    "check",
    "classify",
    "fix",
]
