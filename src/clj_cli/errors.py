from pathlib import Path
from typing import Union


class CljFmtError(Exception):
    """Base class for errors that stop a run before any file is processed."""


class ConfigError(CljFmtError):
    """Configuration file or option values could not be used."""


class MissingPathError(CljFmtError):
    def __init__(self, path: Union[str, Path]):
        super().__init__(f"No such file: {path}")
        self.path = Path(path)
