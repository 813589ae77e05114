import pytest

from clj_cli.config import Configuration
from clj_cli.output import Output

GOOD_SOURCE = '(ns example.core)\n\n(defn greet\n  [name]\n  (str "Hello, " name))\n'
BAD_SOURCE = '(ns example.core)\n\n(defn greet\n[name]\n(str "Hello, " name))\n'
UNPARSEABLE_SOURCE = "(defn broken [x]\n  (inc x)\n"


class CapturedOutput:
    """Output whose sinks append to lists instead of writing to the console."""

    def __init__(self):
        self.stdout = []
        self.stderr = []
        self.output = Output(out=self.stdout.append, err=self.stderr.append)

    @property
    def err_text(self) -> str:
        return "\n".join(self.stderr)


@pytest.fixture
def captured():
    return CapturedOutput()


@pytest.fixture
def make_config(tmp_path):
    def _make(**overrides):
        settings = {"project_root": tmp_path, "ansi": False}
        settings.update(overrides)
        return Configuration(**settings)

    return _make
