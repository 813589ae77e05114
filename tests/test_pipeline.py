import pytest
from clj_cli.errors import MissingPathError
from clj_cli.models import Changed, Failed, Unchanged
from clj_cli import pipeline
from clj_cli.output import Output
from clj_cli.pipeline import check, check_one, classify, classify_file, fix
from clj_formatter.errors import ParseError

from conftest import BAD_SOURCE, GOOD_SOURCE, UNPARSEABLE_SOURCE


def write(path, content):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


def test_classify_outcomes(make_config):
    config = make_config()
    assert classify(config, GOOD_SOURCE) == Unchanged()
    assert classify(config, BAD_SOURCE) == Changed(original=BAD_SOURCE, revised=GOOD_SOURCE)

    failed = classify(config, UNPARSEABLE_SOURCE)
    assert isinstance(failed, Failed)
    assert isinstance(failed.error, ParseError)
    assert "Traceback" in failed.trace
    assert "ParseError" in failed.trace


def test_classify_file_read_errors_become_failures(tmp_path, make_config):
    path = tmp_path / "binary.clj"
    path.write_bytes(b"(foo \xff\xfe)")
    outcome = classify_file(make_config(), path)
    assert isinstance(outcome, Failed)
    assert isinstance(outcome.error, UnicodeDecodeError)


def test_check_one_renders_diff_with_project_path(tmp_path, make_config):
    path = write(tmp_path / "src" / "a.clj", BAD_SOURCE)
    status = check_one(make_config(), path)
    assert status.display_path == "src/a.clj"
    assert status.diff.startswith("--- a/src/a.clj")


def test_check_incorrect_file(tmp_path, make_config, captured):
    path = write(tmp_path / "a.clj", BAD_SOURCE)

    code = check(make_config(), [str(path)], captured.output)

    assert code == 1
    assert captured.stdout == []
    assert captured.stderr[0] == "a.clj has incorrect formatting"
    assert captured.stderr[1].startswith("--- a/a.clj")
    assert sum(1 for line in captured.stderr if line.startswith("--- a/")) == 1
    assert captured.stderr[-1] == "1 file(s) formatted incorrectly"


def test_check_unparseable_file(tmp_path, make_config, captured):
    path = write(tmp_path / "b.clj", UNPARSEABLE_SOURCE)

    code = check(make_config(), [str(path)], captured.output)

    assert code == 2
    assert captured.stdout == []
    assert captured.stderr[0] == "Failed to format file: b.clj"
    assert "ParseError" in captured.stderr[1]
    assert captured.stderr[-1] == "1 file(s) could not be parsed for formatting"


def test_check_correct_file(tmp_path, make_config, captured):
    path = write(tmp_path / "c.clj", GOOD_SOURCE)

    code = check(make_config(), [str(path)], captured.output)

    assert code == 0
    assert captured.stderr == []
    assert captured.stdout == ["All source files formatted correctly"]


def test_check_error_takes_precedence_over_incorrect(tmp_path, make_config, captured):
    write(tmp_path / "src" / "a.clj", BAD_SOURCE)
    write(tmp_path / "src" / "b.clj", UNPARSEABLE_SOURCE)
    write(tmp_path / "src" / "c.clj", GOOD_SOURCE)

    code = check(make_config(), [str(tmp_path / "src")], captured.output)

    assert code == 2
    assert "1 file(s) could not be parsed for formatting" in captured.stderr
    assert "1 file(s) formatted incorrectly" in captured.stderr
    assert captured.stdout == []


def test_check_uses_configured_paths(tmp_path, make_config, captured):
    write(tmp_path / "src" / "a.clj", GOOD_SOURCE)
    config = make_config(paths=(str(tmp_path / "src"),))
    assert check(config, output=captured.output) == 0


def test_check_missing_root_aborts_before_processing(tmp_path, make_config, captured):
    path = write(tmp_path / "a.clj", BAD_SOURCE)

    with pytest.raises(MissingPathError):
        check(make_config(), [str(path), str(tmp_path / "missing")], captured.output)

    assert captured.stdout == []
    assert captured.stderr == []


def test_check_parallel_output_matches_sequential(tmp_path, make_config):
    sources = [GOOD_SOURCE, BAD_SOURCE, UNPARSEABLE_SOURCE]
    for i in range(9):
        write(tmp_path / "src" / f"f{i}.clj", sources[i % 3])

    results = []
    for jobs in (1, 4):
        lines = []
        output = Output(out=lines.append, err=lines.append)
        code = check(make_config(jobs=jobs), [str(tmp_path / "src")], output)
        results.append((code, lines))

    assert results[0][0] == results[1][0] == 2
    assert results[0][1] == results[1][1]


def test_fix_rewrites_changed_and_skips_broken(tmp_path, make_config, captured):
    changed = write(tmp_path / "src" / "changed.clj", BAD_SOURCE)
    broken = write(tmp_path / "src" / "broken.clj", UNPARSEABLE_SOURCE)
    config = make_config()

    assert fix(config, [str(tmp_path / "src")], captured.output) is None

    assert changed.read_text(encoding="utf-8") == GOOD_SOURCE
    assert broken.read_text(encoding="utf-8") == UNPARSEABLE_SOURCE
    assert captured.stdout == ["Reformatting src/changed.clj"]
    assert captured.stderr[0] == "Failed to format file: src/broken.clj"
    assert "ParseError" in captured.stderr[1]


def test_fix_twice_leaves_file_unchanged(tmp_path, make_config, captured):
    path = write(tmp_path / "a.clj", BAD_SOURCE)
    config = make_config()

    fix(config, [str(path)], captured.output)
    fixed = path.read_bytes()
    captured.stdout.clear()
    fix(config, [str(path)], captured.output)

    assert path.read_bytes() == fixed
    assert captured.stdout == []
    assert classify_file(config, path) == Unchanged()


def test_fix_leaves_correct_files_untouched(tmp_path, make_config, captured):
    path = write(tmp_path / "a.clj", GOOD_SOURCE)
    before = path.stat().st_mtime_ns

    fix(make_config(), [str(path)], captured.output)

    assert path.read_text(encoding="utf-8") == GOOD_SOURCE
    assert path.stat().st_mtime_ns == before
    assert captured.stdout == []
    assert captured.stderr == []


def test_fix_missing_root_touches_nothing(tmp_path, make_config, captured):
    path = write(tmp_path / "a.clj", BAD_SOURCE)

    with pytest.raises(MissingPathError):
        fix(make_config(), [str(path), str(tmp_path / "missing")], captured.output)

    assert path.read_text(encoding="utf-8") == BAD_SOURCE


def test_fix_write_failure_is_reported_and_run_continues(tmp_path, make_config, captured, monkeypatch):
    locked = write(tmp_path / "src" / "a_locked.clj", BAD_SOURCE)
    other = write(tmp_path / "src" / "b_other.clj", BAD_SOURCE)
    real_write = pipeline._write

    def refuse_locked(path, content):
        if path == locked:
            raise PermissionError(13, "Permission denied", str(path))
        real_write(path, content)

    monkeypatch.setattr(pipeline, "_write", refuse_locked)

    assert fix(make_config(), [str(tmp_path / "src")], captured.output) is None

    assert locked.read_text(encoding="utf-8") == BAD_SOURCE
    assert other.read_text(encoding="utf-8") == GOOD_SOURCE
    assert captured.stdout == ["Reformatting src/b_other.clj"]
    assert captured.stderr[0] == "Failed to format file: src/a_locked.clj"
    assert "PermissionError" in captured.stderr[1]
