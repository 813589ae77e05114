from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import click
import typer
from typer.core import TyperGroup

from . import pipeline
from .config import CONFIG_FILE, Configuration, load_config, read_table
from .errors import CljFmtError
from .output import Output


class SetupErrorGroup(TyperGroup):
    """Command group whose usage errors exit with status 1 like every other setup error."""

    def make_context(self, info_name, args, parent=None, **extra):
        try:
            return super().make_context(info_name, args, parent=parent, **extra)
        except click.UsageError as exc:
            exc.exit_code = 1
            raise

    def invoke(self, ctx):
        try:
            return super().invoke(ctx)
        except click.UsageError as exc:
            exc.exit_code = 1
            raise


app = typer.Typer(
    cls=SetupErrorGroup,
    help="Clojure formatter - check or fix the formatting of Clojure source files",
    no_args_is_help=True,
)


@dataclass
class CliOptions:
    config_file: Path
    overrides: Dict[str, Any] = field(default_factory=dict)
    indents_file: Optional[Path] = None
    alias_map_file: Optional[Path] = None


def _abort(message: str) -> None:
    typer.echo(message, err=True)
    raise typer.Exit(code=1)


def _configuration(ctx: typer.Context, paths: Optional[list[Path]]) -> Configuration:
    options: CliOptions = ctx.obj
    overrides = dict(options.overrides)
    if paths:
        overrides["paths"] = tuple(str(p) for p in paths)
    try:
        if options.indents_file is not None:
            overrides["indents"] = read_table(options.indents_file)
        if options.alias_map_file is not None:
            overrides["alias_map"] = read_table(options.alias_map_file)
        return load_config(options.config_file, **overrides)
    except CljFmtError as exc:
        _abort(str(exc))


@app.callback()
def main(
    ctx: typer.Context,
    config_file: Path = typer.Option(CONFIG_FILE, "--config", help="Path to config file"),
    project_root: Optional[Path] = typer.Option(None, help="Root that displayed paths are relative to"),
    file_pattern: Optional[str] = typer.Option(None, help="Regex for files to format inside directories"),
    indents: Optional[Path] = typer.Option(None, help="TOML file of extra indentation rules"),
    alias_map: Optional[Path] = typer.Option(None, help="TOML file mapping namespace aliases"),
    jobs: Optional[int] = typer.Option(None, help="Number of files to format in parallel", min=1),
    ansi: Optional[bool] = typer.Option(None, "--ansi/--no-ansi", help="Colorize diffs"),
    indentation: Optional[bool] = typer.Option(None, "--indentation/--no-indentation"),
    insert_missing_whitespace: Optional[bool] = typer.Option(
        None, "--insert-missing-whitespace/--no-insert-missing-whitespace"
    ),
    remove_surrounding_whitespace: Optional[bool] = typer.Option(
        None, "--remove-surrounding-whitespace/--no-remove-surrounding-whitespace"
    ),
    remove_trailing_whitespace: Optional[bool] = typer.Option(
        None, "--remove-trailing-whitespace/--no-remove-trailing-whitespace"
    ),
    remove_consecutive_blank_lines: Optional[bool] = typer.Option(
        None, "--remove-consecutive-blank-lines/--no-remove-consecutive-blank-lines"
    ),
):
    """Options shared by every command; command-line values win over the config file."""
    ctx.obj = CliOptions(
        config_file=config_file,
        overrides={
            "project_root": project_root,
            "file_pattern": file_pattern,
            "jobs": jobs,
            "ansi": ansi,
            "indentation": indentation,
            "insert_missing_whitespace": insert_missing_whitespace,
            "remove_surrounding_whitespace": remove_surrounding_whitespace,
            "remove_trailing_whitespace": remove_trailing_whitespace,
            "remove_consecutive_blank_lines": remove_consecutive_blank_lines,
        },
        indents_file=indents,
        alias_map_file=alias_map,
    )


@app.command()
def check(
    ctx: typer.Context,
    paths: list[Path] = typer.Argument(None, help="Files or directories to check (default: src test)"),
):
    """Check that Clojure files follow the formatting rules"""
    config = _configuration(ctx, paths)
    try:
        code = pipeline.check(config, output=Output.console())
    except CljFmtError as exc:
        _abort(str(exc))
    raise typer.Exit(code=code)


@app.command()
def fix(
    ctx: typer.Context,
    paths: list[Path] = typer.Argument(None, help="Files or directories to fix (default: src test)"),
):
    """Reformat Clojure files in place"""
    config = _configuration(ctx, paths)
    try:
        pipeline.fix(config, output=Output.console())
    except CljFmtError as exc:
        _abort(str(exc))


if __name__ == "__main__":
    app()
