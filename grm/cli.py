"""Typer CLI entrypoint for grm."""

from __future__ import annotations

import logging
import sys
from typing import IO, Iterable, NoReturn, Optional

import typer
from rich.console import Console
from rich.markup import escape

from . import __version__, repos, worktrees
from .config import APP_NAME, Runtime
from .exceptions import GrmError, ValidationError
from .fs import display_path
from .models import Scheme
from .origin import normalize

app = typer.Typer(help="Git Repository Manager", add_completion=False, no_args_is_help=True)
console = Console()


def configure_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="%(levelname)s: %(message)s")


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"{APP_NAME} {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logging."),
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show the grm version and exit.",
    ),
) -> None:
    _ = version  # handled via callback
    configure_logging(verbose)


@app.command(help="Print repositories' root directory")
def root() -> None:
    try:
        runtime = Runtime.open_default()
        typer.echo(display_path(runtime.root_dir))
    except GrmError as err:
        _fail(str(err))


@app.command("ls")
@app.command("list", help="List managed local repositories")
def list_(
    absolute: bool = typer.Option(False, "--absolute", "-l", help="Print absolute paths."),
) -> None:
    try:
        runtime = Runtime.open_default()
        for path in repos.list_managed(runtime.root_dir, absolute=absolute):
            typer.echo(display_path(path))
    except GrmError as err:
        _fail(str(err))


@app.command("g")
@app.command("clone", hidden=True)
@app.command("get", help="Clone a remote repository")
def get(
    repo: str = typer.Argument(..., help="Repository: NAME, OWNER/NAME, HOST/OWNER/NAME or a URL."),
    ssh: bool = typer.Option(False, "--ssh", help="Clone with SSH instead of HTTPS."),
    depth: int = typer.Option(0, "--depth", min=0, help="Set fetch depth, 0 means to pull everything."),
) -> None:
    try:
        runtime = Runtime.open_current()
        origin = normalize(repo, runtime.user_name, Scheme.from_flag(ssh))
        typer.echo(f"origin: {origin}")
        target = repos.local_path_for(runtime, origin)
        typer.echo(f"path: {display_path(target)}")
        repos.clone(runtime, origin, depth=depth)
    except GrmError as err:
        _fail(str(err))
    console.print(f"[green]Cloned into {escape(display_path(target))}[/green]")


@app.command("n")
@app.command("new", help="Create a new local repository")
def new(
    name: str = typer.Argument(..., help="Repository reference, or a branch name with --worktree."),
    worktree: bool = typer.Option(
        False,
        "--worktree",
        "-w",
        help="Create a new linked worktree of the current repository.",
    ),
    ssh: bool = typer.Option(False, "--ssh", help="Use SSH scheme for the origin URL instead of HTTPS."),
    raw: bool = typer.Option(
        False,
        "--raw",
        "-r",
        help="With --worktree, use NAME as the exact branch name instead of matching it.",
    ),
) -> None:
    try:
        runtime = Runtime.open_current()
        if worktree:
            _new_worktree(runtime, name, raw=raw)
            return
        if raw:
            raise ValidationError("--raw can only be used together with --worktree.")
        origin = normalize(name, runtime.user_name, Scheme.from_flag(ssh))
        typer.echo(f"origin: {origin}")
        target = repos.local_path_for(runtime, origin)
        typer.echo(f"path: {display_path(target)}")
        repos.init(runtime, origin)
    except GrmError as err:
        _fail(str(err))
    console.print(f"[green]Initialized repository at {escape(display_path(target))}[/green]")


def _new_worktree(runtime: Runtime, name: str, *, raw: bool) -> None:
    plan = worktrees.plan_worktree(runtime, name, raw=raw)
    typer.echo(f"branch: {plan.branch}")
    typer.echo(f"worktree: {display_path(plan.path)}")
    target = worktrees.create_worktree(runtime, plan)
    console.print(f"[green]Worktree created at {escape(display_path(target))}[/green]")


def collect_args(argv: Iterable[str], stdin: Optional[IO[str]]) -> list[str]:
    """Append piped stdin lines to the command-line arguments.

    ``echo foo/bar | grm get`` behaves like ``grm get foo/bar``.
    """

    args = list(argv)
    if stdin is None or stdin.isatty():
        return args
    for raw_line in stdin:
        line = raw_line.rstrip("\r\n")
        if line.strip():
            args.append(line)
    return args


def run() -> None:
    app(args=collect_args(sys.argv[1:], sys.stdin), prog_name=APP_NAME)


def _fail(message: str, code: int = 1) -> NoReturn:
    typer.secho(message, err=True, fg=typer.colors.RED)
    raise typer.Exit(code)


__all__ = ["app", "collect_args", "run"]


if __name__ == "__main__":
    run()
