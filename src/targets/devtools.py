from __future__ import annotations

import typer

from ..maker import BuildContext, target
from ..maker.fs import expand
from ..maker.logging import banner, get_logger
from ..maker.shell import CommandResult, external


log = get_logger("targets.devtools")

LINT_FILES = (
    "src/*.js",
    "web/*.js",
    "test/*.js",
    "test/unit/*.js",
    "extensions/firefox/*.js",
    "extensions/firefox/components/*.js",
    "extensions/chrome/*.js",
)


@target(name="server")
def server(ctx: BuildContext) -> None:
    """Start the local test server."""
    banner(log, "Starting local server")

    python = external(ctx.python, required=True)
    python.spawn(["-u", "test.py", f"--port={ctx.server_port}"], cwd=ctx.root_dir / "test")


def _report_lint_failure(result: CommandResult) -> None:
    if not result.ok:
        typer.echo(result.output)


def lint_files(ctx: BuildContext) -> list:
    files = []
    for pattern in LINT_FILES:
        # Directories without JS files are fine; only the overall set matters
        if any(ctx.root_dir.glob(pattern)):
            files.extend(expand([pattern], cwd=ctx.root_dir))
    return files


def spawn_lint(ctx: BuildContext) -> list:
    gjslint = external("gjslint", required=True, silent=True)

    # All files in parallel; only failures print their output
    return [
        gjslint.spawn(
            ["--nojsdoc", str(path.relative_to(ctx.root_dir))],
            cwd=ctx.root_dir,
            on_exit=_report_lint_failure,
        )
        for path in lint_files(ctx)
    ]


@target(name="lint")
def lint(ctx: BuildContext) -> None:
    """Lint JS files, one gjslint process per file."""
    banner(log, "Linting JS files")
    spawn_lint(ctx)
