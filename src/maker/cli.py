from __future__ import annotations

from typing import List, Optional

import typer

from .config import load_context
from .core import CATCH_ALL, discover_targets, is_runnable, list_targets, run_target
from .errors import MakeError
from .logging import attach_log_file, get_logger


app = typer.Typer(add_completion=False, help="Build, package and test pdf.js")
log = get_logger("maker.cli")


def _echo_listing(specs) -> None:
    typer.echo("Please specify a target. Available targets:")
    for name in list_targets(specs):
        typer.echo(f"  {name}")


@app.command()
def make(
    names: Optional[List[str]] = typer.Argument(None, help="Targets to run, in order"),
    config: str = typer.Option("configs/make.yaml", help="Path to YAML config"),
    root: Optional[str] = typer.Option(None, help="Project root (default: cwd)"),
):
    """Run build targets by name. Without a target, list them."""
    specs = discover_targets()
    names = names or []
    if not names or names == [CATCH_ALL]:
        _echo_listing(specs)
        raise typer.Exit(code=0)

    unknown = [n for n in names if not is_runnable(specs, n)]
    if unknown:
        typer.echo(f"Unknown target: {', '.join(unknown)}", err=True)
        _echo_listing(specs)
        raise typer.Exit(code=1)

    ctx = load_context(root, config)
    if ctx.log_file is not None:
        attach_log_file(ctx.log_file)
    try:
        for name in names:
            run_target(specs, name, ctx)
    except MakeError as e:
        log.error("%s", e)
        raise typer.Exit(code=1)


def main():  # pragma: no cover
    app()


if __name__ == "__main__":  # pragma: no cover
    main()
