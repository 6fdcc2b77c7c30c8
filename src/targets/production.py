"""Production targets: the `build/pdf.js` bundle and the production viewer."""

from __future__ import annotations

from functools import partial

from ..maker import BuildContext, target
from ..maker import template as tpl
from ..maker.fs import expand, make_dirs
from ..maker.logging import banner, get_logger
from ..maker.shell import external


log = get_logger("targets.production")

# File order matters: each file may depend on globals defined by earlier ones.
SRC_FILES = (
    "core.js",
    "util.js",
    "canvas.js",
    "obj.js",
    "function.js",
    "charsets.js",
    "cidmaps.js",
    "colorspace.js",
    "crypto.js",
    "evaluator.js",
    "fonts.js",
    "glyphlist.js",
    "image.js",
    "metrics.js",
    "parser.js",
    "pattern.js",
    "stream.js",
    "worker.js",
    "../external/jpgjs/jpg.js",
    "jpx.js",
    "bidi.js",
)


def bundle_version(ctx: BuildContext) -> str:
    """Short hash of the most recent commit."""
    git = external("git", required=True, silent=True)
    out = git.run(["log", "--format=%h", "-n", "1"], cwd=ctx.root_dir).output
    return out.strip()


@target(name="production")
def production(ctx: BuildContext) -> None:
    """Create production output (pdf.js and the production viewer)."""
    bundle(ctx)
    viewer(ctx)


@target(name="bundle")
def bundle(ctx: BuildContext) -> None:
    """Bundle all source files into build/pdf.js, in the given order."""
    banner(log, "Bundling files into pdf.js")

    src_dir = ctx.root_dir / "src"
    version = bundle_version(ctx)
    sources = [
        tpl.read_text(p) for p in expand(SRC_FILES, cwd=src_dir)
    ]

    make_dirs(ctx.build_dir)
    tpl.render(
        src_dir / "pdf.js",
        ctx.build_target,
        partial(tpl.replace_first, marker=tpl.INCLUDE_ALL, replacement="".join(sources)),
        partial(tpl.replace_token, token=tpl.BUNDLE_VER, value=version),
    )
    log.info("Bundle written to %s (version %s)", ctx.build_target, version)


@target(name="viewer")
def viewer(ctx: BuildContext) -> None:
    """Generate web/viewer-production.html using only pdf.js."""
    banner(log, "Generating production-level viewer")

    web_dir = ctx.root_dir / "web"
    snippet = tpl.read_text(web_dir / "viewer-snippet.html")
    tpl.render(
        web_dir / "viewer.html",
        web_dir / "viewer-production.html",
        partial(tpl.remove_all, marker=tpl.REMOVE_CORE),
        partial(tpl.replace_all, marker=tpl.INCLUDE_BUILD, replacement=snippet),
    )
