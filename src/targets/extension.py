"""Browser extension packaging for Firefox and Chrome.

Both targets rebuild their tree under `build/<browser>` from scratch:
clear the directory, copy the extension and viewer files, apply the
platform's template passes, stamp the build number and zip the result.
Firefox ships pdf.js inlined into the viewer; Chrome keeps it as
`content/build/pdf.js`.
"""

from __future__ import annotations

from functools import partial

from ..maker import BuildContext, target
from ..maker import template as tpl
from ..maker.errors import MissingInputError
from ..maker.fs import clean_dir, copy_into, expand, make_dirs, remove
from ..maker.logging import banner, get_logger
from ..maker.shell import count_lines, external
from .production import production


log = get_logger("targets.extension")

EXTENSION_WEB_FILES = (
    "web/images",
    "web/viewer.css",
    "web/viewer.js",
    "web/viewer.html",
    "web/viewer-production.html",
)

FIREFOX_EXTENSION_FILES_TO_COPY = ("*.js", "*.rdf", "components")
FIREFOX_EXTENSION_FILES = ("content", "*.js", "install.rdf", "components")
FIREFOX_EXTENSION_NAME = "pdf.js.xpi"
FIREFOX_AMO_EXTENSION_NAME = "pdf.js.amo.xpi"
FIREFOX_SNIPPET = "viewer-snippet-firefox-extension.html"
# Only the self-hosted xpi may point Firefox at our update manifest
AMO_STRIPPED_FIELD = "updateURL"

CHROME_EXTENSION_FILES = ("extensions/chrome/*.json", "extensions/chrome/*.html")
CHROME_EXTENSION_FILES_TO_ZIP = ("content", "*.json", "*.html")
CHROME_EXTENSION_NAME = "pdf.js.chrome.zip"


@target(name="extension")
def extension(ctx: BuildContext) -> None:
    """Build the Firefox and Chrome extensions."""
    banner(log, "Building extensions")
    external("zip", required=True)
    external("git", required=True)

    production(ctx)
    firefox(ctx)
    chrome(ctx)


@target(name="buildnumber")
def buildnumber(ctx: BuildContext) -> None:
    """Count commits since the extension base version."""
    banner(log, "Getting extension build number")

    git = external("git", required=True, silent=True)
    out = git.run(
        ["log", "--format=oneline", f"{ctx.extension_base_version}.."],
        cwd=ctx.root_dir,
    ).output
    ctx.build_number = count_lines(out)
    log.info("Extension build number: %d", ctx.build_number)


def _stamp_build(ctx: BuildContext, *manifests) -> None:
    number = ctx.require_build_number()
    for path in manifests:
        if not path.exists():
            raise MissingInputError(f"Manifest to stamp not found: {path}")
        tpl.rewrite(path, partial(tpl.replace_token, token=tpl.BUILD, value=number))


def _zip(zip_tool, build_dir, name: str, patterns) -> None:
    files = [p.name for p in expand(patterns, cwd=build_dir)]
    (build_dir / name).unlink(missing_ok=True)
    zip_tool.run(["-r", name, *files], cwd=build_dir)


@target(name="firefox")
def firefox(ctx: BuildContext) -> None:
    """Build the Firefox xpi and its AMO variant."""
    banner(log, "Building Firefox extension")

    zip_tool = external("zip", required=True, silent=True)
    external("git", required=True)

    build_dir = ctx.firefox_build_dir
    content = build_dir / "content"
    web = content / "web"

    production(ctx)
    buildnumber(ctx)

    clean_dir(build_dir)
    make_dirs(content / "build", web)

    copy_into(FIREFOX_EXTENSION_FILES_TO_COPY, build_dir, cwd=ctx.extension_src / "firefox")

    # Standalone pdf.js goes in first so it can be inlined into the snippet
    copy_into([ctx.build_target.name], content / "build", cwd=ctx.build_dir)
    copy_into(EXTENSION_WEB_FILES, web, cwd=ctx.root_dir)
    remove(web / "viewer-production.html")
    copy_into([f"web/{FIREFOX_SNIPPET}"], web, cwd=ctx.root_dir)

    bundle_text = tpl.read_text(content / "build" / "pdf.js")
    tpl.rewrite(
        web / FIREFOX_SNIPPET,
        partial(tpl.replace_first, marker=tpl.INCLUDE_BUNDLE, replacement=bundle_text),
    )
    viewer_html = web / "viewer.html"
    tpl.rewrite(viewer_html, partial(tpl.remove_all, marker=tpl.REMOVE_CORE))
    tpl.rewrite(viewer_html, partial(tpl.remove_all, marker=tpl.REMOVE_FIREFOX_EXTENSION))
    tpl.rewrite(
        viewer_html,
        partial(
            tpl.replace_first,
            marker=tpl.INCLUDE_FIREFOX_EXTENSION,
            replacement=tpl.read_text(web / FIREFOX_SNIPPET),
        ),
    )

    # pdf.js is inlined now
    remove(content / "build")

    _stamp_build(ctx, build_dir / "install.rdf", build_dir / "update.rdf")

    _zip(zip_tool, build_dir, FIREFOX_EXTENSION_NAME, FIREFOX_EXTENSION_FILES)
    log.info("extension created: %s", FIREFOX_EXTENSION_NAME)

    tpl.rewrite(build_dir / "install.rdf", partial(tpl.remove_first, marker=AMO_STRIPPED_FIELD))
    _zip(zip_tool, build_dir, FIREFOX_AMO_EXTENSION_NAME, FIREFOX_EXTENSION_FILES)
    log.info("AMO extension created: %s", FIREFOX_AMO_EXTENSION_NAME)


@target(name="chrome")
def chrome(ctx: BuildContext) -> None:
    """Build the Chrome extension."""
    banner(log, "Building Chrome extension")

    zip_tool = external("zip", required=True, silent=True)
    external("git", required=True)

    build_dir = ctx.chrome_build_dir
    content = build_dir / "content"
    web = content / "web"

    production(ctx)
    buildnumber(ctx)

    clean_dir(build_dir)
    make_dirs(content / "build", web)

    copy_into(CHROME_EXTENSION_FILES, build_dir, cwd=ctx.root_dir)

    copy_into([ctx.build_target.name], content / "build", cwd=ctx.build_dir)
    copy_into(EXTENSION_WEB_FILES, web, cwd=ctx.root_dir)
    (web / "viewer-production.html").replace(web / "viewer.html")

    _stamp_build(ctx, build_dir / "manifest.json")

    _zip(zip_tool, build_dir, CHROME_EXTENSION_NAME, CHROME_EXTENSION_FILES_TO_ZIP)
    log.info("extension created: %s", CHROME_EXTENSION_NAME)
