"""Website targets built on a checkout of the gh-pages branch.

`pagesrepo` only prepares the checkout: the clone is emptied because `web`
overwrites everything from the main repo and then stages with `git add -A`,
so additions, modifications, moves and deletions are all tracked.
"""

from __future__ import annotations

from ..maker import BuildContext, target
from ..maker.fs import clear_checkout, copy_into, make_dirs
from ..maker.logging import banner, get_logger
from ..maker.shell import external
from .extension import FIREFOX_EXTENSION_NAME, extension
from .production import production


log = get_logger("targets.website")

PAGES_SKELETON = ("web", "web/images", "build", "extensions/firefox")

WEBSITE_WEB_FILES = (
    "web/images",
    "web/compatibility.js",
    "web/viewer.css",
    "web/viewer.js",
    "web/viewer.html",
    "web/viewer-production.html",
)


@target(name="web")
def web(ctx: BuildContext) -> None:
    """Generate the website in build/gh-pages and stage it for commit."""
    git = external("git", required=True, silent=True)
    external("zip", required=True)

    production(ctx)
    extension(ctx)
    pagesrepo(ctx)

    banner(log, "Copying generated files into gh-pages")
    pages = ctx.gh_pages_dir
    copy_into([ctx.build_target.name], pages / "build", cwd=ctx.build_dir)
    copy_into(
        [p for p in WEBSITE_WEB_FILES if (ctx.root_dir / p).exists()],
        pages / "web",
        cwd=ctx.root_dir,
    )
    copy_into(
        [FIREFOX_EXTENSION_NAME, "update.rdf"],
        pages / "extensions" / "firefox",
        cwd=ctx.firefox_build_dir,
    )

    git.run(["add", "-A"], cwd=pages)
    log.info("Website built in %s", pages)
    log.info("Review the staged changes, then commit and push the %s branch.", ctx.pages_branch)


@target(name="pagesrepo")
def pagesrepo(ctx: BuildContext) -> None:
    """Clone the gh-pages branch into build/gh-pages and empty it."""
    banner(log, "Creating fresh clone of gh-pages")

    git = external("git", required=True, silent=True)
    pages = ctx.gh_pages_dir

    make_dirs(ctx.build_dir)

    if not pages.exists():
        log.info("Cloning project repo in %s...", pages)
        log.info("(This operation can take a while, depending on network conditions)")
        git.run(
            [
                "clone",
                "-b",
                ctx.pages_branch,
                "--single-branch",
                "--depth=1",
                ctx.repo_url,
                str(pages),
            ],
            cwd=ctx.root_dir,
        )
        log.info("Done.")
        clear_checkout(pages)

    make_dirs(*(pages / d for d in PAGES_SKELETON))
