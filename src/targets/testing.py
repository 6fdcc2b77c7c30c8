"""Test targets. Both launchers spawn their runner and return without waiting."""

from __future__ import annotations

from ..maker import BuildContext, target
from ..maker.errors import MissingInputError
from ..maker.logging import banner, get_logger
from ..maker.shell import external


log = get_logger("targets.testing")


@target(name="test")
def test(ctx: BuildContext) -> None:
    """Run browser tests and unit tests."""
    browsertest(ctx)
    unittest(ctx)


@target(name="browsertest")
def browsertest(ctx: BuildContext) -> None:
    """Run the reference tests in the browsers from the browser manifest."""
    banner(log, "Running browser tests")

    python = external(ctx.python, required=True)
    test_dir = ctx.root_dir / "test"
    manifest = test_dir / ctx.browser_manifest

    if not manifest.exists():
        log.error("Browser manifest file test/%s does not exist.", ctx.browser_manifest)
        log.error("Try copying one of the examples in test/resources/browser_manifests/")
        raise MissingInputError(f"Missing browser manifest: {manifest}")

    python.spawn(
        [
            "test.py",
            "--reftest",
            f"--browserManifestFile={ctx.browser_manifest}",
            f"--manifestFile={ctx.test_manifest}",
        ],
        cwd=test_dir,
    )


@target(name="unittest")
def unittest(ctx: BuildContext) -> None:
    """Build and run the unit tests with make."""
    banner(log, "Running unit tests")

    make = external("make", required=True)
    make.spawn([], cwd=ctx.root_dir / "test" / "unit")
