from __future__ import annotations

"""Build context: the paths and settings shared by every target in one run."""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict

import yaml
from dotenv import load_dotenv

from .errors import MakeError

load_dotenv()


DEFAULT_REPO = "git@github.com:mozilla/pdf.js.git"
# Build numbers count commits made after this revision
DEFAULT_BASE_VERSION = "4bb289ec499013de66eb421737a4dbb4a9273eda"
DEFAULT_TEST_MANIFEST = "test_manifest.json"
DEFAULT_BROWSER_MANIFEST = "resources/browser_manifests/browser_manifest.json"


def _get(d: Dict, *keys, default=None):
    cur = d
    for k in keys:
        if not isinstance(cur, dict):
            return default
        cur = cur.get(k)
        if cur is None:
            return default
    return cur


@dataclass
class BuildContext:
    root_dir: Path
    build_dir: Path
    gh_pages_dir: Path
    repo_url: str = DEFAULT_REPO
    pages_branch: str = "gh-pages"
    extension_base_version: str = DEFAULT_BASE_VERSION
    python: str = "python2.7"
    server_port: int = 8888
    test_manifest: str = DEFAULT_TEST_MANIFEST
    browser_manifest: str = DEFAULT_BROWSER_MANIFEST
    log_file: Path | None = None
    build_number: int | None = None

    @property
    def build_target(self) -> Path:
        return self.build_dir / "pdf.js"

    @property
    def extension_src(self) -> Path:
        return self.root_dir / "extensions"

    @property
    def firefox_build_dir(self) -> Path:
        return self.build_dir / "firefox"

    @property
    def chrome_build_dir(self) -> Path:
        return self.build_dir / "chrome"

    def require_build_number(self) -> int:
        if self.build_number is None:
            raise MakeError(
                "Extension build number has not been computed; run `buildnumber` first"
            )
        return self.build_number


def load_config(path: str | Path) -> dict:
    p = Path(path)
    if not p.exists():
        return {}
    with open(p, "r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def load_context(root: str | Path | None = None, config_path: str | Path | None = None) -> BuildContext:
    """Build the context once at startup from defaults, YAML config and env.

    `config_path` is resolved against `root` when relative. `PDF_TEST` and
    `PDF_BROWSERS` override the test manifest filenames.
    """
    root_dir = Path(root or os.getcwd()).resolve()
    params: dict = {}
    if config_path is not None:
        cp = Path(config_path)
        if not cp.is_absolute():
            cp = root_dir / cp
        params = load_config(cp)

    build_dir = root_dir / _get(params, "project", "build_dir", default="build")
    log_file = _get(params, "project", "log_file")
    return BuildContext(
        root_dir=root_dir,
        build_dir=build_dir,
        gh_pages_dir=build_dir / _get(params, "pages", "dir", default="gh-pages"),
        repo_url=_get(params, "pages", "repo", default=DEFAULT_REPO),
        pages_branch=_get(params, "pages", "branch", default="gh-pages"),
        extension_base_version=_get(
            params, "extension", "base_version", default=DEFAULT_BASE_VERSION
        ),
        python=_get(params, "test", "python", default="python2.7"),
        server_port=int(_get(params, "server", "port", default=8888)),
        test_manifest=os.getenv("PDF_TEST")
        or _get(params, "test", "manifest", default=DEFAULT_TEST_MANIFEST),
        browser_manifest=os.getenv("PDF_BROWSERS")
        or _get(params, "test", "browser_manifest", default=DEFAULT_BROWSER_MANIFEST),
        log_file=root_dir / log_file if log_file else None,
    )
