from __future__ import annotations

from pathlib import Path

import pytest

from src.maker.config import load_context
from src.maker.errors import CommandError, ToolNotFoundError
from src.maker.shell import CommandResult
from src.targets import devtools, extension, production, testing, website
from src.targets.production import SRC_FILES


TARGET_MODULES = (production, extension, website, testing, devtools)

PDF_JS_TEMPLATE = """\
/* pdf.js wrapper */
var PDFJS = {};
PDFJS.build = 'PDFJSSCRIPT_BUNDLE_VER';
  // PDFJSSCRIPT_INCLUDE_ALL
/* end wrapper */
"""

VIEWER_HTML = """\
<!DOCTYPE html>
<html>
  <head>
    <script type="text/javascript" src="../src/core.js"></script> <!-- PDFJSSCRIPT_REMOVE_CORE -->
    <script type="text/javascript" src="../src/util.js"></script> <!-- PDFJSSCRIPT_REMOVE_CORE -->
    <!-- PDFJSSCRIPT_INCLUDE_BUILD -->
    <script type="text/javascript" src="compatibility.js"></script> <!-- PDFJSSCRIPT_REMOVE_FIREFOX_EXTENSION -->
    <!-- PDFJSSCRIPT_INCLUDE_FIREFOX_EXTENSION -->
    <script type="text/javascript" src="viewer.js"></script>
  </head>
</html>
"""

INSTALL_RDF = """\
<RDF>
  <em:version>0.2.PDFJSSCRIPT_BUILD</em:version>
  <em:updateURL>https://mozilla.github.com/pdf.js/extensions/firefox/update.rdf</em:updateURL>
</RDF>
"""


class FakeJob:
    def __init__(self, result: CommandResult, on_exit=None):
        self.result = result
        if on_exit is not None:
            on_exit(result)

    def wait(self) -> CommandResult:
        return self.result


class FakeTool:
    def __init__(self, name: str, handler=None):
        self.name = name
        self.handler = handler
        self.calls: list[tuple[list[str], Path | None]] = []
        self.spawned: list[tuple[list[str], Path | None]] = []

    def _result(self, args, cwd) -> CommandResult:
        if self.handler is None:
            return CommandResult(0, "")
        return self.handler(args, Path(cwd) if cwd else None)

    def run(self, args=(), cwd=None) -> CommandResult:
        args = list(args)
        self.calls.append((args, Path(cwd) if cwd else None))
        result = self._result(args, cwd)
        if not result.ok:
            raise CommandError([self.name, *args], result)
        return result

    def spawn(self, args=(), cwd=None, on_exit=None) -> FakeJob:
        args = list(args)
        self.spawned.append((args, Path(cwd) if cwd else None))
        return FakeJob(self._result(args, cwd), on_exit)


class FakeToolbox:
    """Stands in for `shell.external` inside the target modules."""

    def __init__(self):
        self.tools: dict[str, FakeTool] = {}
        self.missing: set[str] = set()
        self.archives: list[tuple[str, dict[str, bytes]]] = []

    def __getitem__(self, name: str) -> FakeTool:
        if name not in self.tools:
            self.tools[name] = FakeTool(name)
        return self.tools[name]

    def external(self, name: str, required: bool = True, silent: bool = False):
        if name in self.missing:
            if required:
                raise ToolNotFoundError(name)
            return None
        return self[name]


def git_handler(revision: str = "abc1234", commits: int = 3):
    def handle(args, cwd):
        if args[:2] == ["log", "--format=%h"]:
            return CommandResult(0, revision + "\n")
        if args[:2] == ["log", "--format=oneline"]:
            lines = "".join(f"{i:040x} commit {i}\n" for i in range(commits))
            return CommandResult(0, lines)
        if args and args[0] == "clone":
            dest = Path(args[-1])
            (dest / ".git").mkdir(parents=True)
            (dest / "index.html").write_text("old site\n")
            (dest / "web").mkdir()
            (dest / "web" / "stale.js").write_text("stale\n")
        return CommandResult(0, "")

    return handle


def zip_handler(archives: list):
    """Record the file tree each archive would contain."""

    def handle(args, cwd):
        name, items = args[1], args[2:]
        tree: dict[str, bytes] = {}
        for item in items:
            p = cwd / item
            files = [p] if p.is_file() else sorted(x for x in p.rglob("*") if x.is_file())
            for f in files:
                tree[f.relative_to(cwd).as_posix()] = f.read_bytes()
        archives.append((name, tree))
        (cwd / name).write_bytes(b"PK")
        return CommandResult(0, "")

    return handle


@pytest.fixture
def toolbox(monkeypatch) -> FakeToolbox:
    box = FakeToolbox()
    box["git"].handler = git_handler()
    box["zip"].handler = zip_handler(box.archives)
    for mod in TARGET_MODULES:
        monkeypatch.setattr(mod, "external", box.external)
    return box


def _write(path: Path, text: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text)


@pytest.fixture
def project(tmp_path: Path) -> Path:
    """A minimal pdf.js checkout: sources, viewer, extensions and tests."""
    root = tmp_path / "pdf.js"
    src = root / "src"
    _write(src / "pdf.js", PDF_JS_TEMPLATE)
    for name in SRC_FILES:
        _write(src / name, f"// {Path(name).name}\nvar {Path(name).stem.replace('.', '_')} = 1;\n")

    web = root / "web"
    _write(web / "viewer.html", VIEWER_HTML)
    _write(web / "viewer-snippet.html", '<script type="text/javascript" src="../build/pdf.js"></script>\n')
    _write(
        web / "viewer-snippet-firefox-extension.html",
        "<script type=\"text/javascript\">\n// PDFJSSCRIPT_INCLUDE_BUNDLE\n</script>\n",
    )
    _write(web / "viewer.css", "body { margin: 0; }\n")
    _write(web / "viewer.js", "var PDFView = {};\n")
    _write(web / "compatibility.js", "// shims\n")
    (web / "images").mkdir()
    (web / "images" / "loading-icon.gif").write_bytes(b"GIF89a")

    ff = root / "extensions" / "firefox"
    _write(ff / "bootstrap.js", "function startup() {}\n")
    _write(ff / "install.rdf", INSTALL_RDF)
    _write(ff / "update.rdf", "<RDF><em:version>0.2.PDFJSSCRIPT_BUILD</em:version></RDF>\n")
    _write(ff / "components" / "PdfStreamConverter.js", "var converter;\n")

    chrome = root / "extensions" / "chrome"
    _write(chrome / "manifest.json", '{\n  "name": "pdf.js",\n  "version": "0.2.PDFJSSCRIPT_BUILD"\n}\n')
    _write(chrome / "pdfHandler.html", "<script src=\"pdfHandler.js\"></script>\n")
    _write(chrome / "pdfHandler.js", "// handler\n")

    _write(root / "test" / "test.py", "# harness\n")
    _write(root / "test" / "driver.js", "var driver;\n")
    _write(root / "test" / "unit" / "Makefile", "all:\n")
    return root


@pytest.fixture
def ctx(project: Path, monkeypatch):
    monkeypatch.delenv("PDF_TEST", raising=False)
    monkeypatch.delenv("PDF_BROWSERS", raising=False)
    return load_context(project)
