"""Thin wrappers over the external tools the targets drive.

Every process, sync or async, reports a `CommandResult`. Synchronous runs
raise `CommandError` on a non-zero exit; spawned jobs hand their result to an
optional callback and never raise.
"""

from __future__ import annotations

import shutil
import subprocess
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional, Sequence

from .errors import CommandError, MakeError, ToolNotFoundError
from .logging import get_logger


log = get_logger("maker.shell")


@dataclass(frozen=True)
class CommandResult:
    code: int
    output: str = ""

    @property
    def ok(self) -> bool:
        return self.code == 0


ExitCallback = Callable[[CommandResult], None]


class Job:
    """A spawned process. Waiting is optional; the process outlives the target."""

    def __init__(self, proc: subprocess.Popen, on_exit: Optional[ExitCallback] = None):
        self.proc = proc
        self._on_exit = on_exit
        self._result: Optional[CommandResult] = None
        self._watcher = threading.Thread(target=self._watch, name=f"job-{proc.pid}")
        self._watcher.start()

    def _watch(self) -> None:
        out, _ = self.proc.communicate()
        self._result = CommandResult(code=self.proc.returncode, output=out or "")
        if self._on_exit is not None:
            self._on_exit(self._result)

    @property
    def pid(self) -> int:
        return self.proc.pid

    def wait(self) -> CommandResult:
        self._watcher.join()
        if self._result is None:
            raise MakeError(f"Process {self.proc.pid} ended without reporting a result")
        return self._result


class ExternalTool:
    def __init__(self, name: str, path: str, silent: bool = False):
        self.name = name
        self.path = path
        self.silent = silent

    def __repr__(self) -> str:
        return f"ExternalTool({self.name!r}, {self.path!r})"

    def _popen_kwargs(self) -> dict:
        if self.silent:
            return {"stdout": subprocess.PIPE, "stderr": subprocess.STDOUT, "text": True}
        return {"text": True}

    def run(self, args: Sequence[str] = (), cwd: str | Path | None = None) -> CommandResult:
        cmd = [self.path, *args]
        log.debug("run: %s (cwd=%s)", " ".join(cmd), cwd)
        proc = subprocess.run(cmd, cwd=cwd, **self._popen_kwargs())
        result = CommandResult(code=proc.returncode, output=proc.stdout or "")
        if not result.ok:
            raise CommandError([self.name, *args], result)
        return result

    def spawn(
        self,
        args: Sequence[str] = (),
        cwd: str | Path | None = None,
        on_exit: Optional[ExitCallback] = None,
    ) -> Job:
        cmd = [self.path, *args]
        log.debug("spawn: %s (cwd=%s)", " ".join(cmd), cwd)
        proc = subprocess.Popen(cmd, cwd=cwd, **self._popen_kwargs())
        return Job(proc, on_exit=on_exit)


def external(name: str, required: bool = True, silent: bool = False) -> Optional[ExternalTool]:
    """Resolve `name` on PATH.

    A missing required tool raises `ToolNotFoundError`; targets call this before
    touching the filesystem so an abort never leaves half-written output.
    """
    path = shutil.which(name)
    if path is None:
        if required:
            raise ToolNotFoundError(name)
        log.warning("Optional tool not found: %s", name)
        return None
    return ExternalTool(name, path, silent=silent)


def count_lines(output: str) -> int:
    return sum(1 for line in output.splitlines() if line.strip())
