from __future__ import annotations


class MakeError(RuntimeError):
    """Base class for failures that abort the current make invocation."""


class ToolNotFoundError(MakeError):
    def __init__(self, tool: str):
        super().__init__(f"Required tool not found on PATH: {tool}")
        self.tool = tool


class MissingInputError(MakeError):
    pass


class CommandError(MakeError):
    def __init__(self, cmd: list[str], result):
        output = (result.output or "").strip()
        msg = f"Command failed ({result.code}): {' '.join(cmd)}"
        if output:
            msg += f"\n\n{output}"
        super().__init__(msg)
        self.cmd = cmd
        self.result = result
