"""Build orchestrator for pdf.js.

Provides the target registry, the build context passed to every target, and
small wrappers over the external tools (git, zip, make, gjslint) the targets
sequence. Targets themselves live in the `targets` package.
"""

from .config import BuildContext, load_context
from .core import TargetSpec, target  # re-export for convenience

__all__ = ["BuildContext", "TargetSpec", "load_context", "target"]
