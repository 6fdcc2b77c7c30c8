from __future__ import annotations

import importlib
import pkgutil
from dataclasses import dataclass
from typing import Callable, Dict, Iterable

from .config import BuildContext
from .logging import get_logger


CATCH_ALL = "all"
TARGETS_PACKAGE = "src.targets"

log = get_logger("maker.core")


@dataclass
class TargetSpec:
    name: str
    fn: Callable[[BuildContext], None]
    help: str = ""


def target(name: str, help: str = ""):
    """Decorator to declare a build target on a function.

    The wrapped function takes the run's `BuildContext` and is returned
    unchanged, so targets depend on each other by calling one another
    directly. Nothing is memoized: a target called twice runs twice.
    """

    def deco(fn: Callable[[BuildContext], None]):
        doc = (fn.__doc__ or "").strip().splitlines()
        spec = TargetSpec(name=name, fn=fn, help=help or (doc[0] if doc else ""))
        setattr(fn, "_target_spec", spec)
        return fn

    return deco


def collect_targets(modules: Iterable[object]) -> Dict[str, TargetSpec]:
    specs: Dict[str, TargetSpec] = {}
    for mod in modules:
        for attr_name in dir(mod):
            obj = getattr(mod, attr_name)
            spec = getattr(obj, "_target_spec", None)
            if isinstance(spec, TargetSpec):
                specs[spec.name] = spec
    return specs


def discover_targets(package: str = TARGETS_PACKAGE) -> Dict[str, TargetSpec]:
    """Import all modules in the targets package and collect decorated functions."""
    pkg = importlib.import_module(package)
    modules = [
        importlib.import_module(m.name)
        for m in pkgutil.iter_modules(pkg.__path__, prefix=f"{package}.")
    ]
    return collect_targets(modules)


def list_targets(specs: Dict[str, TargetSpec]) -> list[str]:
    return sorted(n for n in specs if n != CATCH_ALL)


def is_runnable(specs: Dict[str, TargetSpec], name: str | None) -> bool:
    return bool(name) and name != CATCH_ALL and name in specs


def run_target(specs: Dict[str, TargetSpec], name: str, ctx: BuildContext) -> None:
    """Run a registered target synchronously. Raises KeyError for unknown names."""
    if not is_runnable(specs, name):
        raise KeyError(f"Unknown target: {name}")
    log.debug("Run target: %s", name)
    specs[name].fn(ctx)
