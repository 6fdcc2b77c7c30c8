"""Build target modules live here.

Each module groups related targets and decorates them with
`@maker.target(name=...)`. Targets take the run's `BuildContext` and call
the targets they depend on directly.
"""
