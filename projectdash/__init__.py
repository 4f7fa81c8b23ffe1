"""Public package surface for projectdash.

Exports ``ProjectDashApp`` for front ends that drive the project navigator.
Most implementation lives in submodules under ``projectdash``.
"""

from __future__ import annotations


def __getattr__(name: str):
    """Lazily import the app wiring to keep package imports lightweight."""
    if name == "ProjectDashApp":
        from .runtime.app import ProjectDashApp

        return ProjectDashApp
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = ["ProjectDashApp"]
