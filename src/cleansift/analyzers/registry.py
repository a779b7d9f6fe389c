"""
Analyzer registry for cleansift.

Built-in analyzers register themselves on import; third-party analyzers
are picked up from the ``cleansift.analyzers`` entry-point group the first
time the registry is read.

cleansift/src/cleansift/analyzers/registry.py
"""

import logging
from typing import Dict, Optional

logger = logging.getLogger(__name__)

__all__ = ["register_analyzer", "get_analyzer", "get_all_analyzers"]

_ANALYZERS: Dict[str, type] = {}
_entry_points_loaded = False


def register_analyzer(analyzer_class: type) -> type:
    """Register an analyzer class under its ``category`` label. Usable as a decorator."""
    name = getattr(analyzer_class, "category", "")
    if not name:
        raise ValueError(f"Analyzer class {analyzer_class.__name__} has no category label")
    _ANALYZERS[name] = analyzer_class
    return analyzer_class


def get_analyzer(name: str) -> Optional[type]:
    """Get analyzer class by category label."""
    _ensure_loaded()
    return _ANALYZERS.get(name)


def get_all_analyzers() -> Dict[str, type]:
    """Get all registered analyzer classes."""
    _ensure_loaded()
    return _ANALYZERS.copy()


def _ensure_loaded() -> None:
    global _entry_points_loaded
    if _entry_points_loaded:
        return
    _entry_points_loaded = True

    # built-ins register on import
    from . import dependency, pattern, usage  # noqa: F401

    _load_entry_point_analyzers()


def _load_entry_point_analyzers() -> None:
    """Load analyzers advertised by installed distributions."""
    import importlib.metadata

    for entry_point in importlib.metadata.entry_points(group="cleansift.analyzers"):
        try:
            analyzer_class = entry_point.load()
            if getattr(analyzer_class, "category", ""):
                _ANALYZERS.setdefault(analyzer_class.category, analyzer_class)
        except (ImportError, AttributeError, TypeError) as e:
            logger.warning(
                f"Failed to load analyzer '{entry_point.name}' from entry point {entry_point.value}: {e}"
            )
