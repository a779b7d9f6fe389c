"""Library entry points that assemble an engine and scanner from configuration.

The CLI commands wrap these functions and handle formatting and exit codes.
"""

import logging
from pathlib import Path
from typing import Optional

from .analyzers.base import BaseAnalyzer
from .analyzers.registry import get_all_analyzers
from .config import Config, load_config
from .fusion import FusionEngine
from .progress import ProgressTracker
from .scanner import CodebaseScanner, ScanReport

__all__ = ["build_engine", "build_scanner", "scan_project"]

logger = logging.getLogger(__name__)


def build_engine(config: Config) -> FusionEngine:
    """Create a FusionEngine with the weights and critical patterns from ``config``."""
    engine = FusionEngine()
    try:
        engine.set_category_weights(config.category_weights)
        engine.set_analyzer_weights(config.analyzer_weights)
    except ValueError as e:
        logger.warning(f"Ignoring invalid weight configuration: {e}")
    for pattern in config.critical_patterns:
        engine.add_critical_pattern(pattern)
    return engine


def build_scanner(
    project_root: Path,
    config: Optional[Config] = None,
    progress: Optional[ProgressTracker] = None,
) -> CodebaseScanner:
    """Create a scanner for ``project_root`` with every enabled analyzer registered."""
    config = config if config is not None else load_config(project_root)
    scanner = CodebaseScanner(
        project_root,
        engine=build_engine(config),
        progress=progress,
        exclude_patterns=config.exclude_patterns,
        progress_log_interval=config.progress_log_interval,
    )

    available = get_all_analyzers()
    enabled = config.analyzers
    names = sorted(available) if enabled is None else enabled
    for name in names:
        analyzer_class = available.get(name)
        if analyzer_class is None:
            logger.warning(f"Unknown analyzer '{name}' in configuration; skipping")
            continue
        if issubclass(analyzer_class, BaseAnalyzer):
            scanner.add_analyzer(analyzer_class(project_root))
        else:
            scanner.add_analyzer(analyzer_class())
    return scanner


def scan_project(project_root: Path, progress: Optional[ProgressTracker] = None) -> ScanReport:
    """Scan ``project_root`` with the configuration found from it."""
    return build_scanner(Path(project_root), progress=progress).analyze_codebase()
