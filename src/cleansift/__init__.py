"""Cleansift: multi-analyzer file classification for codebase cleanup.

Runs a set of analyzers over every file of a project and fuses their
verdicts into one essential / non-essential / uncertain classification
with a confidence score and a recommended action.
"""

from cleansift.analyzers import (
    AnalysisOutcome,
    AnalyzerKind,
    AttributedResult,
    BaseAnalyzer,
    DependencyAnalyzer,
    PatternAnalyzer,
    UsageAnalyzer,
    register_analyzer,
)
from cleansift.api import build_engine, build_scanner, scan_project
from cleansift.config import Config, load_config
from cleansift.fusion import FusionEngine
from cleansift.models import (
    Category,
    ClassificationError,
    ClassificationResult,
    PriorityLevel,
    RecommendedAction,
)
from cleansift.progress import ProgressTracker
from cleansift.scanner import CodebaseScanner, ScanReport

__version__ = "0.1.0"

__all__ = [
    # Data model
    "Category",
    "RecommendedAction",
    "PriorityLevel",
    "ClassificationResult",
    "ClassificationError",
    # Analyzers
    "AnalyzerKind",
    "AnalysisOutcome",
    "AttributedResult",
    "BaseAnalyzer",
    "PatternAnalyzer",
    "DependencyAnalyzer",
    "UsageAnalyzer",
    "register_analyzer",
    # Pipeline
    "FusionEngine",
    "CodebaseScanner",
    "ScanReport",
    "ProgressTracker",
    # Configuration
    "Config",
    "load_config",
    "build_engine",
    "build_scanner",
    "scan_project",
]
