"""
Analyzers: independent signal sources that propose a classification for a file.

cleansift/src/cleansift/analyzers/__init__.py
"""

from .base import (
    AnalysisOutcome,
    Analyzer,
    AnalyzerKind,
    AttributedResult,
    BaseAnalyzer,
    to_outcome,
)
from .dependency import DependencyAnalyzer
from .pattern import PatternAnalyzer
from .references import ReferenceIndex
from .registry import get_all_analyzers, get_analyzer, register_analyzer
from .usage import UsageAnalyzer

__all__ = [
    "AnalysisOutcome",
    "Analyzer",
    "AnalyzerKind",
    "AttributedResult",
    "BaseAnalyzer",
    "DependencyAnalyzer",
    "PatternAnalyzer",
    "ReferenceIndex",
    "UsageAnalyzer",
    "get_all_analyzers",
    "get_analyzer",
    "register_analyzer",
    "to_outcome",
]
