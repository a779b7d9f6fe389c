"""
Analyzer contract for cleansift.

An analyzer is an independent signal source: it inspects one file and
proposes a ClassificationResult. Each analyzer declares a focus label
(``category``), an ordering ``priority`` and an explicit weight class
(``kind``) that the fusion engine uses for weighting.

cleansift/src/cleansift/analyzers/base.py
"""

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import NamedTuple, Optional, Protocol, Union, runtime_checkable

from ..models import ClassificationResult

logger = logging.getLogger(__name__)

__all__ = [
    "AnalyzerKind",
    "Analyzer",
    "BaseAnalyzer",
    "AnalysisOutcome",
    "AttributedResult",
    "AnalyzerReturn",
    "to_outcome",
]


class AnalyzerKind(Enum):
    """Weight class of an analyzer."""

    DEPENDENCY = "dependency"
    USAGE = "usage"
    FUNCTIONAL = "functional"
    PATTERN = "pattern"
    UNKNOWN = "unknown"

    @classmethod
    def infer(cls, result: ClassificationResult) -> "AnalyzerKind":
        """
        Guess which kind of analyzer produced an unattributed result.

        Looks at metadata keys first, then at keywords in the reasons.
        Only used for results that reach the engine without an
        AttributedResult wrapper.
        """
        metadata = result.metadata
        for kind, keys in _METADATA_HINTS:
            if any(key in metadata for key in keys):
                return kind

        reasons_text = " ".join(result.reasons)
        for kind, words in _REASON_HINTS:
            if any(word in reasons_text for word in words):
                return kind

        return cls.UNKNOWN


_METADATA_HINTS = (
    (AnalyzerKind.DEPENDENCY, ("is_psr4_file", "dependency_count")),
    (AnalyzerKind.USAGE, ("asset_references", "api_endpoints")),
    (AnalyzerKind.FUNCTIONAL, ("functional_role", "layer")),
    (AnalyzerKind.PATTERN, ("pattern_type", "file_type")),
)

_REASON_HINTS = (
    (AnalyzerKind.DEPENDENCY, ("PSR-4", "dependency")),
    (AnalyzerKind.USAGE, ("referenced", "usage")),
    (AnalyzerKind.FUNCTIONAL, ("functional", "role")),
    (AnalyzerKind.PATTERN, ("pattern", "matches")),
)


class AttributedResult(NamedTuple):
    """A result together with the analyzer that produced it."""

    analyzer: str
    kind: AnalyzerKind
    result: ClassificationResult


@dataclass(frozen=True)
class AnalysisOutcome:
    """
    Explicit outcome of running one analyzer on one file.

    Exactly one of ``result`` and ``error`` is set for success and failure;
    neither is set when the analyzer declined the file.
    """

    analyzer: str
    kind: AnalyzerKind
    result: Optional[ClassificationResult] = None
    error: Optional[str] = None

    @classmethod
    def success(
        cls, analyzer: str, kind: AnalyzerKind, result: ClassificationResult
    ) -> "AnalysisOutcome":
        return cls(analyzer=analyzer, kind=kind, result=result)

    @classmethod
    def failure(cls, analyzer: str, kind: AnalyzerKind, error: str) -> "AnalysisOutcome":
        return cls(analyzer=analyzer, kind=kind, error=error)

    @classmethod
    def declined(cls, analyzer: str, kind: AnalyzerKind) -> "AnalysisOutcome":
        return cls(analyzer=analyzer, kind=kind)

    @property
    def ok(self) -> bool:
        return self.result is not None

    @property
    def failed(self) -> bool:
        return self.error is not None

    def attributed(self) -> AttributedResult:
        if self.result is None:
            raise ValueError(f"Analyzer '{self.analyzer}' produced no result")
        return AttributedResult(self.analyzer, self.kind, self.result)


AnalyzerReturn = Union[ClassificationResult, AnalysisOutcome, None]


@runtime_checkable
class Analyzer(Protocol):
    """Protocol for analyzer classes."""

    category: str
    priority: int
    kind: AnalyzerKind

    def can_analyze(self, file_path: str) -> bool:
        """Whether this analyzer handles the given relative path."""
        ...

    def analyze(self, file_path: str) -> AnalyzerReturn:
        """Classify a file, report an explicit failure, or return None to decline."""
        ...


class BaseAnalyzer:
    """Base class for analyzers."""

    category: str = ""
    description: str = ""
    priority: int = 50
    kind: AnalyzerKind = AnalyzerKind.UNKNOWN

    def __init__(self, project_root: Optional[Path] = None):
        self.project_root = Path(project_root) if project_root is not None else None

    def can_analyze(self, file_path: str) -> bool:
        return True

    def analyze(self, file_path: str) -> AnalyzerReturn:
        raise NotImplementedError

    def run(self, file_path: str) -> AnalysisOutcome:
        """
        Analyze a file and wrap whatever happens in an AnalysisOutcome.

        Any exception, including a ClassificationError from building an
        invalid result, becomes a failure outcome for this analyzer only.
        """
        try:
            produced = self.analyze(file_path)
        except Exception as e:
            return AnalysisOutcome.failure(self.category, self.kind, f"{type(e).__name__}: {e}")
        return to_outcome(self, produced)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(category={self.category!r}, priority={self.priority})"


def to_outcome(analyzer: Analyzer, produced: AnalyzerReturn) -> AnalysisOutcome:
    """Normalize an analyzer's return value into an AnalysisOutcome."""
    name = getattr(analyzer, "category", type(analyzer).__name__)
    kind = getattr(analyzer, "kind", AnalyzerKind.UNKNOWN)
    if isinstance(produced, AnalysisOutcome):
        return produced
    if produced is None:
        return AnalysisOutcome.declined(name, kind)
    if isinstance(produced, ClassificationResult):
        return AnalysisOutcome.success(name, kind, produced)
    logger.debug(f"Analyzer '{name}' returned unsupported value of type {type(produced).__name__}")
    return AnalysisOutcome.failure(
        name, kind, f"unsupported return type {type(produced).__name__}"
    )
