"""
Codebase scanner: runs every applicable analyzer over every file of a
project and fuses their verdicts.

Files are processed one at a time and analyzers run one at a time in
descending priority. A failing analyzer only loses its own contribution
for that one file.

cleansift/src/cleansift/scanner.py
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence, Tuple

from .analyzers.base import (
    AnalysisOutcome,
    Analyzer,
    AnalyzerKind,
    AttributedResult,
    to_outcome,
)
from .discovery import DEFAULT_EXCLUDE_PATTERNS, discover_files
from .fusion import FusionEngine
from .models import Category, ClassificationResult, RecommendedAction
from .progress import ProgressTracker

__all__ = ["CodebaseScanner", "ScanReport"]

logger = logging.getLogger(__name__)

FileLister = Callable[[Path, Sequence[str]], List[str]]

REASON_MISSING_FILE = "File does not exist"
REASON_NO_ANALYZERS = "No applicable analyzers found"


@dataclass
class ScanReport:
    """Final verdict per relative path plus corpus-level tallies."""

    results: Dict[str, ClassificationResult] = field(default_factory=dict)

    @property
    def counts(self) -> Dict[str, int]:
        counts = {category.value: 0 for category in Category}
        for result in self.results.values():
            counts[result.category.value] += 1
        return counts

    @property
    def total(self) -> int:
        return len(self.results)

    @property
    def movable(self) -> List[ClassificationResult]:
        return [r for r in self.results.values() if r.can_be_moved]

    @property
    def needs_review(self) -> List[ClassificationResult]:
        return [r for r in self.results.values() if r.requires_review]

    def summary(self) -> Dict[str, int]:
        return {
            "total": self.total,
            **self.counts,
            "movable": len(self.movable),
            "needs_review": len(self.needs_review),
        }

    def to_dict(self) -> Dict[str, Any]:
        return {
            "summary": self.summary(),
            "results": {path: result.to_dict() for path, result in self.results.items()},
        }


class CodebaseScanner:
    """
    Registers analyzers and classifies every eligible file under a project root.

    Args:
        project_root: Directory the relative paths are resolved against.
        engine: Fusion engine; a default FusionEngine when omitted.
        logger: Sink for info/debug/warning messages.
        progress: Optional tracker updated as files complete.
        file_lister: Traversal collaborator returning relative paths for
            ``(root, exclude_patterns)``; defaults to discover_files.
        exclude_patterns: Extra excluded prefixes on top of the defaults.
        progress_log_interval: Log an info progress line every N files.
    """

    def __init__(
        self,
        project_root: Path,
        engine: Optional[FusionEngine] = None,
        logger: Optional[logging.Logger] = None,
        progress: Optional[ProgressTracker] = None,
        file_lister: Optional[FileLister] = None,
        exclude_patterns: Optional[Iterable[str]] = None,
        progress_log_interval: int = 50,
    ):
        self.project_root = Path(project_root)
        self.logger = logger or logging.getLogger(__name__)
        self.engine = engine or FusionEngine(logger=self.logger)
        self.progress = progress
        self._file_lister: FileLister = file_lister or discover_files
        self._exclude_patterns: List[str] = list(DEFAULT_EXCLUDE_PATTERNS)
        for pattern in exclude_patterns or ():
            self.add_exclude_pattern(pattern)
        self.progress_log_interval = max(1, progress_log_interval)
        self._analyzers: List[Analyzer] = []

    # --- Registration ---

    def add_analyzer(self, analyzer: Analyzer) -> None:
        """Register an analyzer, keeping analyzers ordered by descending priority."""
        self._analyzers.append(analyzer)
        # sorted() is stable, so equal priorities keep registration order
        self._analyzers = sorted(self._analyzers, key=lambda a: -a.priority)
        self.logger.info(f"Added analyzer: {analyzer.category}")

    @property
    def analyzers(self) -> Tuple[Analyzer, ...]:
        return tuple(self._analyzers)

    def add_exclude_pattern(self, pattern: str) -> None:
        if pattern not in self._exclude_patterns:
            self._exclude_patterns.append(pattern)

    @property
    def exclude_patterns(self) -> Tuple[str, ...]:
        return tuple(self._exclude_patterns)

    # --- Scanning ---

    def analyze_codebase(
        self, on_result: Optional[Callable[[str, ClassificationResult], None]] = None
    ) -> ScanReport:
        """
        Classify every non-excluded file under the project root.

        ``on_result`` is called after each file with its relative path and verdict.
        """
        self.logger.info(f"Starting codebase analysis of {self.project_root}")

        files = sorted(self._file_lister(self.project_root, self.exclude_patterns))
        total = len(files)
        if self.progress is not None:
            self.progress.set_current_operation("Analyzing files")
            self.progress.set_total(total)

        report = ScanReport()
        for processed, file_path in enumerate(files, start=1):
            self.logger.debug(f"Analyzing file {processed}/{total}: {file_path}")
            report.results[file_path] = self.analyze_file(file_path)

            if self.progress is not None:
                self.progress.increment()
            if on_result is not None:
                on_result(file_path, report.results[file_path])
            if processed % self.progress_log_interval == 0:
                self.logger.info(f"Progress: {processed}/{total} files analyzed")

        counts = report.counts
        self.logger.info(
            f"Codebase analysis complete: {total} files, "
            f"{counts[Category.ESSENTIAL.value]} essential, "
            f"{counts[Category.NON_ESSENTIAL.value]} non-essential, "
            f"{counts[Category.UNCERTAIN.value]} uncertain"
        )
        return report

    def analyze_file(self, file_path: str) -> ClassificationResult:
        """
        Classify one file with every applicable analyzer.

        Missing files short-circuit to an uncertain verdict without running
        any analyzer.
        """
        if not (self.project_root / file_path).exists():
            return self._uncertain(file_path, REASON_MISSING_FILE)

        collected: List[AttributedResult] = []
        for analyzer in self._analyzers:
            if not self._can_analyze(analyzer, file_path):
                continue

            outcome = self._run_analyzer(analyzer, file_path)
            if outcome.failed:
                self.logger.warning(
                    f"Analyzer '{outcome.analyzer}' failed on {file_path}: {outcome.error}"
                )
                continue
            if not outcome.ok:
                self.logger.debug(f"Analyzer '{outcome.analyzer}' declined {file_path}")
                continue

            result = outcome.result
            self.logger.debug(
                f"Analyzer '{outcome.analyzer}' on {file_path}: "
                f"{result.category.value} ({result.confidence_score}%)"
            )
            collected.append(outcome.attributed())

        if not collected:
            return self._uncertain(file_path, REASON_NO_ANALYZERS)

        return self.engine.combine(file_path, collected)

    def _can_analyze(self, analyzer: Analyzer, file_path: str) -> bool:
        try:
            return bool(analyzer.can_analyze(file_path))
        except Exception as e:
            self.logger.warning(
                f"Analyzer '{getattr(analyzer, 'category', analyzer)}' eligibility check "
                f"failed on {file_path}: {e}"
            )
            return False

    @staticmethod
    def _run_analyzer(analyzer: Analyzer, file_path: str) -> AnalysisOutcome:
        run = getattr(analyzer, "run", None)
        try:
            if callable(run):
                return to_outcome(analyzer, run(file_path))
            produced = analyzer.analyze(file_path)
        except Exception as e:
            return AnalysisOutcome.failure(
                getattr(analyzer, "category", type(analyzer).__name__),
                getattr(analyzer, "kind", AnalyzerKind.UNKNOWN),
                f"{type(e).__name__}: {e}",
            )
        return to_outcome(analyzer, produced)

    @staticmethod
    def _uncertain(file_path: str, reason: str) -> ClassificationResult:
        return ClassificationResult(
            file_path=file_path,
            category=Category.UNCERTAIN,
            confidence_score=0,
            reasons=[reason],
            recommended_action=RecommendedAction.REVIEW,
        )
