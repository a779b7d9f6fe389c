"""
Fusion engine for cleansift.

Combines the verdicts of several analyzers for one file into a single
calibrated ClassificationResult. The pipeline is:

1. weighted combination: every input contributes
   ``kind weight x confidence/100 x category weight`` to its category;
   normalized scores pick the winner (ties prefer essential, then
   uncertain, then non-essential) and a consensus modifier adjusts the
   confidence by how clearly the winner leads;
2. conflict resolution: when inputs disagree between essential and
   non-essential and non-essential won, the verdict is downgraded to
   uncertain;
3. edge-case overrides: low confidence, high connectivity and critical
   path patterns, applied in that order.

The engine never raises for degenerate input.

cleansift/src/cleansift/fusion.py
"""

import logging
from collections import Counter
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple, Union

from .analyzers.base import AnalyzerKind, AttributedResult
from .models import Category, ClassificationResult, RecommendedAction

__all__ = [
    "FusionEngine",
    "DEFAULT_CATEGORY_WEIGHTS",
    "DEFAULT_ANALYZER_WEIGHTS",
    "DEFAULT_CRITICAL_PATTERNS",
]

FusionInput = Union[ClassificationResult, AttributedResult]

DEFAULT_CATEGORY_WEIGHTS: Dict[Category, float] = {
    Category.ESSENTIAL: 1.0,
    Category.NON_ESSENTIAL: 1.0,
    Category.UNCERTAIN: 0.8,
}

DEFAULT_ANALYZER_WEIGHTS: Dict[AnalyzerKind, float] = {
    AnalyzerKind.DEPENDENCY: 1.0,
    AnalyzerKind.USAGE: 0.9,
    AnalyzerKind.FUNCTIONAL: 0.8,
    AnalyzerKind.PATTERN: 0.7,
    AnalyzerKind.UNKNOWN: 0.5,
}

# Build, bootstrap and secret manifests that must never leave the tree.
DEFAULT_CRITICAL_PATTERNS: Tuple[str, ...] = (
    "index.php",
    "composer.json",
    ".env",
    "docker-compose.yml",
)

# Tie-break order, safest first.
_TIE_PRIORITY = {
    Category.ESSENTIAL: 3,
    Category.UNCERTAIN: 2,
    Category.NON_ESSENTIAL: 1,
}

_ACTION_TIE_PRIORITY = {
    RecommendedAction.REVIEW: 3,
    RecommendedAction.KEEP: 2,
    RecommendedAction.MOVE: 1,
}

_TIE_TOLERANCE = 1e-9

REASON_NO_RESULTS = "No analysis results available"
REASON_CONFLICT = "Conflicting analyzer results - requires review"
REASON_LOW_CONFIDENCE = "Low confidence score - requires manual review"
REASON_HIGH_CONNECTIVITY = "High dependency/reference count - requires review"
REASON_CRITICAL_PATTERN = "Critical file pattern detected"


def _round_half_up(value: float) -> int:
    return int(value + 0.5) if value >= 0 else -int(-value + 0.5)


class FusionEngine:
    """
    Combines per-analyzer results into one verdict per file.

    Args:
        category_weights: Overrides merged over DEFAULT_CATEGORY_WEIGHTS.
            Keys may be Category members or their wire strings.
        analyzer_weights: Overrides merged over DEFAULT_ANALYZER_WEIGHTS.
            Keys may be AnalyzerKind members or their values.
        critical_patterns: Path substrings that force an essential verdict.
            Defaults to DEFAULT_CRITICAL_PATTERNS.
        logger: Sink for debug/warning messages. Defaults to this module's logger.
    """

    def __init__(
        self,
        category_weights: Optional[Mapping[Union[Category, str], float]] = None,
        analyzer_weights: Optional[Mapping[Union[AnalyzerKind, str], float]] = None,
        critical_patterns: Optional[Iterable[str]] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self.logger = logger or logging.getLogger(__name__)
        self._category_weights: Dict[Category, float] = dict(DEFAULT_CATEGORY_WEIGHTS)
        self._analyzer_weights: Dict[AnalyzerKind, float] = dict(DEFAULT_ANALYZER_WEIGHTS)
        self._critical_patterns: List[str] = list(
            DEFAULT_CRITICAL_PATTERNS if critical_patterns is None else critical_patterns
        )
        if category_weights:
            self.set_category_weights(category_weights)
        if analyzer_weights:
            self.set_analyzer_weights(analyzer_weights)

    # --- Configuration ---

    @property
    def category_weights(self) -> Dict[Category, float]:
        return dict(self._category_weights)

    def set_category_weights(self, weights: Mapping[Union[Category, str], float]) -> None:
        """Merge category weight overrides into the current weights."""
        for key, weight in weights.items():
            self._category_weights[Category.coerce(key)] = self._check_weight(key, weight)

    @property
    def analyzer_weights(self) -> Dict[AnalyzerKind, float]:
        return dict(self._analyzer_weights)

    def set_analyzer_weights(self, weights: Mapping[Union[AnalyzerKind, str], float]) -> None:
        """Merge analyzer-kind weight overrides into the current weights."""
        for key, weight in weights.items():
            try:
                kind = key if isinstance(key, AnalyzerKind) else AnalyzerKind(key)
            except ValueError:
                raise ValueError(f"Unknown analyzer kind: {key!r}") from None
            self._analyzer_weights[kind] = self._check_weight(key, weight)

    @property
    def critical_patterns(self) -> Tuple[str, ...]:
        return tuple(self._critical_patterns)

    def add_critical_pattern(self, pattern: str) -> None:
        if pattern and pattern not in self._critical_patterns:
            self._critical_patterns.append(pattern)

    @staticmethod
    def _check_weight(key: object, weight: object) -> float:
        if isinstance(weight, bool) or not isinstance(weight, (int, float)) or weight < 0:
            raise ValueError(f"Weight for {key!r} must be a non-negative number, got {weight!r}")
        return float(weight)

    # --- Fusion ---

    def combine(self, file_path: str, results: Sequence[FusionInput]) -> ClassificationResult:
        """
        Fuse analyzer results for ``file_path`` into one verdict.

        An empty input yields an uncertain verdict with confidence 0. A
        single input skips weighting and conflict resolution; if no edge
        case applies to it, the very same object is returned.
        """
        if not results:
            return ClassificationResult(
                file_path=file_path,
                category=Category.UNCERTAIN,
                confidence_score=0,
                reasons=[REASON_NO_RESULTS],
                recommended_action=RecommendedAction.REVIEW,
            )

        attributed = self._canonical_order(self._attribute(r) for r in results)
        self.logger.debug(
            f"Combining results for {file_path}: {len(attributed)} analyzer result(s)"
        )

        if len(attributed) == 1:
            return self.apply_overrides(attributed[0].result)

        combined = self._weighted_combination(file_path, attributed)
        resolved = self.resolve_conflicts(combined, [a.result for a in attributed])
        final = self.apply_overrides(resolved)

        self.logger.debug(
            f"Combined result for {file_path}: category={final.category.value} "
            f"confidence={final.confidence_score} "
            f"action={final.recommended_action.value if final.recommended_action else None}"
        )
        return final

    @staticmethod
    def _attribute(item: FusionInput) -> AttributedResult:
        if isinstance(item, AttributedResult):
            return item
        return AttributedResult("", AnalyzerKind.infer(item), item)

    @staticmethod
    def _canonical_order(items: Iterable[AttributedResult]) -> List[AttributedResult]:
        # Fusion output must not depend on the order analyzers ran in.
        return sorted(
            items,
            key=lambda a: (
                a.kind.value,
                a.analyzer,
                a.result.category.value,
                -a.result.confidence_score,
                a.result.reasons,
                a.result.dependencies,
                a.result.references,
                tuple(sorted(repr(item) for item in a.result.metadata.items())),
            ),
        )

    def _weighted_combination(
        self, file_path: str, attributed: Sequence[AttributedResult]
    ) -> ClassificationResult:
        scores: Dict[Category, float] = {category: 0.0 for category in Category}
        total_weight = 0.0
        reasons: List[str] = []
        dependencies: List[str] = []
        references: List[str] = []
        metadata: Dict[str, object] = {}

        for item in attributed:
            result = item.result
            contribution = (
                self._analyzer_weights.get(item.kind, DEFAULT_ANALYZER_WEIGHTS[AnalyzerKind.UNKNOWN])
                * (result.confidence_score / 100)
                * self._category_weights[result.category]
            )
            scores[result.category] += contribution
            total_weight += contribution

            reasons.extend(result.reasons)
            dependencies.extend(result.dependencies)
            references.extend(result.references)
            metadata.update(result.metadata)

        if total_weight <= 0:
            category = Category.UNCERTAIN
            confidence = 0
        else:
            normalized = {c: score / total_weight for c, score in scores.items()}
            category = self._pick_category(normalized)
            confidence = self._calibrate_confidence(normalized, category)

        action = self._recommended_action(category, confidence, [a.result for a in attributed])

        return ClassificationResult(
            file_path=file_path,
            category=category,
            confidence_score=confidence,
            reasons=list(dict.fromkeys(reasons)),
            dependencies=sorted(set(dependencies)),
            references=sorted(set(references)),
            recommended_action=action,
            metadata=metadata,
        )

    @staticmethod
    def _pick_category(normalized: Mapping[Category, float]) -> Category:
        best = max(normalized.values())
        tied = [c for c, score in normalized.items() if best - score <= _TIE_TOLERANCE]
        return max(tied, key=_TIE_PRIORITY.__getitem__)

    @staticmethod
    def _calibrate_confidence(normalized: Mapping[Category, float], winner: Category) -> int:
        base = _round_half_up(normalized[winner] * 100)

        best = normalized[winner]
        # runner-up is the largest score strictly below the winner
        runner_up = max((s for s in normalized.values() if s < best - _TIE_TOLERANCE), default=0.0)
        gap = best - runner_up
        if gap > 0.6 + _TIE_TOLERANCE:
            modifier = 15
        elif gap > 0.3 + _TIE_TOLERANCE:
            modifier = 10
        elif gap < 0.1 - _TIE_TOLERANCE:
            modifier = -15
        else:
            modifier = 0

        return max(0, min(100, base + modifier))

    def _recommended_action(
        self, category: Category, confidence: int, results: Sequence[ClassificationResult]
    ) -> RecommendedAction:
        votes = Counter(r.recommended_action for r in results if r.recommended_action)
        if votes:
            top = max(votes, key=lambda action: (votes[action], _ACTION_TIE_PRIORITY[action]))
            if self._action_consistent(top, category, confidence):
                return top
            self.logger.debug(
                f"Majority action '{top.value}' inconsistent with {category.value}/{confidence}; "
                "using default mapping"
            )
        return self._default_action(category, confidence)

    @staticmethod
    def _action_consistent(action: RecommendedAction, category: Category, confidence: int) -> bool:
        if action is RecommendedAction.KEEP:
            return category is Category.ESSENTIAL
        if action is RecommendedAction.MOVE:
            return category is Category.NON_ESSENTIAL and confidence >= 60
        return True

    @staticmethod
    def _default_action(category: Category, confidence: int) -> RecommendedAction:
        if category is Category.ESSENTIAL:
            return RecommendedAction.KEEP
        if category is Category.NON_ESSENTIAL:
            return RecommendedAction.MOVE if confidence >= 70 else RecommendedAction.REVIEW
        return RecommendedAction.REVIEW

    # --- Post-processing stages ---

    def resolve_conflicts(
        self, result: ClassificationResult, inputs: Sequence[ClassificationResult]
    ) -> ClassificationResult:
        """
        Downgrade a non-essential verdict to uncertain when the inputs
        contained both essential and non-essential opinions.
        """
        categories = {r.category for r in inputs}
        if Category.ESSENTIAL not in categories or Category.NON_ESSENTIAL not in categories:
            return result

        self.logger.warning(
            f"Conflict detected between analyzers for {result.file_path}: "
            f"essential and non-essential verdicts (fused: {result.category.value})"
        )
        if result.category is not Category.NON_ESSENTIAL:
            return result

        return result.with_changes(
            category=Category.UNCERTAIN,
            confidence_score=max(30, result.confidence_score - 20),
            reasons=result.reasons + (REASON_CONFLICT,),
            recommended_action=RecommendedAction.REVIEW,
            metadata={**result.metadata, "has_conflicts": True},
        )

    def apply_overrides(self, result: ClassificationResult) -> ClassificationResult:
        """
        Apply the edge-case overrides in order; each sees the previous one's output.

        Returns ``result`` itself when no override applies.
        """
        adjusted = result

        if adjusted.confidence_score < 30:
            adjusted = adjusted.with_changes(
                category=Category.UNCERTAIN,
                reasons=adjusted.reasons + (REASON_LOW_CONFIDENCE,),
                recommended_action=RecommendedAction.REVIEW,
            )

        highly_connected = len(adjusted.dependencies) > 5 or len(adjusted.references) > 3
        if highly_connected and adjusted.category is Category.NON_ESSENTIAL:
            adjusted = adjusted.with_changes(
                category=Category.UNCERTAIN,
                confidence_score=max(40, adjusted.confidence_score - 10),
                reasons=adjusted.reasons + (REASON_HIGH_CONNECTIVITY,),
                recommended_action=RecommendedAction.REVIEW,
                metadata={**adjusted.metadata, "high_connectivity": True},
            )

        pattern = self.matching_critical_pattern(adjusted.file_path)
        if pattern is not None and adjusted.category is not Category.ESSENTIAL:
            adjusted = adjusted.with_changes(
                category=Category.ESSENTIAL,
                confidence_score=max(85, adjusted.confidence_score),
                reasons=adjusted.reasons + (REASON_CRITICAL_PATTERN,),
                recommended_action=RecommendedAction.KEEP,
                metadata={**adjusted.metadata, "critical_pattern": pattern},
            )

        return adjusted

    def matching_critical_pattern(self, file_path: str) -> Optional[str]:
        """First configured critical pattern contained in ``file_path``, if any."""
        for pattern in self._critical_patterns:
            if pattern in file_path:
                return pattern
        return None
