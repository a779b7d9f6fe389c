"""
Classification result model for cleansift.

A ClassificationResult is the verdict for one file, either proposed by a
single analyzer or fused from several. Results are immutable; every
adjustment builds a new instance through ``with_changes``.

cleansift/src/cleansift/models.py
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple, Union

__all__ = [
    "Category",
    "RecommendedAction",
    "PriorityLevel",
    "ClassificationError",
    "ClassificationResult",
]


class ClassificationError(ValueError):
    """Raised when a ClassificationResult is built from invalid values."""


class Category(Enum):
    """Importance of a file to the project."""

    ESSENTIAL = "essential"
    NON_ESSENTIAL = "non-essential"
    UNCERTAIN = "uncertain"

    @classmethod
    def coerce(cls, value: Union["Category", str]) -> "Category":
        """Accept an enum member or its wire string."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            raise ClassificationError(f"Invalid category: {value!r}") from None


class RecommendedAction(Enum):
    """What the cleanup should do with a file."""

    KEEP = "keep"
    MOVE = "move"
    REVIEW = "review"

    @classmethod
    def coerce(cls, value: Union["RecommendedAction", str]) -> "RecommendedAction":
        """Accept an enum member or its wire string."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            raise ClassificationError(f"Invalid recommended action: {value!r}") from None


class PriorityLevel(Enum):
    """Processing priority derived from a result."""

    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


def _unique(items: Iterable[str]) -> Tuple[str, ...]:
    # first occurrence wins
    return tuple(dict.fromkeys(items))


_CATEGORY_EXPLANATIONS = {
    Category.ESSENTIAL: "This file is essential to the project's core functionality and should be preserved.",
    Category.NON_ESSENTIAL: "This file is not essential to core functionality and can be safely moved to backup.",
    Category.UNCERTAIN: "This file's importance is uncertain and requires manual review before action.",
}

_ACTION_JUSTIFICATIONS = {
    RecommendedAction.KEEP: "Keep in place - file is essential or actively used",
    RecommendedAction.MOVE: "Move to backup - file is not essential to core functionality",
    RecommendedAction.REVIEW: "Manual review required - uncertain classification",
}


@dataclass(frozen=True)
class ClassificationResult:
    """
    Verdict for a single file.

    ``category`` and ``recommended_action`` accept either enum members or
    their wire strings; both are stored as enums. ``dependencies`` and
    ``references`` behave as ordered sets.

    Raises:
        ClassificationError: If the confidence is not an int in [0, 100]
            or the category/action is not a known value.
    """

    file_path: str
    category: Category
    confidence_score: int
    reasons: Tuple[str, ...] = ()
    dependencies: Tuple[str, ...] = ()
    references: Tuple[str, ...] = ()
    recommended_action: Optional[RecommendedAction] = None
    metadata: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        score = self.confidence_score
        if isinstance(score, bool) or not isinstance(score, int):
            raise ClassificationError(
                f"Confidence score must be an integer, got {type(score).__name__}"
            )
        if score < 0 or score > 100:
            raise ClassificationError("Confidence score must be between 0 and 100")

        object.__setattr__(self, "category", Category.coerce(self.category))
        if self.recommended_action is not None:
            object.__setattr__(
                self, "recommended_action", RecommendedAction.coerce(self.recommended_action)
            )

        object.__setattr__(self, "reasons", tuple(self.reasons))
        object.__setattr__(self, "dependencies", _unique(self.dependencies))
        object.__setattr__(self, "references", _unique(self.references))
        object.__setattr__(self, "metadata", MappingProxyType(dict(self.metadata)))

    # --- Derived facts ---

    @property
    def is_essential(self) -> bool:
        return self.category is Category.ESSENTIAL

    @property
    def can_be_moved(self) -> bool:
        """Non-essential and explicitly recommended for moving."""
        return (
            self.category is Category.NON_ESSENTIAL
            and self.recommended_action is RecommendedAction.MOVE
        )

    @property
    def is_safe_to_move(self) -> bool:
        """Non-essential, recommended for moving, with confidence of at least 70."""
        return self.can_be_moved and self.confidence_score >= 70

    @property
    def requires_review(self) -> bool:
        return (
            self.category is Category.UNCERTAIN
            or self.recommended_action is RecommendedAction.REVIEW
        )

    @property
    def requires_immediate_attention(self) -> bool:
        return self.category is Category.UNCERTAIN and self.confidence_score < 50

    @property
    def priority_level(self) -> PriorityLevel:
        if self.is_essential:
            return PriorityLevel.CRITICAL
        if self.requires_immediate_attention:
            return PriorityLevel.HIGH
        if self.is_safe_to_move:
            return PriorityLevel.LOW
        return PriorityLevel.MEDIUM

    # --- New instances ---

    def with_changes(self, **changes: Any) -> "ClassificationResult":
        """Return a validated copy with the given fields replaced."""
        return replace(self, **changes)

    def merge_with(self, other: "ClassificationResult") -> "ClassificationResult":
        """
        Merge two results for the same file.

        The higher-confidence side (self on ties) supplies category and
        action; collections are unioned and ``other``'s metadata wins on
        key clashes.
        """
        if self.file_path != other.file_path:
            raise ClassificationError("Cannot merge results for different files")

        primary = self if self.confidence_score >= other.confidence_score else other
        return ClassificationResult(
            file_path=self.file_path,
            category=primary.category,
            confidence_score=max(self.confidence_score, other.confidence_score),
            reasons=_unique(self.reasons + other.reasons),
            dependencies=self.dependencies + other.dependencies,
            references=self.references + other.references,
            recommended_action=primary.recommended_action,
            metadata={**self.metadata, **other.metadata},
        )

    # --- Explanations ---

    def summary(self) -> str:
        action = self.recommended_action.value if self.recommended_action else "unknown"
        return (
            f"File: {self.file_path} | Category: {self.category.value} | "
            f"Confidence: {self.confidence_score}% | Action: {action} | "
            f"Reasons: {', '.join(self.reasons)}"
        )

    def detailed_reasoning(self) -> Dict[str, Any]:
        """Explain the category, confidence, action and the risk of acting on it."""
        return {
            "category_explanation": _CATEGORY_EXPLANATIONS[self.category],
            "confidence_factors": self._confidence_factors(),
            "action_justification": _ACTION_JUSTIFICATIONS.get(
                self.recommended_action, "No specific action recommended"
            ),
            "risk_assessment": self._risk_assessment(),
        }

    def _confidence_factors(self) -> List[str]:
        score = self.confidence_score
        if score >= 80:
            factors = ["High confidence based on multiple strong indicators"]
        elif score >= 60:
            factors = ["Medium confidence with some clear indicators"]
        elif score >= 40:
            factors = ["Low-medium confidence with limited indicators"]
        else:
            factors = ["Low confidence - requires careful review"]

        dependency_count = self.metadata.get("dependency_count")
        if isinstance(dependency_count, int) and dependency_count > 0:
            factors.append(f"Has {dependency_count} dependencies")

        reference_count = self.metadata.get("reference_count")
        if isinstance(reference_count, int) and reference_count > 0:
            factors.append(f"Referenced by {reference_count} files")

        return factors

    def _risk_assessment(self) -> Dict[str, Any]:
        action = self.recommended_action
        if action is RecommendedAction.KEEP:
            level = "low"
            factors = ["File will remain in original location", "No disruption to functionality"]
        elif action is RecommendedAction.MOVE:
            if self.confidence_score >= 80:
                level = "low"
                factors = [
                    "High confidence in non-essential classification",
                    "Can be restored if needed",
                ]
            elif self.confidence_score >= 60:
                level = "medium"
                factors = ["Medium confidence - monitor for issues", "Backup available for restoration"]
            else:
                level = "high"
                factors = ["Low confidence - may cause issues", "Requires careful testing after move"]
        else:
            level = "medium"
            factors = ["Manual review required", "Action depends on review outcome"]

        if self.dependencies:
            factors.append(
                f"File has {len(self.dependencies)} dependencies that may be affected"
            )
        if self.references:
            factors.append(f"File is referenced by {len(self.references)} other files")

        return {"level": level, "factors": factors}

    # --- Serialization ---

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the flat record used for storage and JSON output."""
        return {
            "filePath": self.file_path,
            "category": self.category.value,
            "confidenceScore": self.confidence_score,
            "reasons": list(self.reasons),
            "dependencies": list(self.dependencies),
            "references": list(self.references),
            "recommendedAction": (
                self.recommended_action.value if self.recommended_action else None
            ),
            "metadata": dict(self.metadata),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ClassificationResult":
        """
        Rebuild a result from a flat record.

        Raises:
            ClassificationError: If required keys are missing or values are invalid.
        """
        missing = [key for key in ("filePath", "category", "confidenceScore") if key not in data]
        if missing:
            raise ClassificationError(f"Missing required keys: {', '.join(missing)}")

        return cls(
            file_path=data["filePath"],
            category=data["category"],
            confidence_score=data["confidenceScore"],
            reasons=data.get("reasons") or (),
            dependencies=data.get("dependencies") or (),
            references=data.get("references") or (),
            recommended_action=data.get("recommendedAction") or None,
            metadata=data.get("metadata") or {},
        )


