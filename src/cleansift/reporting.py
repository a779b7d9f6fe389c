"""
Report formatters for scan results.

Formatters turn a ScanReport into text for a given consumer: humans
reading a terminal or tools reading JSON.

cleansift/src/cleansift/reporting.py
"""

import json
from abc import ABC, abstractmethod
from typing import Any, List, Optional

from .config import Config
from .models import ClassificationResult
from .scanner import ScanReport

__all__ = [
    "BaseFormatter",
    "HumanFormatter",
    "JsonFormatter",
    "BUILTIN_FORMATTERS",
    "FORMAT_CHOICES",
    "DEFAULT_FORMAT",
]


class BaseFormatter(ABC):
    """Base class for formatters."""

    name: str = ""
    description: str = ""

    @abstractmethod
    def format_report(self, report: ScanReport, config: Optional[Any] = None) -> str:
        """Format scan results for output."""


class HumanFormatter(BaseFormatter):
    """Plain-text summary followed by the files to move and the files to review."""

    name = "human"
    description = "Human-readable summary"

    def format_report(self, report: ScanReport, config: Optional[Any] = None) -> str:
        if not report.results:
            return "No files analyzed."

        max_displayed = config.max_displayed_files if isinstance(config, Config) else 50

        counts = report.counts
        movable = report.movable
        lines = [
            "Analysis Summary:",
            f"  Total files analyzed: {report.total}",
            f"  Essential files: {counts['essential']}",
            f"  Non-essential files: {counts['non-essential']}",
            f"  Uncertain files: {counts['uncertain']}",
            f"  Files safe to move: {len(movable)}",
        ]

        if movable:
            lines.append("")
            lines.append("Files that can be moved to backup:")
            lines.extend(self._list_files(movable, max_displayed))

        needs_review = report.needs_review
        if needs_review:
            lines.append("")
            lines.append("Files requiring manual review:")
            lines.extend(self._list_files(needs_review, max_displayed))

        return "\n".join(lines)

    @staticmethod
    def _list_files(results: List[ClassificationResult], max_displayed: int) -> List[str]:
        lines = []
        for index, result in enumerate(results):
            if max_displayed > 0 and index >= max_displayed:
                lines.append(f"  ... {len(results) - max_displayed} more")
                break
            reasons = ", ".join(result.reasons[:2])
            lines.append(
                f"  - {result.file_path} ({result.confidence_score}% confidence: {reasons})"
            )
        return lines


class JsonFormatter(BaseFormatter):
    """JSON output formatter for machine processing."""

    name = "json"
    description = "JSON output format for tooling integration"

    def format_report(self, report: ScanReport, config: Optional[Any] = None) -> str:
        return json.dumps(report.to_dict(), indent=2, default=str)


BUILTIN_FORMATTERS = {
    "human": HumanFormatter,
    "json": JsonFormatter,
}

FORMAT_CHOICES = list(BUILTIN_FORMATTERS.keys())
DEFAULT_FORMAT = "human"
