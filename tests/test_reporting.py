"""Tests for report formatters."""

import json

from cleansift.config import Config
from cleansift.models import Category, ClassificationResult, RecommendedAction
from cleansift.reporting import BUILTIN_FORMATTERS, FORMAT_CHOICES, HumanFormatter, JsonFormatter
from cleansift.scanner import ScanReport


def build_report() -> ScanReport:
    results = [
        ClassificationResult(
            file_path="src/app.py",
            category=Category.ESSENTIAL,
            confidence_score=90,
            reasons=["In source code directory"],
            recommended_action=RecommendedAction.KEEP,
        ),
        ClassificationResult(
            file_path="README.md",
            category=Category.NON_ESSENTIAL,
            confidence_score=80,
            reasons=["Matches documentation file pattern", "Markdown documentation", "extra"],
            recommended_action=RecommendedAction.MOVE,
        ),
        ClassificationResult(
            file_path="app.py",
            category=Category.UNCERTAIN,
            confidence_score=30,
            reasons=["Python source file"],
            recommended_action=RecommendedAction.REVIEW,
        ),
    ]
    return ScanReport(results={r.file_path: r for r in results})


def test_formatter_choices():
    assert FORMAT_CHOICES == ["human", "json"]
    assert BUILTIN_FORMATTERS["json"] is JsonFormatter


def test_human_formatter_summary_and_sections():
    output = HumanFormatter().format_report(build_report())

    assert output.splitlines()[:6] == [
        "Analysis Summary:",
        "  Total files analyzed: 3",
        "  Essential files: 1",
        "  Non-essential files: 1",
        "  Uncertain files: 1",
        "  Files safe to move: 1",
    ]
    assert "Files that can be moved to backup:" in output
    assert (
        "  - README.md (80% confidence: Matches documentation file pattern, Markdown documentation)"
        in output
    )
    assert "Files requiring manual review:" in output
    assert "  - app.py (30% confidence: Python source file)" in output


def test_human_formatter_truncates_long_lists(temp_dir):
    report = ScanReport(
        results={
            f"tmp/file{i}.tmp": ClassificationResult(
                file_path=f"tmp/file{i}.tmp",
                category=Category.NON_ESSENTIAL,
                confidence_score=95,
                recommended_action=RecommendedAction.MOVE,
            )
            for i in range(5)
        }
    )
    config = Config(temp_dir, {"max_displayed_files": 2})

    output = HumanFormatter().format_report(report, config)

    assert "  ... 3 more" in output
    assert "tmp/file2.tmp" not in output


def test_human_formatter_with_invalid_display_limit(temp_dir):
    config = Config(temp_dir, {"max_displayed_files": "ten"})

    output = HumanFormatter().format_report(build_report(), config)

    assert "  - README.md (80% confidence" in output
    assert "more" not in output


def test_human_formatter_zero_limit_lists_everything(temp_dir):
    report = ScanReport(
        results={
            f"tmp/file{i}.tmp": ClassificationResult(
                file_path=f"tmp/file{i}.tmp",
                category=Category.NON_ESSENTIAL,
                confidence_score=95,
                recommended_action=RecommendedAction.MOVE,
            )
            for i in range(60)
        }
    )

    output = HumanFormatter().format_report(report, Config(temp_dir, {"max_displayed_files": 0}))

    assert "tmp/file59.tmp" in output
    assert "more" not in output


def test_human_formatter_empty_report():
    assert HumanFormatter().format_report(ScanReport()) == "No files analyzed."


def test_json_formatter():
    data = json.loads(JsonFormatter().format_report(build_report()))

    assert data["summary"]["total"] == 3
    assert data["summary"]["movable"] == 1
    assert data["results"]["README.md"]["recommendedAction"] == "move"
    assert data["results"]["app.py"]["confidenceScore"] == 30
