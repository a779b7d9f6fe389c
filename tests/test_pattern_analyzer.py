"""Tests for the path-pattern analyzer and the analyzer registry."""

import pytest

from cleansift.analyzers import registry
from cleansift.analyzers.base import AnalyzerKind, BaseAnalyzer
from cleansift.analyzers.pattern import PatternAnalyzer
from cleansift.analyzers.registry import get_all_analyzers, get_analyzer, register_analyzer
from cleansift.models import Category, RecommendedAction


@pytest.fixture
def analyzer() -> PatternAnalyzer:
    return PatternAnalyzer()


@pytest.mark.parametrize(
    "path, category, confidence, action",
    [
        ("README.md", Category.NON_ESSENTIAL, 80, RecommendedAction.MOVE),
        ("src/app.py", Category.ESSENTIAL, 90, RecommendedAction.KEEP),
        ("tests/test_app.py", Category.NON_ESSENTIAL, 85, RecommendedAction.MOVE),
        ("debug_info.php", Category.NON_ESSENTIAL, 90, RecommendedAction.MOVE),
        ("config.php.bak", Category.NON_ESSENTIAL, 95, RecommendedAction.MOVE),
        ("composer.json", Category.ESSENTIAL, 85, RecommendedAction.KEEP),
        ("app.py", Category.UNCERTAIN, 30, RecommendedAction.REVIEW),
    ],
)
def test_classification(analyzer, path, category, confidence, action):
    result = analyzer.analyze(path)

    assert result.file_path == path
    assert result.category is category
    assert result.confidence_score == confidence
    assert result.recommended_action is action


def test_unmatched_path(analyzer):
    result = analyzer.analyze("notes.xyz")

    assert result.category is Category.UNCERTAIN
    assert result.confidence_score == 10
    assert result.reasons == ("No specific patterns matched",)


def test_metadata_records_matched_tables(analyzer):
    result = analyzer.analyze("tests/test_app.py")

    assert result.metadata["pattern_type"] == "test"
    assert result.metadata["file_type"] == "python_source"
    assert result.metadata["directory_type"] == "test"
    assert result.reasons[0] == "Matches test file pattern"


def test_run_wraps_result_in_outcome(analyzer):
    outcome = analyzer.run("README.md")

    assert outcome.ok
    assert outcome.analyzer == "pattern"
    assert outcome.kind is AnalyzerKind.PATTERN
    assert outcome.attributed().result.category is Category.NON_ESSENTIAL


def test_pattern_analyzer_is_registered():
    assert get_analyzer("pattern") is PatternAnalyzer
    assert "pattern" in get_all_analyzers()
    assert get_analyzer("missing") is None


def test_register_analyzer_requires_a_label():
    class Nameless(BaseAnalyzer):
        pass

    with pytest.raises(ValueError, match="no category label"):
        register_analyzer(Nameless)


def test_register_analyzer_as_decorator(monkeypatch):
    monkeypatch.setattr(registry, "_ANALYZERS", dict(get_all_analyzers()))

    @register_analyzer
    class UsageAnalyzer(BaseAnalyzer):
        category = "usage"
        kind = AnalyzerKind.USAGE

    assert get_analyzer("usage") is UsageAnalyzer
    assert get_analyzer("pattern") is PatternAnalyzer
