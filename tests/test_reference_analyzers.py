"""Tests for the dependency and usage analyzers."""

from pathlib import Path

import pytest

from cleansift.analyzers.base import AnalyzerKind
from cleansift.analyzers.dependency import DependencyAnalyzer
from cleansift.analyzers.references import ReferenceIndex
from cleansift.analyzers.registry import get_analyzer
from cleansift.analyzers.usage import UsageAnalyzer
from cleansift.models import Category, RecommendedAction


@pytest.fixture
def dependency(web_project: Path) -> DependencyAnalyzer:
    return DependencyAnalyzer(web_project)


@pytest.fixture
def usage(web_project: Path) -> UsageAnalyzer:
    return UsageAnalyzer(web_project)


def test_registered_under_their_labels():
    assert get_analyzer("dependency") is DependencyAnalyzer
    assert get_analyzer("usage") is UsageAnalyzer
    assert DependencyAnalyzer.kind is AnalyzerKind.DEPENDENCY
    assert UsageAnalyzer.kind is AnalyzerKind.USAGE
    assert DependencyAnalyzer.priority > UsageAnalyzer.priority


# --- DependencyAnalyzer ---


def test_manifest_is_essential(dependency):
    result = dependency.analyze("composer.json")

    assert result.category is Category.ESSENTIAL
    assert result.confidence_score == 40
    assert result.reasons == ("Required by package configuration",)
    assert result.recommended_action is RecommendedAction.KEEP
    assert result.metadata["is_manifest"] is True


def test_autoloaded_class_is_essential(dependency):
    result = dependency.analyze("src/Service/Mailer.php")

    assert result.category is Category.ESSENTIAL
    assert result.confidence_score == 35
    assert result.reasons == ("Part of PSR-4 autoload structure", "Referenced by 1 files")
    assert result.references == ("src/Controller/HomeController.php",)
    assert result.metadata["is_psr4_file"] is True
    assert result.metadata["reference_count"] == 1


def test_bootstrap_file_is_core_config(dependency):
    result = dependency.analyze("bootstrap/app.php")

    assert result.category is Category.ESSENTIAL
    assert result.confidence_score == 40
    assert "Core configuration file" in result.reasons
    assert result.references == ("public/index.php",)


def test_few_imports_stay_uncertain_without_an_action(dependency):
    result = dependency.analyze("pkg/core.py")

    assert result.category is Category.UNCERTAIN
    assert result.confidence_score == 6
    assert result.reasons == ("Has 2 dependencies",)
    assert result.dependencies == ("pkg/__init__.py", "pkg/util.py")
    assert result.recommended_action is None


def test_many_imports_make_a_file_essential():
    index = ReferenceIndex(
        ["main.py", "a.py", "b.py", "c.py", "d.py"],
        imports={"main.py": {"a.py", "b.py", "c.py", "d.py"}},
        assets={},
    )

    result = DependencyAnalyzer(index=index).analyze("main.py")

    assert result.category is Category.ESSENTIAL
    assert result.confidence_score == 12
    assert result.metadata["dependency_count"] == 4


def test_migration_file():
    path = "database/migrations/001_create_users.php"
    index = ReferenceIndex([path], imports={}, assets={})

    result = DependencyAnalyzer(index=index).analyze(path)

    assert result.category is Category.ESSENTIAL
    assert result.confidence_score == 35
    assert result.reasons == ("Database migration file",)


def test_dependency_declines_files_without_signal(dependency):
    assert dependency.analyze("public/js/app.js") is None

    outcome = dependency.run("public/js/app.js")

    assert not outcome.ok
    assert not outcome.failed


def test_missing_root_is_a_failure_outcome():
    outcome = DependencyAnalyzer().run("composer.json")

    assert outcome.failed
    assert "ValueError" in outcome.error


# --- UsageAnalyzer ---


def test_entry_point(usage):
    result = usage.analyze("public/index.php")

    assert result.category is Category.ESSENTIAL
    assert result.confidence_score == 40
    assert result.reasons == ("Application entry point",)
    assert result.recommended_action is RecommendedAction.KEEP
    assert result.metadata["entry_point_type"] == "main_entry"


def test_linked_asset_is_essential(usage):
    result = usage.analyze("public/css/site.css")

    assert result.category is Category.ESSENTIAL
    assert result.confidence_score == 10
    assert result.reasons == ("Referenced in 1 files as asset",)
    assert result.references == ("public/index.php",)
    assert result.metadata["asset_references"] == ["public/index.php"]


def test_single_importer_is_uncertain(usage):
    result = usage.analyze("pkg/util.py")

    assert result.category is Category.UNCERTAIN
    assert result.confidence_score == 10
    assert result.reasons == ("Imported or included by 1 files",)
    assert result.recommended_action is None


def test_referenced_template_is_essential():
    index = ReferenceIndex(
        ["public/index.php", "templates/header.php"],
        imports={"public/index.php": {"templates/header.php"}},
        assets={},
    )

    result = UsageAnalyzer(index=index).analyze("templates/header.php")

    assert result.category is Category.ESSENTIAL
    assert result.confidence_score == 28
    assert result.metadata["template_usage"] == "template"


def test_migration_order():
    path = "database/migrations/001_create_users.php"
    index = ReferenceIndex([path], imports={}, assets={})

    result = UsageAnalyzer(index=index).analyze(path)

    assert result.category is Category.ESSENTIAL
    assert result.metadata["migration_order"] == 1
    assert "Active database migration" in result.reasons


@pytest.mark.parametrize("path", ["debug_info.php", "tests/test_app.py", "legacy/page.php.bak"])
def test_unreferenced_leftovers_are_potentially_unused(path):
    index = ReferenceIndex([path], imports={}, assets={})

    result = UsageAnalyzer(index=index).analyze(path)

    assert result.category is Category.NON_ESSENTIAL
    assert result.confidence_score == 30
    assert result.recommended_action is RecommendedAction.MOVE
    assert result.metadata["potentially_unused"] is True


def test_referenced_leftover_is_not_unused():
    index = ReferenceIndex(
        ["index.php", "debug_info.php"],
        imports={"index.php": {"debug_info.php"}},
        assets={},
    )

    result = UsageAnalyzer(index=index).analyze("debug_info.php")

    assert result.category is Category.UNCERTAIN
    assert "potentially_unused" not in result.metadata


def test_source_tree_is_never_flagged_unused():
    index = ReferenceIndex(["src/debug_tools.php"], imports={}, assets={})

    assert UsageAnalyzer(index=index).analyze("src/debug_tools.php") is None


def test_module_entry_point_by_name():
    index = ReferenceIndex(["tool/__main__.py"], imports={}, assets={})

    result = UsageAnalyzer(index=index).analyze("tool/__main__.py")

    assert result.metadata["entry_point_type"] == "module_entry"
