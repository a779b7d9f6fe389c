"""Tests for the project-wide reference index."""

import logging
from pathlib import Path

import pytest

from cleansift.analyzers.references import ReferenceIndex


@pytest.fixture
def index(web_project: Path) -> ReferenceIndex:
    return ReferenceIndex.build(web_project)


def test_python_relative_imports(index):
    assert index.dependencies_of("pkg/core.py") == ["pkg/__init__.py", "pkg/util.py"]
    assert index.importers_of("pkg/util.py") == ["pkg/core.py"]


def test_stdlib_imports_are_ignored(index):
    assert "os.py" not in index.dependencies_of("pkg/core.py")


def test_unparsable_python_has_no_dependencies(index):
    assert index.dependencies_of("broken.py") == []


def test_php_include_relative_to_file(index):
    assert index.dependencies_of("public/index.php") == ["bootstrap/app.php"]


def test_excluded_directories_are_not_indexed(index):
    assert "vendor/autoload.php" not in index.files
    assert index.importers_of("bootstrap/app.php") == ["public/index.php"]


def test_php_use_statement_resolves_through_psr4(index):
    assert index.dependencies_of("src/Controller/HomeController.php") == [
        "src/Service/Mailer.php"
    ]
    assert index.importers_of("src/Service/Mailer.php") == [
        "src/Controller/HomeController.php"
    ]


def test_asset_links(index):
    assert index.asset_users_of("public/css/site.css") == ["public/index.php"]
    assert index.asset_users_of("public/js/app.js") == ["public/index.php"]
    assert index.asset_users_of("public/img/bg.png") == ["public/css/site.css"]


def test_is_autoloaded(index):
    assert index.is_autoloaded("src/Service/Mailer.php")
    assert not index.is_autoloaded("bootstrap/app.php")
    assert not index.is_autoloaded("src/helpers.py")


def test_missing_targets_are_dropped(temp_dir: Path):
    (temp_dir / "index.php").write_text("<?php require 'src/app.php';\n")

    index = ReferenceIndex.build(temp_dir)

    assert index.dependencies_of("index.php") == []


def test_malformed_composer_json_is_reported(temp_dir: Path, caplog):
    (temp_dir / "composer.json").write_text("{not json")
    (temp_dir / "src").mkdir()
    (temp_dir / "src" / "Mailer.php").write_text("<?php\n")

    with caplog.at_level(logging.WARNING):
        index = ReferenceIndex.build(temp_dir)

    assert index.psr4 == {}
    assert not index.is_autoloaded("src/Mailer.php")
    assert "Could not read autoload table" in caplog.text


def test_reverse_maps_from_explicit_tables():
    index = ReferenceIndex(
        ["a.py", "b.py", "style.css", "page.html"],
        imports={"a.py": {"b.py"}},
        assets={"page.html": {"style.css"}},
    )

    assert index.importers_of("b.py") == ["a.py"]
    assert index.dependencies_of("b.py") == []
    assert index.asset_users_of("style.css") == ["page.html"]
    assert index.importers_of("unknown.py") == []
