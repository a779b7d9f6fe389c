"""Pytest configuration and fixtures for cleansift tests."""

import json
import tempfile
from pathlib import Path
from typing import Iterator

import pytest

from cleansift.config import Config


@pytest.fixture
def temp_dir() -> Iterator[Path]:
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def sample_project(temp_dir: Path) -> Path:
    """Create a small project tree with essential, disposable and vendored files."""
    files = {
        "src/app.py": "def main():\n    return 0\n",
        "README.md": "# Sample\n",
        "tests/test_app.py": "from app import main\n\n\ndef test_main():\n    assert main() == 0\n",
        "debug_info.php": "<?php phpinfo();\n",
        "index.php": "<?php require 'src/app.php';\n",
        "vendor/lib.php": "<?php\n",
        "node_modules/pkg/index.js": "module.exports = {};\n",
        ".git/HEAD": "ref: refs/heads/main\n",
    }
    for relative, content in files.items():
        path = temp_dir / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content)
    return temp_dir


@pytest.fixture
def web_project(temp_dir: Path) -> Path:
    """Create a mixed PHP/Python project with includes, autoloading and assets."""
    files = {
        "composer.json": json.dumps({"autoload": {"psr-4": {"App\\": "src/"}}}),
        "src/Controller/HomeController.php": (
            "<?php\nnamespace App\\Controller;\n\nuse App\\Service\\Mailer;\n"
        ),
        "src/Service/Mailer.php": "<?php\nnamespace App\\Service;\n",
        "public/index.php": (
            "<?php\nrequire __DIR__ . '/../bootstrap/app.php';\n?>\n"
            '<link href="/css/site.css" rel="stylesheet">\n'
            '<script src="js/app.js"></script>\n'
        ),
        "bootstrap/app.php": "<?php\n",
        "public/css/site.css": "body { background: url('../img/bg.png'); }\n",
        "public/img/bg.png": "",
        "public/js/app.js": "",
        "pkg/__init__.py": "",
        "pkg/core.py": "from . import util\nfrom .util import helper\nimport os\n",
        "pkg/util.py": "def helper():\n    return 1\n",
        "broken.py": "def (:\n",
        "vendor/autoload.php": "<?php require '../bootstrap/app.php';\n",
    }
    for relative, content in files.items():
        path = temp_dir / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content)
    return temp_dir


@pytest.fixture
def sample_config(temp_dir: Path) -> Config:
    """Create a sample Config object for testing."""
    return Config(
        project_root=temp_dir,
        config_dict={
            "exclude_patterns": ["build"],
            "critical_patterns": ["settings.py"],
            "analyzers": ["pattern"],
            "category_weights": {"uncertain": 0.5},
            "analyzer_weights": {"pattern": 0.6},
            "progress_log_interval": 10,
        },
    )


@pytest.fixture
def pyproject_toml(temp_dir: Path) -> Path:
    """Create a sample pyproject.toml file."""
    config_path = temp_dir / "pyproject.toml"
    config_path.write_text(
        """[project]
name = "sample"

[tool.cleansift]
exclude_patterns = ["build"]
critical_patterns = ["settings.py"]
progress_log_interval = 10

[tool.cleansift.category_weights]
uncertain = 0.5
"""
    )
    return config_path
