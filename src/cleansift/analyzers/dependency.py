"""
Dependency analyzer.

Classifies files from their place in the project's dependency structure:
what they import or include, who imports them, and whether they are
manifests, core configuration, migrations or PSR-4 autoloaded classes.
Files with none of these signals are declined.

cleansift/src/cleansift/analyzers/dependency.py
"""

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from ..models import Category, ClassificationResult, RecommendedAction
from .base import AnalyzerKind, BaseAnalyzer
from .references import ReferenceIndex
from .registry import register_analyzer

__all__ = ["DependencyAnalyzer"]

logger = logging.getLogger(__name__)

# Package manifests and tooling files that builds and deployments read directly.
MANIFEST_FILES = frozenset(
    {
        "composer.json",
        "composer.lock",
        "package.json",
        "package-lock.json",
        "pyproject.toml",
        "setup.py",
        "setup.cfg",
        "requirements.txt",
        ".env",
        ".env.example",
        "docker-compose.yml",
        "Dockerfile",
        "phpunit.xml",
        "phpstan.neon",
        "phpcs.xml",
    }
)

CORE_CONFIG_MARKERS = (
    "config/",
    "bootstrap/",
    ".env",
    "docker-compose",
    "Dockerfile",
    "nginx.conf",
    "apache.conf",
)


@register_analyzer
class DependencyAnalyzer(BaseAnalyzer):
    """Classifies files by imports, includes, autoloading and configuration role."""

    category = "dependency"
    description = "Imports, includes, autoload tables and configuration files"
    priority = 90
    kind = AnalyzerKind.DEPENDENCY

    def __init__(self, project_root: Optional[Path] = None, index: Optional[ReferenceIndex] = None):
        super().__init__(project_root)
        self._index = index

    @property
    def index(self) -> ReferenceIndex:
        """Reference index, built from ``project_root`` on first use."""
        if self._index is None:
            if self.project_root is None:
                raise ValueError("DependencyAnalyzer needs a project root or a reference index")
            self._index = ReferenceIndex.build(self.project_root)
        return self._index

    def analyze(self, file_path: str) -> Optional[ClassificationResult]:
        index = self.index
        dependencies = index.dependencies_of(file_path)
        references = index.importers_of(file_path)
        is_autoloaded = index.is_autoloaded(file_path)
        is_manifest = file_path in MANIFEST_FILES
        is_core_config = any(marker in file_path for marker in CORE_CONFIG_MARKERS)
        is_migration = "migrations/" in file_path or (
            "database/" in file_path and "migration" in file_path
        )

        reasons: List[str] = []
        if is_autoloaded:
            reasons.append("Part of PSR-4 autoload structure")
        if is_manifest:
            reasons.append("Required by package configuration")
        if dependencies:
            reasons.append(f"Has {len(dependencies)} dependencies")
        if references:
            reasons.append(f"Referenced by {len(references)} files")
        if is_core_config:
            reasons.append("Core configuration file")
        if is_migration:
            reasons.append("Database migration file")

        if not reasons:
            logger.debug(f"No dependency signal for {file_path}")
            return None

        essential = (
            is_autoloaded
            or is_manifest
            or is_core_config
            or is_migration
            or len(dependencies) > 3
            or len(references) > 2
        )

        confidence = 0
        if is_autoloaded:
            confidence += 30
        if is_manifest:
            confidence += 40
        if is_core_config:
            confidence += 35
        if is_migration:
            confidence += 35
        confidence += min(20, len(dependencies) * 3)
        confidence += min(15, len(references) * 5)

        metadata: Dict[str, Any] = {
            "is_psr4_file": is_autoloaded,
            "is_manifest": is_manifest,
            "is_core_config": is_core_config,
            "is_migration": is_migration,
            "dependency_count": len(dependencies),
            "reference_count": len(references),
        }

        return ClassificationResult(
            file_path=file_path,
            category=Category.ESSENTIAL if essential else Category.UNCERTAIN,
            confidence_score=min(100, confidence),
            reasons=reasons,
            dependencies=dependencies,
            references=references,
            recommended_action=RecommendedAction.KEEP if essential else None,
            metadata=metadata,
        )
