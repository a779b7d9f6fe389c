"""
Usage analyzer.

Classifies files by how the rest of the project uses them: linked as
assets, imported or included by other files, entry points, migrations and
templates. Unreferenced files that look like leftovers (test, debug,
backup or old copies) are flagged as potentially unused.

cleansift/src/cleansift/analyzers/usage.py
"""

import posixpath
import re
from pathlib import Path
from typing import Any, Dict, List, Optional

from ..models import Category, ClassificationResult, RecommendedAction
from .base import AnalyzerKind, BaseAnalyzer
from .references import ReferenceIndex
from .registry import register_analyzer

__all__ = ["UsageAnalyzer"]

ENTRY_POINTS = {
    "index.php": "main_entry",
    "public/index.php": "main_entry",
    "public/api.php": "api_entry",
    "public/login.php": "auth_entry",
    "public/register.php": "auth_entry",
    "public/admin.php": "admin_entry",
    "manage.py": "management_entry",
}

# module entry points, matched on the file name anywhere in the tree
ENTRY_POINT_NAMES = {
    "__main__.py": "module_entry",
    "wsgi.py": "wsgi_entry",
    "asgi.py": "asgi_entry",
}

CONFIG_FILES = frozenset(
    {"composer.json", ".env", "docker-compose.yml", "phpunit.xml", "pyproject.toml", "setup.py"}
)

_MIGRATION_RE = re.compile(r"(^|/)migrations/(\d{3,})_[^/]+$")
_TEMPLATE_RE = re.compile(r"(template|view|partial|component)", re.IGNORECASE)
_PAGE_TEMPLATE_RE = re.compile(r"(^|/)(dashboard|landing)\.php$")

_UNUSED_PATTERNS = tuple(
    re.compile(p)
    for p in (
        r"(^|/)test[_-][^/]*\.(php|py)$",
        r"[_-]test\.(php|py)$",
        r"(^|/)debug[^/]*\.(php|py)$",
        r"debug\.(php|py)$",
        r"(^|/)backup[^/]*\.(php|html|js|css|py)$",
        r"backup\.(php|html|js|css|py)$",
        r"(^|/)old[^/]*\.(php|html|js|css|py)$",
        r"\.old$",
        r"\.bak$",
    )
)


@register_analyzer
class UsageAnalyzer(BaseAnalyzer):
    """Classifies files by references from the rest of the project."""

    category = "usage"
    description = "Asset links, imports/includes, entry points and unused leftovers"
    priority = 80
    kind = AnalyzerKind.USAGE

    def __init__(self, project_root: Optional[Path] = None, index: Optional[ReferenceIndex] = None):
        super().__init__(project_root)
        self._index = index

    @property
    def index(self) -> ReferenceIndex:
        if self._index is None:
            if self.project_root is None:
                raise ValueError("UsageAnalyzer needs a project root or a reference index")
            self._index = ReferenceIndex.build(self.project_root)
        return self._index

    def analyze(self, file_path: str) -> Optional[ClassificationResult]:
        index = self.index
        asset_refs = index.asset_users_of(file_path)
        include_refs = index.importers_of(file_path)
        entry_point = ENTRY_POINTS.get(file_path) or ENTRY_POINT_NAMES.get(
            posixpath.basename(file_path)
        )
        migration = _MIGRATION_RE.search(file_path)
        template = self._template_usage(file_path)
        references = sorted(set(asset_refs) | set(include_refs))
        unused = self._looks_unused(file_path, references, entry_point)

        reasons: List[str] = []
        metadata: Dict[str, Any] = {"reference_count": len(references)}
        if asset_refs:
            reasons.append(f"Referenced in {len(asset_refs)} files as asset")
            metadata["asset_references"] = asset_refs
        if migration:
            reasons.append("Active database migration")
            metadata["migration_order"] = int(migration.group(2))
        if include_refs:
            reasons.append(f"Imported or included by {len(include_refs)} files")
            metadata["include_references"] = include_refs
        if template:
            reasons.append("Used as template or view")
            metadata["template_usage"] = template
        if entry_point:
            reasons.append("Application entry point")
            metadata["entry_point_type"] = entry_point
        if unused:
            reasons.append("No references found - potentially unused")
            metadata["potentially_unused"] = True

        if not reasons:
            return None

        essential = (
            entry_point or migration or asset_refs or len(include_refs) > 1 or (template and include_refs)
        )
        if essential:
            category = Category.ESSENTIAL
            action: Optional[RecommendedAction] = RecommendedAction.KEEP
        elif unused:
            category = Category.NON_ESSENTIAL
            action = RecommendedAction.MOVE
        else:
            category = Category.UNCERTAIN
            action = None

        confidence = 0
        if entry_point:
            confidence += 40
        if migration:
            confidence += 35
        confidence += min(25, len(asset_refs) * 5)
        confidence += min(20, len(include_refs) * 3)
        if template:
            confidence += 25
        if unused:
            confidence += 30

        return ClassificationResult(
            file_path=file_path,
            category=category,
            confidence_score=min(100, max(10, confidence)),
            reasons=reasons,
            references=references,
            recommended_action=action,
            metadata=metadata,
        )

    @staticmethod
    def _template_usage(file_path: str) -> Optional[str]:
        if not file_path.endswith((".php", ".html")):
            return None
        if _PAGE_TEMPLATE_RE.search(file_path):
            return "page_template"
        if _TEMPLATE_RE.search(file_path):
            return "template"
        return None

    @staticmethod
    def _looks_unused(file_path: str, references: List[str], entry_point: Optional[str]) -> bool:
        if references or entry_point:
            return False
        if file_path in CONFIG_FILES or file_path.startswith("src/"):
            return False
        return any(p.search(file_path) for p in _UNUSED_PATTERNS)
