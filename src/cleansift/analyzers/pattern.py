"""
Path-pattern analyzer.

Classifies files purely from their relative path: well-known names of
test, debug, backup, documentation, temporary and development files,
essential manifests and entry points, file extensions and top-level
directories. It never reads file contents, so it can analyze any path.

cleansift/src/cleansift/analyzers/pattern.py
"""

import re
from typing import Dict, List, Optional, Pattern, Tuple

from ..models import Category, ClassificationResult, RecommendedAction
from .base import AnalyzerKind, BaseAnalyzer
from .registry import register_analyzer

__all__ = ["PatternAnalyzer"]


def _compile(*patterns: str, flags: int = re.IGNORECASE) -> Tuple[Pattern[str], ...]:
    return tuple(re.compile(p, flags) for p in patterns)


# (pattern type, reason, non-essential confidence, patterns)
_NON_ESSENTIAL_GROUPS: Tuple[Tuple[str, str, int, Tuple[Pattern[str], ...]], ...] = (
    (
        "test",
        "Matches test file pattern",
        85,
        _compile(
            r"(^|/)test[_-][^/]*\.\w+$",
            r"[_-]test\.\w+$",
            r"(^|/)[^/]*Test\.(php|java|kt|cs)$",
            r"(^|/)tests?/",
            r"(^|/)conftest\.py$",
        ),
    ),
    (
        "debug",
        "Matches debug file pattern",
        90,
        _compile(
            r"(^|/)debug[_-][^/]*\.(php|py|html|js)$",
            r"[_-]debug\.(php|py|html|js)$",
            r"\.debug\.(php|py|html|js)$",
            r"(^|/)debug/",
        ),
    ),
    (
        "backup",
        "Matches backup file pattern",
        95,
        _compile(
            r"[_-]backup\.\w+$",
            r"\.(backup|bak|old|orig)$",
            r"~$",
            r"[_-]copy\.\w+$",
            r"(^|/)(backups?|old)/",
        ),
    ),
    (
        "documentation",
        "Matches documentation file pattern",
        80,
        _compile(
            r"\.(md|rst|txt|docx?|pdf)$",
            r"(^|/)(readme|changelog|license|contributing)[^/]*$",
            r"(^|/)(docs?|documentation)/",
        ),
    ),
    (
        "temporary",
        "Matches temporary file pattern",
        95,
        _compile(
            r"\.(tmp|temp|cache|log|swp|swo)$",
            r"(^|/)\.DS_Store$",
            r"(^|/)Thumbs\.db$",
            r"(^|/)(tmp|temp|cache)/",
        ),
    ),
    (
        "development",
        "Matches development script pattern",
        75,
        _compile(
            r"(^|/)(setup|install|build|deploy|reset|check|validate)[_-][^/]*\.(php|py|sh)$",
            r"(^|/)troubleshoot[^/]*\.(php|py|sh)$",
            r"\.sh$",
            r"(^|/)(scripts|tools|utils)/",
        ),
    ),
)

_ESSENTIAL_PATTERNS = _compile(
    r"^src/",
    r"^public/(index|api)\.php$",
    r"^database/(migrations|seeds)/",
    r"^(composer\.(json|lock)|package\.json|pyproject\.toml|setup\.(py|cfg))$",
    r"^\.env(\.example)?$",
    r"^(docker-compose\.ya?ml|Dockerfile)$",
    r"^(phpunit\.xml|phpstan\.neon|phpcs\.xml)$",
    flags=0,
)

# extension -> (file type, category, confidence, reason)
_EXTENSIONS: Dict[str, Tuple[str, Category, int, str]] = {
    "php": ("php_source", Category.UNCERTAIN, 30, "PHP source file"),
    "py": ("python_source", Category.UNCERTAIN, 30, "Python source file"),
    "js": ("javascript", Category.UNCERTAIN, 30, "JavaScript file"),
    "css": ("stylesheet", Category.UNCERTAIN, 30, "CSS stylesheet"),
    "html": ("html", Category.UNCERTAIN, 30, "HTML file"),
    "json": ("json", Category.UNCERTAIN, 40, "JSON configuration file"),
    "toml": ("toml", Category.UNCERTAIN, 40, "TOML configuration file"),
    "yml": ("yaml", Category.UNCERTAIN, 40, "YAML configuration file"),
    "yaml": ("yaml", Category.UNCERTAIN, 40, "YAML configuration file"),
    "xml": ("xml", Category.UNCERTAIN, 40, "XML configuration file"),
    "md": ("markdown", Category.NON_ESSENTIAL, 70, "Markdown documentation"),
    "txt": ("text", Category.NON_ESSENTIAL, 60, "Text file"),
    "doc": ("document", Category.NON_ESSENTIAL, 80, "Word document"),
    "docx": ("document", Category.NON_ESSENTIAL, 80, "Word document"),
    "pdf": ("document", Category.NON_ESSENTIAL, 80, "PDF document"),
    "log": ("log", Category.NON_ESSENTIAL, 85, "Log file"),
    "tmp": ("temporary", Category.NON_ESSENTIAL, 95, "Temporary file"),
    "temp": ("temporary", Category.NON_ESSENTIAL, 95, "Temporary file"),
    "cache": ("cache", Category.NON_ESSENTIAL, 90, "Cache file"),
    "bak": ("backup", Category.NON_ESSENTIAL, 95, "Backup file"),
    "backup": ("backup", Category.NON_ESSENTIAL, 95, "Backup file"),
    "old": ("backup", Category.NON_ESSENTIAL, 90, "Old/backup file"),
    "orig": ("backup", Category.NON_ESSENTIAL, 90, "Original backup file"),
    "sh": ("shell_script", Category.NON_ESSENTIAL, 70, "Shell script"),
    "png": ("image", Category.UNCERTAIN, 20, "Image file"),
    "jpg": ("image", Category.UNCERTAIN, 20, "Image file"),
    "jpeg": ("image", Category.UNCERTAIN, 20, "Image file"),
    "gif": ("image", Category.UNCERTAIN, 20, "Image file"),
    "svg": ("image", Category.UNCERTAIN, 30, "SVG image file"),
}

# leading directory -> (directory type, category, confidence, reason); first match wins
_DIRECTORIES: Tuple[Tuple[str, str, Category, int, str], ...] = (
    ("src/", "source", Category.ESSENTIAL, 90, "In source code directory"),
    ("public/", "public", Category.ESSENTIAL, 85, "In public web directory"),
    ("database/migrations/", "migration", Category.ESSENTIAL, 95, "Database migration"),
    ("database/seeds/", "seed", Category.ESSENTIAL, 85, "Database seed"),
    ("config/", "config", Category.ESSENTIAL, 85, "Configuration directory"),
    ("bootstrap/", "bootstrap", Category.ESSENTIAL, 85, "Bootstrap directory"),
    ("tests/", "test", Category.NON_ESSENTIAL, 80, "In test directory"),
    ("test/", "test", Category.NON_ESSENTIAL, 80, "In test directory"),
    ("docs/", "documentation", Category.NON_ESSENTIAL, 85, "In documentation directory"),
    ("documentation/", "documentation", Category.NON_ESSENTIAL, 85, "In documentation directory"),
    ("backup/", "backup", Category.NON_ESSENTIAL, 95, "In backup directory"),
    ("backups/", "backup", Category.NON_ESSENTIAL, 95, "In backup directory"),
    ("tmp/", "temporary", Category.NON_ESSENTIAL, 95, "In temporary directory"),
    ("temp/", "temporary", Category.NON_ESSENTIAL, 95, "In temporary directory"),
    ("cache/", "cache", Category.NON_ESSENTIAL, 90, "In cache directory"),
    ("logs/", "logs", Category.NON_ESSENTIAL, 85, "In logs directory"),
)

_DEFAULT_ACTIONS = {
    Category.ESSENTIAL: RecommendedAction.KEEP,
    Category.NON_ESSENTIAL: RecommendedAction.MOVE,
    Category.UNCERTAIN: RecommendedAction.REVIEW,
}


@register_analyzer
class PatternAnalyzer(BaseAnalyzer):
    """Classifies files by naming patterns, extension and directory."""

    category = "pattern"
    description = "Naming, extension and directory conventions"
    priority = 70
    kind = AnalyzerKind.PATTERN

    def analyze(self, file_path: str) -> ClassificationResult:
        path = file_path.replace("\\", "/")
        reasons: List[str] = []
        metadata: Dict[str, str] = {}
        category = Category.UNCERTAIN
        confidence = 0

        matched = self._match_groups(path)
        if matched:
            for pattern_type, reason, _ in matched:
                reasons.append(reason)
                metadata["pattern_type"] = pattern_type
            category = Category.NON_ESSENTIAL
            confidence = max(group_confidence for _, _, group_confidence in matched)
        elif any(p.search(path) for p in _ESSENTIAL_PATTERNS):
            category = Category.ESSENTIAL
            confidence = 85
            reasons.append("Matches essential file pattern")

        extension = self._extension_info(path)
        if extension:
            file_type, ext_category, ext_confidence, reason = extension
            reasons.append(reason)
            metadata["file_type"] = file_type
            if ext_category is not Category.UNCERTAIN:
                category = ext_category
            confidence = max(confidence, ext_confidence)

        directory = self._directory_info(path)
        if directory:
            dir_type, dir_category, dir_confidence, reason = directory
            reasons.append(reason)
            metadata["directory_type"] = dir_type
            if dir_category is not Category.UNCERTAIN:
                category = dir_category
            confidence = max(confidence, dir_confidence)

        if not reasons:
            reasons.append("No specific patterns matched")
            confidence = 10

        return ClassificationResult(
            file_path=file_path,
            category=category,
            confidence_score=confidence,
            reasons=reasons,
            recommended_action=_DEFAULT_ACTIONS[category],
            metadata=metadata,
        )

    @staticmethod
    def _match_groups(path: str) -> List[Tuple[str, str, int]]:
        return [
            (pattern_type, reason, confidence)
            for pattern_type, reason, confidence, patterns in _NON_ESSENTIAL_GROUPS
            if any(p.search(path) for p in patterns)
        ]

    @staticmethod
    def _extension_info(path: str) -> Optional[Tuple[str, Category, int, str]]:
        name = path.rsplit("/", 1)[-1]
        if "." not in name.lstrip("."):
            return None
        return _EXTENSIONS.get(name.rsplit(".", 1)[-1].lower())

    @staticmethod
    def _directory_info(path: str) -> Optional[Tuple[str, Category, int, str]]:
        for prefix, dir_type, dir_category, confidence, reason in _DIRECTORIES:
            if path.startswith(prefix):
                return dir_type, dir_category, confidence, reason
        return None
