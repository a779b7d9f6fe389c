"""
Project-wide reference index shared by the dependency and usage analyzers.

Walks the project once and records, for every source file, which other
project files it imports, includes or links as an asset. Only targets
that resolve to a file inside the project are kept.

- Python: ``import`` / ``from ... import`` statements, parsed with ``ast``
- PHP: ``include`` / ``require`` paths and ``use`` statements mapped
  through the PSR-4 table in composer.json
- HTML/PHP/CSS: ``href``/``src`` attributes and ``url(...)`` asset links

cleansift/src/cleansift/analyzers/references.py
"""

import ast
import json
import logging
import posixpath
import re
from collections import defaultdict
from pathlib import Path
from typing import Dict, FrozenSet, Iterable, List, Optional, Set

from ..discovery import DEFAULT_EXCLUDE_PATTERNS, discover_files

__all__ = ["ReferenceIndex", "MAX_INDEXED_FILE_SIZE"]

logger = logging.getLogger(__name__)

MAX_INDEXED_FILE_SIZE = 1_000_000

_INCLUDE_RE = re.compile(
    r"(?:include|require)(?:_once)?\s*\(?\s*(?:__DIR__\s*\.\s*)?['\"]([^'\"]+)['\"]"
)
_USE_RE = re.compile(r"^use\s+([^;]+);", re.MULTILINE)
_ASSET_ATTR_RE = re.compile(
    r"(?:href|src)=[\"']([^\"']+\.(?:css|js|png|jpe?g|gif|svg))(?:\?[^\"']*)?[\"']",
    re.IGNORECASE,
)
_CSS_URL_RE = re.compile(r"url\(\s*[\"']?([^\"')]+\.(?:png|jpe?g|gif|svg|woff2?|ttf))[\"']?\s*\)")

_ASSET_HOSTS = (".php", ".html", ".htm", ".css")
_ASSET_PREFIXES = ("", "public/", "public/assets/", "assets/")
_PYTHON_SOURCE_ROOTS = ("", "src/")


def _normalize(path: str) -> str:
    normalized = posixpath.normpath(path)
    return "" if normalized == "." else normalized.lstrip("/")


class ReferenceIndex:
    """
    Forward and reverse file references for one project.

    Args:
        files: Every relative path in the project.
        imports: Source file -> project files it imports or includes.
        assets: Host file -> asset files it links.
        psr4: Namespace prefix -> directory from composer.json autoload tables.
    """

    def __init__(
        self,
        files: Iterable[str],
        imports: Dict[str, Set[str]],
        assets: Dict[str, Set[str]],
        psr4: Optional[Dict[str, str]] = None,
    ):
        self.files: FrozenSet[str] = frozenset(files)
        self._imports = {path: set(targets) for path, targets in imports.items()}
        self._assets = {path: set(targets) for path, targets in assets.items()}
        self.psr4: Dict[str, str] = dict(psr4 or {})

        self._importers: Dict[str, Set[str]] = defaultdict(set)
        for source, targets in self._imports.items():
            for target in targets:
                self._importers[target].add(source)
        self._asset_users: Dict[str, Set[str]] = defaultdict(set)
        for host, targets in self._assets.items():
            for target in targets:
                self._asset_users[target].add(host)

    # --- Queries ---

    def dependencies_of(self, path: str) -> List[str]:
        return sorted(self._imports.get(path, ()))

    def importers_of(self, path: str) -> List[str]:
        return sorted(self._importers.get(path, ()))

    def asset_users_of(self, path: str) -> List[str]:
        return sorted(self._asset_users.get(path, ()))

    def is_autoloaded(self, path: str) -> bool:
        """Whether a PHP file lives under a PSR-4 autoload directory."""
        if not path.endswith(".php"):
            return False
        for directory in self.psr4.values():
            prefix = directory.strip("/") + "/"
            if prefix != "/" and path.startswith(prefix):
                return True
        return False

    # --- Construction ---

    @classmethod
    def build(
        cls, project_root: Path, exclude_patterns: Iterable[str] = DEFAULT_EXCLUDE_PATTERNS
    ) -> "ReferenceIndex":
        """Walk ``project_root`` and index every readable source file."""
        root = Path(project_root)
        files = discover_files(root, exclude_patterns)
        known = frozenset(files)
        psr4 = cls._load_psr4(root)
        logger.debug(f"Building reference index for {len(files)} files under {root}")

        imports: Dict[str, Set[str]] = {}
        assets: Dict[str, Set[str]] = {}
        for relative in files:
            suffix = posixpath.splitext(relative)[1].lower()
            if suffix != ".py" and suffix not in _ASSET_HOSTS:
                continue
            content = cls._read(root / relative)
            if content is None:
                continue

            if suffix == ".py":
                imports[relative] = cls._python_imports(relative, content, known)
            elif suffix == ".php":
                imports[relative] = cls._php_includes(relative, content, known, psr4)
            if suffix in _ASSET_HOSTS:
                assets[relative] = cls._asset_links(relative, content, known)

        return cls(files, imports, assets, psr4)

    @staticmethod
    def _read(path: Path) -> Optional[str]:
        try:
            if path.stat().st_size > MAX_INDEXED_FILE_SIZE:
                logger.debug(f"Skipping large file {path}")
                return None
            return path.read_text(encoding="utf-8", errors="replace")
        except OSError as e:
            logger.debug(f"Could not read {path}: {e}")
            return None

    @staticmethod
    def _load_psr4(root: Path) -> Dict[str, str]:
        composer = root / "composer.json"
        if not composer.is_file():
            return {}
        try:
            data = json.loads(composer.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning(f"Could not read autoload table from {composer}: {e}")
            return {}
        if not isinstance(data, dict):
            return {}

        psr4: Dict[str, str] = {}
        for section in ("autoload", "autoload-dev"):
            table = data.get(section, {})
            mapping = table.get("psr-4", {}) if isinstance(table, dict) else {}
            if isinstance(mapping, dict):
                for prefix, directory in mapping.items():
                    if isinstance(directory, str):
                        psr4[prefix] = directory
        return psr4

    # --- Python ---

    @classmethod
    def _python_imports(cls, relative: str, content: str, known: FrozenSet[str]) -> Set[str]:
        try:
            tree = ast.parse(content)
        except (SyntaxError, ValueError):
            logger.debug(f"Skipping unparsable Python file {relative}")
            return set()

        package = posixpath.dirname(relative).split("/") if "/" in relative else []
        found: Set[str] = set()
        for node in ast.walk(tree):
            if isinstance(node, ast.Import):
                for alias in node.names:
                    found.update(cls._resolve_module(alias.name.split("."), known))
            elif isinstance(node, ast.ImportFrom):
                module = node.module.split(".") if node.module else []
                if node.level:
                    depth = len(package) - (node.level - 1)
                    if depth < 0:
                        continue
                    base = package[:depth] + module
                    roots = ("",)
                else:
                    base = module
                    roots = _PYTHON_SOURCE_ROOTS
                found.update(cls._resolve_module(base, known, roots))
                for alias in node.names:
                    if alias.name != "*":
                        found.update(cls._resolve_module(base + [alias.name], known, roots))

        found.discard(relative)
        return found

    @staticmethod
    def _resolve_module(
        parts: List[str], known: FrozenSet[str], roots: Iterable[str] = _PYTHON_SOURCE_ROOTS
    ) -> Set[str]:
        if not parts:
            return set()
        stem = "/".join(parts)
        for root in roots:
            for candidate in (f"{root}{stem}.py", f"{root}{stem}/__init__.py"):
                if candidate in known:
                    return {candidate}
        return set()

    # --- PHP ---

    @classmethod
    def _php_includes(
        cls, relative: str, content: str, known: FrozenSet[str], psr4: Dict[str, str]
    ) -> Set[str]:
        found: Set[str] = set()
        directory = posixpath.dirname(relative)

        for include in _INCLUDE_RE.findall(content):
            candidates = [_normalize(posixpath.join(directory, include.lstrip("/")))]
            if include.startswith("/"):
                candidates.append(_normalize(include))
            found.update(c for c in candidates if c in known)

        for statement in _USE_RE.findall(content):
            target = cls._namespace_to_path(statement.strip(), psr4)
            if target in known:
                found.add(target)

        found.discard(relative)
        return found

    @staticmethod
    def _namespace_to_path(namespace: str, psr4: Dict[str, str]) -> str:
        namespace = namespace.split(" as ")[0].strip().lstrip("\\")
        for prefix, directory in psr4.items():
            prefix = prefix.rstrip("\\") + "\\"
            if namespace.startswith(prefix):
                remainder = namespace[len(prefix):].replace("\\", "/")
                return _normalize(posixpath.join(directory, remainder + ".php"))
        return namespace.replace("\\", "/") + ".php"

    # --- Assets ---

    @staticmethod
    def _asset_links(relative: str, content: str, known: FrozenSet[str]) -> Set[str]:
        found: Set[str] = set()
        directory = posixpath.dirname(relative)
        links = _ASSET_ATTR_RE.findall(content) + _CSS_URL_RE.findall(content)
        for link in links:
            if "://" in link or link.startswith("//"):
                continue
            stripped = link.lstrip("/")
            candidates = []
            if not link.startswith("/"):
                candidates.append(_normalize(posixpath.join(directory, link)))
            candidates.extend(_normalize(prefix + stripped) for prefix in _ASSET_PREFIXES)
            for candidate in candidates:
                if candidate in known:
                    found.add(candidate)
                    break
        found.discard(relative)
        return found
