"""
File discovery routines for cleansift.

Walks a project root and produces sorted, '/'-separated relative paths,
skipping anything whose relative path starts with an excluded prefix.
Excluded directories are pruned during the walk rather than filtered
afterwards.

cleansift/discovery.py
"""

import logging
import os
import time
from pathlib import Path
from typing import Iterable, List, Optional

__all__ = ["DEFAULT_EXCLUDE_PATTERNS", "discover_files", "is_excluded", "find_project_root"]
logger = logging.getLogger(__name__)

# Version control, vendored dependencies, package-manager cache, tooling config.
DEFAULT_EXCLUDE_PATTERNS = (".git", "vendor", "node_modules", ".kiro")


def is_excluded(relative_path: str, exclude_patterns: Iterable[str]) -> bool:
    """
    Checks whether a relative path falls under an excluded prefix.

    A pattern excludes the path equal to it and everything below it;
    ``vendor`` excludes ``vendor/autoload.php`` but not ``vendors.txt``.

    cleansift/discovery.py
    """
    normalized = relative_path.replace("\\", "/")
    for pattern in exclude_patterns:
        prefix = pattern.replace("\\", "/").strip("/")
        if not prefix:
            continue
        if normalized == prefix or normalized.startswith(prefix + "/"):
            return True
    return False


def discover_files(project_root: Path, exclude_patterns: Iterable[str] = ()) -> List[str]:
    """
    Lists every file below ``project_root`` as a relative path.

    Args:
    project_root: Directory to walk.
    exclude_patterns: Relative path prefixes to skip.

    Returns:
    A sorted list of '/'-separated paths relative to ``project_root``.

    Raises:
    ValueError: If ``project_root`` is not a directory.

    cleansift/discovery.py
    """
    root = Path(project_root).resolve()
    if not root.is_dir():
        raise ValueError(f"Project root {root} is not a directory")

    patterns = list(exclude_patterns)
    logger.debug(f"Starting file discovery from project root: {root}")
    logger.debug(f"Exclude patterns: {patterns}")
    start_time = time.time()

    files: List[str] = []
    pruned = 0
    for dirpath, dirnames, filenames in os.walk(root):
        rel_dir = Path(dirpath).relative_to(root).as_posix()
        rel_dir = "" if rel_dir == "." else rel_dir + "/"

        kept_dirs = []
        for name in dirnames:
            if is_excluded(rel_dir + name, patterns):
                pruned += 1
                continue
            kept_dirs.append(name)
        dirnames[:] = kept_dirs

        for name in filenames:
            relative = rel_dir + name
            if not is_excluded(relative, patterns):
                files.append(relative)

    files.sort()
    logger.debug(
        f"Discovery found {len(files)} files in {time.time() - start_time:.3f}s "
        f"({pruned} directories pruned)"
    )
    return files


def find_project_root(start_path: Path) -> Optional[Path]:
    """
    Walks up from ``start_path`` to the nearest directory holding a
    pyproject.toml or a .git directory.

    cleansift/discovery.py
    """
    current = Path(start_path).resolve()
    if current.is_file():
        current = current.parent
    for candidate in [current] + list(current.parents):
        if (candidate / "pyproject.toml").exists() or (candidate / ".git").exists():
            return candidate
    return None
