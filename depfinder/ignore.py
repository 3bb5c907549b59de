"""Candidate file enumeration with gitignore-style exclusions.

Uses the pathspec library for gitignore-compatible pattern matching.

Patterns are applied in order, so later ones can re-include with `!`:
1. Default patterns (dependencies, test specs, declaration files)
2. .depfinderignore in the search root, if present
3. Extra patterns passed by the caller (`--exclude`)
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import TYPE_CHECKING, Iterable, Iterator

if TYPE_CHECKING:
    from pathspec import PathSpec

logger = logging.getLogger(__name__)

IGNORE_FILE = ".depfinderignore"

# Files that can never be dependents
DEFAULT_PATTERNS = (
    "node_modules/",
    "*.spec.js",
    "*.d.ts",
)

SOURCE_EXTENSIONS = (".js", ".ts")


def load_ignore_patterns(search_dir: str | Path, extra: Iterable[str] = ()) -> "PathSpec":
    """Build the exclusion matcher for a search directory.

    Args:
        search_dir: Directory the candidates are enumerated from
        extra: Additional gitignore-style patterns

    Returns:
        PathSpec matcher for checking if files should be skipped
    """
    import pathspec

    patterns: list[str] = list(DEFAULT_PATTERNS)

    ignore_path = Path(search_dir) / IGNORE_FILE
    if ignore_path.exists():
        patterns.extend(ignore_path.read_text().splitlines())
        logger.debug(f"Loaded ignore patterns from {ignore_path}")

    patterns.extend(extra)
    return pathspec.PathSpec.from_lines("gitwildmatch", patterns)


def should_ignore(rel_path: str, spec: "PathSpec") -> bool:
    """Check a path relative to the search directory (dirs end with `/`)."""
    return spec.match_file(rel_path.replace(os.sep, "/"))


def scan_candidates(
    search_dir: str | Path,
    exclude: Iterable[str] = (),
    skip: Iterable[str] = (),
) -> Iterator[str]:
    """Yield `.js` and `.ts` files under `search_dir` in a stable order.

    Directories are walked depth-first with sorted names; ignored directories
    are pruned. Paths keep the form of `search_dir` (relative stays relative).

    Args:
        search_dir: Directory to enumerate
        exclude: Extra gitignore-style patterns
        skip: Absolute paths never yielded (the query file itself)
    """
    spec = load_ignore_patterns(search_dir, exclude)
    skip_abs = {os.path.abspath(p) for p in skip}
    search_dir = os.fspath(search_dir) or "."

    for dirpath, dirnames, filenames in os.walk(search_dir):
        rel_dir = os.path.relpath(dirpath, search_dir)
        # Modifying dirnames in-place prunes os.walk
        dirnames[:] = sorted(
            d for d in dirnames
            if not should_ignore(os.path.normpath(os.path.join(rel_dir, d)) + "/", spec)
        )

        for filename in sorted(filenames):
            if not filename.endswith(SOURCE_EXTENSIONS):
                continue
            file_path = os.path.normpath(os.path.join(dirpath, filename))
            if os.path.abspath(file_path) in skip_abs:
                continue
            if should_ignore(os.path.normpath(os.path.join(rel_dir, filename)), spec):
                continue
            yield file_path
