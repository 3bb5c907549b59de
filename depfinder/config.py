"""Run options for dependents and dependencies lookups."""

import os
from dataclasses import dataclass
from typing import Optional

# Tree-sitter memory usage is ~10-200x file size; override with DEPFINDER_MAX_FILE_SIZE
DEFAULT_MAX_FILE_SIZE = 5_000_000  # 5MB
MAX_FILE_SIZE = int(os.environ.get("DEPFINDER_MAX_FILE_SIZE", DEFAULT_MAX_FILE_SIZE))


@dataclass(frozen=True)
class DependentsOptions:
    """Options shared by every query file of a run.

    Attributes:
        root: Search directory; defaults to each query file's own directory.
        alias_config: Path of a JSON alias table (bundler `resolve.alias`).
        specifiers: Populate specifier details on each edge.
        circular: Compute `is_circular_dependency` for each dependent.
        only_circular: Like `circular`, but keep only circular dependents.
        only_not_found: Report only query files with no dependents at all.
        exclude: Extra gitignore-style patterns excluded from the search.
    """

    root: Optional[str] = None
    alias_config: Optional[str] = None
    specifiers: bool = False
    circular: bool = False
    only_circular: bool = False
    only_not_found: bool = False
    exclude: tuple[str, ...] = ()

    @property
    def check_circular(self) -> bool:
        return self.circular or self.only_circular
