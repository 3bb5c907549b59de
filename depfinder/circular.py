"""One-hop circular dependency check."""

import dataclasses
from typing import Optional

from .aliases import AliasTable
from .config import DependentsOptions
from .dependencies import find_dependencies


def is_circular_dependency(
    query_path: str,
    dependent_path: str,
    options: DependentsOptions,
    alias_table: Optional[AliasTable] = None,
) -> bool:
    """True if `query_path` itself imports `dependent_path`.

    Both paths are absolute. The nested lookup runs on a copy of the options
    with circularity turned off, so recursion stops after one level.
    """
    nested = dataclasses.replace(options, circular=False, only_circular=False, root=None)
    deps = find_dependencies([query_path], nested, alias_table)
    return any(
        dependency.import_absolute_path == dependent_path
        for dependency in deps[query_path].dependencies
    )
