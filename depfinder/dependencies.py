"""Reverse lookup: the files a given file imports."""

import logging
from typing import Iterable, Optional

from .aliases import AliasTable, load_alias_config
from .config import DependentsOptions
from .import_extractor import FileTooLargeError, ParseError, extract_edges, read_source
from .models import CandidateFile, DependencyEntry, ImportEdge
from .resolver import PathResolver

logger = logging.getLogger(__name__)


def find_dependencies(
    paths: Iterable[str],
    options: Optional[DependentsOptions] = None,
    alias_table: Optional[AliasTable] = None,
) -> dict[str, DependencyEntry]:
    """Resolve every import/require of each file in `paths`.

    Never checks circularity, so it is safe to call from the circular check.
    Unreadable or unparseable files get an empty dependency list.

    Returns:
        Mapping of path -> DependencyEntry, imports in source order
    """
    if options is None:
        options = DependentsOptions()
    if alias_table is None and options.alias_config:
        alias_table = load_alias_config(options.alias_config)
    resolver = PathResolver(alias_table)

    result: dict[str, DependencyEntry] = {}
    for path in paths:
        file = CandidateFile.from_path(path)
        entry = DependencyEntry(file.absolute_path)
        result[path] = entry

        try:
            source = read_source(path)
            partial_edges = extract_edges(path, source, options.specifiers)
        except (OSError, FileTooLargeError, ParseError) as e:
            logger.warning(f"Could not collect imports of {path}: {e}")
            continue

        for partial in partial_edges:
            resolved = resolver.resolve(partial.import_path, file.path)
            if resolved is None:
                continue
            entry.dependencies.append(ImportEdge(
                file_path=file.path,
                file_absolute_path=file.absolute_path,
                import_path=resolved.import_path,
                import_absolute_path=resolved.import_absolute_path,
                specifiers=partial.specifiers,
            ))

    return result
