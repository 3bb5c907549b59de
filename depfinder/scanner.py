"""
Dependents discovery.

For every query file matched by the input globs, scans the `.js`/`.ts` files
of its search directory and records each file that imports it.

Key functions:
- expand_globs(patterns) - resolve input globs against the working directory
- build_prefilter(query) - cheap textual test run before parsing a candidate
- find_dependents(globs, options) - orchestrate the scan for every query file
"""

import glob
import logging
import os
import re
from dataclasses import dataclass
from typing import Iterable, Optional

from .aliases import AliasTable, load_alias_config
from .circular import is_circular_dependency
from .config import DependentsOptions
from .ignore import scan_candidates
from .import_extractor import FileTooLargeError, ParseError, extract_edges, read_source
from .models import CandidateFile, ImportEdge, QueryFile, ResultEntry
from .resolver import PathResolver

logger = logging.getLogger(__name__)

IMPORT_TOKEN = re.compile(r"\brequire\s*\(|\bimport\b")

# './', '..', '../..' and friends: reaches a file without naming it
DOT_ONLY_PATH = r"['\"`](?:\.\.?/)*\.\.?/?['\"`]"


def expand_globs(patterns: Iterable[str]) -> list[str]:
    """Expand input patterns against the current working directory.

    `**` matches across directories. Patterns starting with `!` remove
    matches of the positive patterns. Order follows the positive patterns,
    each sorted, without duplicates.
    """
    import pathspec

    positive = []
    negative = []
    for pattern in patterns:
        if pattern.startswith("!"):
            negative.append(pattern[1:])
        else:
            positive.append(pattern)
    negation_spec = pathspec.PathSpec.from_lines("gitwildmatch", negative) if negative else None

    seen = set()
    files = []
    for pattern in positive:
        for path in sorted(glob.glob(pattern, recursive=True)):
            if not os.path.isfile(path) or path in seen:
                continue
            if negation_spec is not None and negation_spec.match_file(path.replace(os.sep, "/")):
                continue
            seen.add(path)
            files.append(path)
    return files


def build_prefilter(query: QueryFile) -> re.Pattern:
    """Pattern that any file able to import `query` must contain.

    Matches the base name (with and without extension) followed by a quote,
    possibly after a trailing slash, an alias spelling preceded by a quote,
    or a dots-only relative path.
    """
    alternatives = [DOT_ONLY_PATH]
    for name in sorted({query.base_name, query.base_name_no_ext}):
        alternatives.append(re.escape(name) + r"/?['\"`]")
    for alias in query.alias_names:
        alternatives.append(r"['\"`]" + re.escape(alias))
    return re.compile("|".join(alternatives))


def prefilter(text: str, reference: re.Pattern) -> bool:
    """True if `text` may import the query file and has to be parsed."""
    return IMPORT_TOKEN.search(text) is not None and reference.search(text) is not None


@dataclass
class ScanState:
    """Progress of the scan for one query file."""

    entry: ResultEntry
    found_dependent: bool = False


def _match_candidate(
    path: str,
    query: QueryFile,
    reference: re.Pattern,
    resolver: PathResolver,
    with_specifiers: bool,
) -> Optional[ImportEdge]:
    """Return the first edge of `path` that targets `query`, if any."""
    try:
        source = read_source(path)
    except (OSError, FileTooLargeError) as e:
        logger.warning(f"Could not read {path}: {e}")
        return None

    if not prefilter(source.decode("utf-8", errors="replace"), reference):
        logger.debug(f"Skipping {path}: no reference to {query.base_name}")
        return None

    try:
        partial_edges = extract_edges(path, source, with_specifiers)
    except ParseError as e:
        logger.warning(str(e))
        return None

    candidate = CandidateFile.from_path(path)
    for partial in partial_edges:
        resolved = resolver.resolve(partial.import_path, candidate.path, query.is_ts)
        if resolved is None:
            continue
        if resolved.import_absolute_path == query.absolute_path:
            return ImportEdge(
                file_path=candidate.path,
                file_absolute_path=candidate.absolute_path,
                import_path=resolved.import_path,
                import_absolute_path=resolved.import_absolute_path,
                specifiers=partial.specifiers,
            )
    return None


def scan_query(
    query: QueryFile,
    options: DependentsOptions,
    resolver: PathResolver,
) -> ScanState:
    """Scan the search directory of `query` for files importing it."""
    search_dir = options.root or os.path.dirname(query.path) or "."
    reference = build_prefilter(query)
    state = ScanState(ResultEntry(query.absolute_path))

    for path in scan_candidates(search_dir, options.exclude, skip=[query.absolute_path]):
        edge = _match_candidate(path, query, reference, resolver, options.specifiers)
        if edge is None:
            continue

        state.found_dependent = True
        if options.only_not_found:
            break

        if options.check_circular:
            edge.is_circular_dependency = is_circular_dependency(
                query.absolute_path, edge.file_absolute_path, options, resolver.alias_table
            )
        if options.only_circular and not edge.is_circular_dependency:
            continue
        state.entry.dependents.append(edge)

    return state


def find_dependents(
    globs: Iterable[str],
    options: Optional[DependentsOptions] = None,
    alias_table: Optional[AliasTable] = None,
) -> dict[str, ResultEntry]:
    """Find the files importing each file matched by `globs`.

    Args:
        globs: Patterns for the query files, relative to the working directory
        options: Run options; defaults to DependentsOptions()
        alias_table: Pre-loaded alias table; loaded from
                     `options.alias_config` when not given

    Returns:
        Mapping of input path -> ResultEntry. With `only_not_found`, only
        query files without dependents are present.
    """
    if options is None:
        options = DependentsOptions()
    if alias_table is None and options.alias_config:
        alias_table = load_alias_config(options.alias_config)
    resolver = PathResolver(alias_table)

    result: dict[str, ResultEntry] = {}
    for input_file in expand_globs(globs):
        query = QueryFile.from_path(input_file, alias_table)
        state = scan_query(query, options, resolver)
        if options.only_not_found and state.found_dependent:
            logger.debug(f"{input_file} has dependents, dropped from result")
            continue
        result[input_file] = state.entry
        logger.info(f"{input_file}: {state.entry.files} dependent(s)")

    return result
