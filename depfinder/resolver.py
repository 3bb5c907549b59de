"""Import path resolution.

Turns the path written in an import statement into an absolute filesystem
path the way a bundler would, without running one:

1. alias substitution (when an alias table is configured)
2. resolution relative to the importing file's directory
3. extension inference: `.ts` for TypeScript pairs, `.js` otherwise; a TS
   importer that can see a `.ts` sibling never binds to the `.js` file
"""

import logging
import os
from dataclasses import dataclass
from typing import Optional

from .aliases import AliasResolution, AliasTable

logger = logging.getLogger(__name__)


def _with_extension(import_path: str, ext: str) -> str:
    """`./foo/` + `.js` -> `./foo.js`; dots-only paths are left as written."""
    stem = import_path.rstrip("/")
    if os.path.basename(stem) in ("", ".", ".."):
        return import_path
    return stem + ext


@dataclass(frozen=True)
class ResolvedImport:
    """Import path as stored on the edge, plus its absolute target."""

    import_path: str
    import_absolute_path: str


class PathResolver:
    """Resolve import paths for one run; the alias table is read-only."""

    def __init__(self, alias_table: Optional[AliasTable] = None):
        self.alias_table = alias_table

    def resolve(
        self,
        import_path: str,
        importer: str,
        target_is_ts: Optional[bool] = None,
    ) -> Optional[ResolvedImport]:
        """Resolve `import_path` as written in `importer`.

        Args:
            import_path: Path literal from the import statement
            importer: Path of the file containing the statement
            target_is_ts: Whether the file being looked for is TypeScript.
                None when there is no such file (plain dependency lookup).

        Returns:
            ResolvedImport, or None when the edge must be discarded
        """
        importer_is_ts = importer.strip().endswith(".ts")

        alias = AliasResolution(module=import_path)
        if self.alias_table is not None:
            alias = self.alias_table.resolve(import_path)
            if alias.is_error:
                return None
            import_path = alias.module

        if alias.module_abs_path:
            abs_path = alias.module_abs_path
        else:
            abs_path = os.path.abspath(os.path.join(os.path.dirname(importer), import_path))

        if not os.path.splitext(abs_path)[1] or not os.path.exists(abs_path):
            if target_is_ts is None:
                inferred = self._infer_any(abs_path, importer_is_ts)
            else:
                inferred = self._infer_for_target(abs_path, importer_is_ts, target_is_ts)
                if inferred is None:
                    logger.debug(f"{importer}: {import_path!r} binds to a .ts sibling, skipping")
                    return None
            abs_path = inferred

            if (
                not alias.keep_relative
                and not os.path.splitext(import_path)[1]
                and os.path.exists(abs_path)
            ):
                import_path = _with_extension(import_path, os.path.splitext(abs_path)[1])

        return ResolvedImport(import_path, abs_path)

    @staticmethod
    def _infer_for_target(abs_path: str, importer_is_ts: bool, target_is_ts: bool) -> Optional[str]:
        if target_is_ts and importer_is_ts:
            if os.path.exists(abs_path + ".ts"):
                return abs_path + ".ts"
        elif importer_is_ts and os.path.exists(abs_path + ".ts"):
            # A TS importer resolves './foo' to foo.ts, never to the JS target
            return None
        elif not target_is_ts and os.path.exists(abs_path + ".js"):
            return abs_path + ".js"
        return abs_path

    @staticmethod
    def _infer_any(abs_path: str, importer_is_ts: bool) -> str:
        extensions = (".ts", ".js") if importer_is_ts else (".js",)
        for ext in extensions:
            if os.path.exists(abs_path + ext):
                return abs_path + ext
        return abs_path
