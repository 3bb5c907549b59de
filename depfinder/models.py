"""Data model for dependents discovery.

QueryFile / CandidateFile describe files on disk, ImportEdge describes one
import or require statement found in a candidate, and ResultEntry collects
the edges that point at a query file.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from .aliases import AliasTable

TYPESCRIPT = "typescript"
JAVASCRIPT = "javascript"


def dialect_name(path: str) -> str:
    """`.ts` files are TypeScript, everything else is parsed as JavaScript."""
    return TYPESCRIPT if path.strip().endswith(".ts") else JAVASCRIPT


@dataclass(frozen=True)
class CandidateFile:
    """A file scanned as a possible dependent."""

    path: str
    absolute_path: str
    base_name: str
    base_name_no_ext: str
    dialect: str

    @property
    def is_ts(self) -> bool:
        return self.dialect == TYPESCRIPT

    @classmethod
    def from_path(cls, path: str) -> "CandidateFile":
        base_name = os.path.basename(path)
        return cls(
            path=path,
            absolute_path=os.path.abspath(path),
            base_name=base_name,
            base_name_no_ext=os.path.splitext(base_name)[0],
            dialect=dialect_name(base_name),
        )


@dataclass(frozen=True)
class QueryFile(CandidateFile):
    """The file whose dependents are searched for.

    `alias_names` holds every spelling an import could use to reach the file
    through the alias table (empty without one).
    """

    alias_names: tuple[str, ...] = ()

    @classmethod
    def from_path(cls, path: str, alias_table: Optional["AliasTable"] = None) -> "QueryFile":
        candidate = CandidateFile.from_path(path)
        alias_names: tuple[str, ...] = ()
        if alias_table is not None:
            alias_names = tuple(alias_table.find_alias(candidate.absolute_path))
        return cls(
            path=candidate.path,
            absolute_path=candidate.absolute_path,
            base_name=candidate.base_name,
            base_name_no_ext=candidate.base_name_no_ext,
            dialect=candidate.dialect,
            alias_names=alias_names,
        )


@dataclass(frozen=True)
class Specifier:
    """One binding introduced by an import: `import { name as alias }`."""

    name: str
    alias: str = ""
    is_default: bool = False

    def to_dict(self) -> dict:
        return {"name": self.name, "alias": self.alias, "isDefault": self.is_default}


@dataclass
class ImportEdge:
    """One resolved import statement from `file_path` to `import_absolute_path`."""

    file_path: str
    file_absolute_path: str
    import_path: str = ""
    import_absolute_path: str = ""
    is_circular_dependency: Optional[bool] = None
    specifiers: list[Specifier] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "filePath": self.file_path,
            "fileAbsolutePath": self.file_absolute_path,
            "importPath": self.import_path,
            "importAbsolutePath": self.import_absolute_path,
            "isCircularDependency": self.is_circular_dependency,
            "specifiers": [s.to_dict() for s in self.specifiers],
        }


@dataclass
class ResultEntry:
    """Dependents found for one query file, in scan order."""

    absolute_path: str
    dependents: list[ImportEdge] = field(default_factory=list)

    @property
    def files(self) -> int:
        return len(self.dependents)

    def to_dict(self) -> dict:
        return {
            "absolutePath": self.absolute_path,
            "files": self.files,
            "dependents": [d.to_dict() for d in self.dependents],
        }


@dataclass
class DependencyEntry:
    """Imports of one file, as returned by the reverse lookup."""

    absolute_path: str
    dependencies: list[ImportEdge] = field(default_factory=list)

    @property
    def files(self) -> int:
        return len(self.dependencies)

    def to_dict(self) -> dict:
        return {
            "absolutePath": self.absolute_path,
            "files": self.files,
            "dependencies": [d.to_dict() for d in self.dependencies],
        }
