"""
Import/require extraction for JavaScript and TypeScript sources.

Each dialect parses a file with tree-sitter, collects the raw statement nodes
that can introduce a dependency, and normalizes them into a PartialEdge:

    const foo = require('./foo')            -> ('./foo', [foo (default)])
    const { a, b } = require('./foo')       -> ('./foo', [a, b])
    import foo, { a as b } from './foo'     -> ('./foo', [foo (default), a as b])
    import * as ns from './foo'             -> ('./foo', [ns])
    import foo = require('./foo')           -> ('./foo', [foo (default)])   # .ts only

Key functions:
- dialect_for_path(path) - pick the dialect by file extension
- read_source(path) - read a file, enforcing the size limit
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

from .config import MAX_FILE_SIZE
from .models import JAVASCRIPT, TYPESCRIPT, Specifier, dialect_name

logger = logging.getLogger(__name__)

# Tree-sitter grammars for both dialects
TREE_SITTER_AVAILABLE = False
try:
    from tree_sitter import Language, Parser
    import tree_sitter_javascript
    import tree_sitter_typescript

    TREE_SITTER_AVAILABLE = True
except ImportError:
    pass

RAW_NODE_TYPES = frozenset({"variable_declarator", "import_statement"})


class FileTooLargeError(Exception):
    """Raised when a file exceeds MAX_FILE_SIZE."""
    def __init__(self, file_path: Path, size: int, limit: int):
        self.file_path = file_path
        self.size = size
        self.limit = limit
        super().__init__(
            f"File {file_path} is {size:,} bytes, exceeds limit of {limit:,} bytes. "
            f"Set DEPFINDER_MAX_FILE_SIZE environment variable to increase limit."
        )


class ParseError(Exception):
    """Raised when tree-sitter parsing fails or no statement in the source parses."""
    def __init__(self, file_path: Path, language: str, error: Exception | str):
        self.file_path = file_path
        self.language = language
        self.original_error = error
        super().__init__(f"Failed to parse {file_path} as {language}: {error}")


@dataclass
class PartialEdge:
    """Pre-resolution part of an import edge."""

    import_path: str
    specifiers: list[Specifier] = field(default_factory=list)


def read_source(file_path: str | Path) -> bytes:
    """Read a source file as bytes.

    Raises:
        FileTooLargeError: If the file is larger than MAX_FILE_SIZE
        OSError: If the file cannot be read
    """
    file_path = Path(file_path)
    size = file_path.stat().st_size
    if size > MAX_FILE_SIZE:
        raise FileTooLargeError(file_path, size, MAX_FILE_SIZE)
    return file_path.read_bytes()


def _safe_decode(data: bytes) -> str:
    return data.decode("utf-8", errors="replace")


def _text(node, source: bytes) -> str:
    return _safe_decode(source[node.start_byte:node.end_byte])


def _is_broken_import(node) -> bool:
    return node.type == "ERROR" and node.child_count > 0 and node.children[0].type == "import"


def _string_value(node, source: bytes) -> Optional[str]:
    """Return the literal value of a string node, or None if not a literal."""
    if node.has_error:
        return None
    if node.type == "string":
        return _text(node, source)[1:-1]
    if node.type == "template_string":
        if any(child.type == "template_substitution" for child in node.children):
            return None
        return _text(node, source)[1:-1]
    return None


def _pattern_key(node, source: bytes) -> Optional[str]:
    """Name of the property bound by one element of an object pattern."""
    if node.type == "shorthand_property_identifier_pattern":
        return _text(node, source)
    if node.type == "pair_pattern":
        key = node.child_by_field_name("key")
        if key is None:
            return None
        return _string_value(key, source) or _text(key, source)
    if node.type == "object_assignment_pattern":
        left = node.child_by_field_name("left")
        return _pattern_key(left, source) if left is not None else None
    if node.type == "rest_pattern":
        for child in node.named_children:
            if child.type == "identifier":
                return _text(child, source)
    return None


class Dialect:
    """Parser and normalizer for one source dialect."""

    name = ""

    def __init__(self):
        self._parser: Any = None

    def _language(self) -> Any:
        raise NotImplementedError

    def _get_parser(self) -> Any:
        """Get or create the tree-sitter parser."""
        if not TREE_SITTER_AVAILABLE:
            raise RuntimeError("tree-sitter grammars for JavaScript/TypeScript not available")
        if self._parser is None:
            self._parser = Parser(Language(self._language()))
        return self._parser

    def parse(self, source: bytes, file_path: str | Path = "<source>") -> Any:
        """Parse source into a tree-sitter tree.

        Syntax the grammar does not know (Flow annotations, `import type`)
        leaves ERROR nodes in an otherwise usable tree, which is returned.

        Raises:
            ParseError: If the parser fails or nothing in the source parses
        """
        try:
            tree = self._get_parser().parse(source)
        except (ValueError, TypeError) as e:
            raise ParseError(Path(file_path), self.name, e) from e
        root = tree.root_node
        if root.type == "ERROR" or (
            root.has_error and all(child.type == "ERROR" for child in root.named_children)
        ):
            raise ParseError(Path(file_path), self.name, "syntax error")
        if root.has_error:
            logger.debug(f"{file_path}: syntax errors, reading well-formed statements only")
        return tree

    def extract_imports(self, source: bytes, file_path: str | Path = "<source>") -> list:
        """Return every variable declarator and import statement, in source order.

        ERROR nodes opening with the `import` keyword are included: that is
        how tree-sitter recovers from import forms it does not know.
        """
        tree = self.parse(source, file_path)
        nodes = []
        stack = [tree.root_node]
        while stack:
            node = stack.pop()
            if node.type in RAW_NODE_TYPES or _is_broken_import(node):
                nodes.append(node)
            stack.extend(reversed(node.children))
        return nodes

    def normalize(self, node, source: bytes, with_specifiers: bool = True) -> Optional[PartialEdge]:
        """Turn a raw node into a PartialEdge, or None if it is not an import."""
        if node.type == "variable_declarator":
            edge = self._normalize_require(node, source, with_specifiers)
        elif node.type == "import_statement" or _is_broken_import(node):
            edge = self._normalize_import(node, source, with_specifiers)
        else:
            edge = None
        if edge is None or not edge.import_path:
            return None
        return edge

    def _normalize_require(self, node, source: bytes, with_specifiers: bool) -> Optional[PartialEdge]:
        value = node.child_by_field_name("value")
        if value is None or value.type != "call_expression":
            return None
        function = value.child_by_field_name("function")
        if function is None or function.type != "identifier" or _text(function, source) != "require":
            return None
        arguments = value.child_by_field_name("arguments")
        if arguments is None:
            return None
        args = [a for a in arguments.named_children if a.type != "comment"]
        if not args:
            return None
        import_path = _string_value(args[0], source)
        if import_path is None:
            return None

        edge = PartialEdge(import_path)
        name = node.child_by_field_name("name")
        if not with_specifiers or name is None:
            return edge

        if name.type == "identifier":
            edge.specifiers.append(Specifier(_text(name, source), "", True))
        elif name.type == "object_pattern":
            for element in name.named_children:
                key = _pattern_key(element, source)
                if key:
                    edge.specifiers.append(Specifier(key, "", False))
        return edge

    def _normalize_import(self, node, source: bytes, with_specifiers: bool) -> Optional[PartialEdge]:
        import_path = None
        clause = None
        for child in node.children:
            if child.type == "string" and import_path is None:
                import_path = _string_value(child, source)
            elif child.type == "import_clause":
                clause = child
        if import_path is None:
            return None

        edge = PartialEdge(import_path)
        if with_specifiers and clause is not None:
            edge.specifiers.extend(self._clause_specifiers(clause, source))
        return edge

    def _clause_specifiers(self, clause, source: bytes) -> list[Specifier]:
        specifiers = []
        for child in clause.children:
            if child.type == "identifier":
                specifiers.append(Specifier(_text(child, source), "", True))
            elif child.type == "namespace_import":
                for ns_child in child.children:
                    if ns_child.type == "identifier":
                        specifiers.append(Specifier(_text(ns_child, source), "", False))
            elif child.type == "named_imports":
                for named in child.children:
                    if named.type != "import_specifier":
                        continue
                    name_node = named.child_by_field_name("name")
                    alias_node = named.child_by_field_name("alias")
                    if name_node is None:
                        continue
                    name = _string_value(name_node, source) or _text(name_node, source)
                    alias = _text(alias_node, source) if alias_node is not None else ""
                    specifiers.append(Specifier(name, "" if alias == name else alias, False))
        return specifiers


class JavaScriptDialect(Dialect):
    """ES modules and CommonJS, JSX allowed."""

    name = JAVASCRIPT

    def _language(self) -> Any:
        return tree_sitter_javascript.language()


class TypeScriptDialect(Dialect):
    """TypeScript, including `import x = require('...')`."""

    name = TYPESCRIPT

    def _language(self) -> Any:
        return tree_sitter_typescript.language_typescript()

    def _normalize_import(self, node, source: bytes, with_specifiers: bool) -> Optional[PartialEdge]:
        for child in node.children:
            if child.type == "import_require_clause":
                return self._normalize_import_require(child, source, with_specifiers)
        return super()._normalize_import(node, source, with_specifiers)

    def _normalize_import_require(self, clause, source: bytes, with_specifiers: bool) -> Optional[PartialEdge]:
        import_path = None
        binding = None
        for child in clause.children:
            if child.type == "string":
                import_path = _string_value(child, source)
            elif child.type == "identifier" and binding is None:
                binding = _text(child, source)
        if import_path is None:
            return None
        edge = PartialEdge(import_path)
        if with_specifiers and binding:
            edge.specifiers.append(Specifier(binding, "", True))
        return edge


_DIALECTS: dict[str, Dialect] = {}


def get_dialect(name: str) -> Dialect:
    """Return the shared dialect instance for `name`."""
    if name not in _DIALECTS:
        if name == TYPESCRIPT:
            _DIALECTS[name] = TypeScriptDialect()
        elif name == JAVASCRIPT:
            _DIALECTS[name] = JavaScriptDialect()
        else:
            raise ValueError(f"Unsupported dialect: {name}")
    return _DIALECTS[name]


def dialect_for_path(file_path: str | os.PathLike) -> Dialect:
    """`.ts` files get the TypeScript dialect, anything else JavaScript."""
    return get_dialect(dialect_name(os.fspath(file_path)))


def extract_edges(file_path: str | Path, source: bytes, with_specifiers: bool = True) -> list[PartialEdge]:
    """Parse `source` with the dialect of `file_path` and normalize its imports.

    Raises:
        ParseError: If the source cannot be parsed
    """
    dialect = dialect_for_path(file_path)
    edges = []
    for node in dialect.extract_imports(source, file_path):
        edge = dialect.normalize(node, source, with_specifiers)
        if edge is not None:
            edges.append(edge)
    return edges
