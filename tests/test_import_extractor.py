"""Tests for import/require extraction in both dialects."""

import pytest

pytest.importorskip("tree_sitter_javascript")
pytest.importorskip("tree_sitter_typescript")

from depfinder.import_extractor import (
    JavaScriptDialect,
    ParseError,
    TypeScriptDialect,
    dialect_for_path,
    extract_edges,
)
from depfinder.models import Specifier


def edges(source: str, path: str = "file.js", with_specifiers: bool = True):
    return extract_edges(path, source.encode("utf-8"), with_specifiers)


class TestDialectSelection:
    """Dialect is chosen once per file by extension."""

    def test_ts_extension(self):
        assert isinstance(dialect_for_path("src/app.ts"), TypeScriptDialect)

    @pytest.mark.parametrize("path", ["src/app.js", "src/app.jsx", "src/app.mjs"])
    def test_everything_else_is_javascript(self, path):
        assert isinstance(dialect_for_path(path), JavaScriptDialect)

    def test_dialect_instances_are_shared(self):
        assert dialect_for_path("a.ts") is dialect_for_path("b.ts")


class TestRequireStatements:
    """const x = require('...') in its different binding shapes."""

    def test_identifier_binding_is_default(self):
        result = edges("const foo = require('./foo')\n")
        assert len(result) == 1
        assert result[0].import_path == "./foo"
        assert result[0].specifiers == [Specifier("foo", "", True)]

    def test_destructuring_yields_one_specifier_per_property(self):
        result = edges("const { a, b: c, d = 1, ...rest } = require('./foo')\n")
        assert [s.name for s in result[0].specifiers] == ["a", "b", "d", "rest"]
        assert not any(s.is_default for s in result[0].specifiers)
        assert all(s.alias == "" for s in result[0].specifiers)

    def test_var_and_let_declarations(self):
        result = edges("var a = require('./a');\nlet b = require(\"./b\");\n")
        assert [e.import_path for e in result] == ["./a", "./b"]

    def test_template_literal_without_substitution(self):
        result = edges("const foo = require(`./foo`)\n")
        assert result[0].import_path == "./foo"

    def test_dynamic_argument_is_ignored(self):
        assert edges("const foo = require('./' + name)\n") == []

    def test_other_calls_are_ignored(self):
        assert edges("const foo = load('./foo')\nconst x = 1\n") == []

    def test_empty_path_is_dropped(self):
        assert edges("const foo = require('')\n") == []

    def test_nested_require_is_found(self):
        source = "function lazy() {\n  const foo = require('./foo')\n  return foo\n}\n"
        assert [e.import_path for e in edges(source)] == ["./foo"]


class TestImportStatements:
    """ES module import declarations."""

    def test_named_import_with_alias(self):
        result = edges("import { a as b } from './foo'\n")
        assert result[0].import_path == "./foo"
        assert result[0].specifiers == [Specifier("a", "b", False)]

    def test_default_and_named(self):
        result = edges("import foo, { a, b } from './foo'\n")
        assert result[0].specifiers == [
            Specifier("foo", "", True),
            Specifier("a", "", False),
            Specifier("b", "", False),
        ]

    def test_namespace_import(self):
        result = edges("import * as ns from './foo'\n")
        assert result[0].specifiers == [Specifier("ns", "", False)]

    def test_side_effect_import_has_no_specifiers(self):
        result = edges("import './polyfill'\n")
        assert result[0].import_path == "./polyfill"
        assert result[0].specifiers == []

    def test_duplicates_are_kept_in_source_order(self):
        result = edges("import { a } from './foo'\nimport { a } from './foo'\n")
        assert len(result) == 2

    def test_statement_order_is_preserved(self):
        source = "import a from './a'\nconst b = require('./b')\nimport c from './c'\n"
        assert [e.import_path for e in edges(source)] == ["./a", "./b", "./c"]


class TestTypeScriptDialect:
    """TypeScript-only statement shapes."""

    def test_typed_require(self):
        result = edges("const foo: Foo = require('./foo')\n", path="app.ts")
        assert result[0].import_path == "./foo"
        assert result[0].specifiers == [Specifier("foo", "", True)]

    def test_import_equals_require(self):
        result = edges("import foo = require('./foo')\n", path="app.ts")
        assert result[0].import_path == "./foo"
        assert result[0].specifiers == [Specifier("foo", "", True)]

    def test_named_import_with_alias(self):
        result = edges("import { a as b } from './foo'\n", path="app.ts")
        assert result[0].specifiers == [Specifier("a", "b", False)]


class TestSpecifierOption:
    """Specifier details are only collected on request."""

    @pytest.mark.parametrize("source", [
        "const foo = require('./foo')\n",
        "import foo, { a } from './foo'\n",
    ])
    def test_specifiers_left_empty(self, source):
        result = edges(source, with_specifiers=False)
        assert result[0].import_path == "./foo"
        assert result[0].specifiers == []


class TestSyntaxErrors:
    """Unknown syntax costs only the broken statements, not the whole file."""

    FLOW_SOURCE = (
        "// @flow\n"
        "const a = require('./a');\n"
        "function f(x: number): string { return String(x); }\n"
    )

    def test_flow_annotations_keep_require(self):
        result = edges(self.FLOW_SOURCE, path="flow.js")
        assert [e.import_path for e in result] == ["./a"]
        assert result[0].specifiers == [Specifier("a", "", True)]

    def test_flow_import_type(self):
        result = edges("// @flow\nimport type { T } from './types';\n", path="flow.js")
        assert [e.import_path for e in result] == ["./types"]

    def test_statements_after_error_are_read(self):
        source = "function f(x: number) {}\nimport b from './b';\n"
        assert [e.import_path for e in edges(source, path="flow.js")] == ["./b"]

    def test_garbage_javascript_raises(self):
        with pytest.raises(ParseError) as exc_info:
            edges("))) ]]] }}}\n", path="broken.js")
        assert exc_info.value.language == "javascript"

    def test_garbage_typescript_raises(self):
        with pytest.raises(ParseError):
            edges("))) ]]] }}}\n", path="broken.ts")
