"""Tests for import path resolution and extension inference."""

import json
from pathlib import Path

from depfinder.aliases import load_alias_config
from depfinder.resolver import PathResolver


class TestRelativeResolution:
    """Paths are resolved against the importing file's directory."""

    def test_explicit_extension(self, write_tree):
        root = write_tree({"src/foo.js": "", "src/app.js": ""})
        resolved = PathResolver().resolve("./foo.js", str(root / "src/app.js"), target_is_ts=False)
        assert resolved.import_path == "./foo.js"
        assert resolved.import_absolute_path == str(root / "src/foo.js")

    def test_parent_directory(self, write_tree):
        root = write_tree({"lib/foo.js": "", "src/app.js": ""})
        resolved = PathResolver().resolve("../lib/foo", str(root / "src/app.js"), target_is_ts=False)
        assert resolved.import_absolute_path == str(root / "lib/foo.js")

    def test_trailing_slash_is_dropped_before_extension(self, write_tree):
        root = write_tree({"foo.js": "", "app.js": ""})
        resolved = PathResolver().resolve("./foo/", str(root / "app.js"), target_is_ts=False)
        assert resolved.import_path == "./foo.js"
        assert resolved.import_absolute_path == str(root / "foo.js")

    def test_dots_only_path_is_left_as_written(self, write_tree):
        root = write_tree({"pkg.js": "", "pkg/app.js": ""})
        resolved = PathResolver().resolve("./", str(root / "pkg/app.js"), target_is_ts=False)
        assert resolved.import_path == "./"
        assert resolved.import_absolute_path == str(root / "pkg.js")

    def test_missing_file_keeps_unresolved_path(self, write_tree):
        root = write_tree({"src/app.js": ""})
        resolved = PathResolver().resolve("./nope", str(root / "src/app.js"), target_is_ts=False)
        assert resolved.import_path == "./nope"
        assert resolved.import_absolute_path == str(root / "src/nope")


class TestExtensionInference:
    """Extension-less imports get `.js` or `.ts` depending on both files."""

    def test_js_importer_gets_js(self, write_tree):
        root = write_tree({"foo.js": "", "app.js": ""})
        resolved = PathResolver().resolve("./foo", str(root / "app.js"), target_is_ts=False)
        assert resolved.import_path == "./foo.js"
        assert resolved.import_absolute_path == str(root / "foo.js")

    def test_ts_pair_gets_ts(self, write_tree):
        root = write_tree({"foo.ts": "", "foo.js": "", "app.ts": ""})
        resolved = PathResolver().resolve("./foo", str(root / "app.ts"), target_is_ts=True)
        assert resolved.import_path == "./foo.ts"
        assert resolved.import_absolute_path == str(root / "foo.ts")

    def test_ts_sibling_shadows_js_target(self, write_tree):
        root = write_tree({"foo.ts": "", "foo.js": "", "app.ts": ""})
        assert PathResolver().resolve("./foo", str(root / "app.ts"), target_is_ts=False) is None

    def test_ts_importer_reaches_js_without_ts_sibling(self, write_tree):
        root = write_tree({"legacy.js": "", "app.ts": ""})
        resolved = PathResolver().resolve("./legacy", str(root / "app.ts"), target_is_ts=False)
        assert resolved.import_absolute_path == str(root / "legacy.js")

    def test_js_importer_never_gets_ts(self, write_tree):
        root = write_tree({"foo.ts": "", "app.js": ""})
        resolved = PathResolver().resolve("./foo", str(root / "app.js"), target_is_ts=True)
        assert resolved.import_absolute_path == str(root / "foo")

    def test_no_target_prefers_ts_for_ts_importer(self, write_tree):
        root = write_tree({"foo.ts": "", "foo.js": "", "app.ts": ""})
        resolved = PathResolver().resolve("./foo", str(root / "app.ts"))
        assert resolved.import_absolute_path == str(root / "foo.ts")

    def test_no_target_falls_back_to_js(self, write_tree):
        root = write_tree({"foo.js": "", "app.ts": ""})
        resolved = PathResolver().resolve("./foo", str(root / "app.ts"))
        assert resolved.import_absolute_path == str(root / "foo.js")


class TestAliasResolution:
    """Alias substitution runs before relative resolution."""

    def _resolver(self, root: Path, aliases: dict) -> PathResolver:
        config = root / "aliases.json"
        config.write_text(json.dumps({"resolve": {"alias": aliases}}))
        return PathResolver(load_alias_config(config))

    def test_prefix_alias_rewrites_import_path(self, write_tree):
        root = write_tree({"src/lib/util.js": "", "src/app.js": ""})
        resolver = self._resolver(root, {"@lib": "./src/lib"})
        resolved = resolver.resolve("@lib/util", str(root / "src/app.js"), target_is_ts=False)
        assert resolved.import_path == "./src/lib/util.js"
        assert resolved.import_absolute_path == str(root / "src/lib/util.js")

    def test_unresolvable_alias_discards_edge(self, write_tree):
        root = write_tree({"src/app.js": ""})
        resolver = self._resolver(root, {"@lib": "./src/lib"})
        assert resolver.resolve("@lib/missing", str(root / "src/app.js"), target_is_ts=False) is None

    def test_package_alias_keeps_literal_path(self, write_tree):
        root = write_tree({"src/app.js": ""})
        resolver = self._resolver(root, {"vue$": "vue/dist/vue.esm"})
        resolved = resolver.resolve("vue", str(root / "src/app.js"), target_is_ts=False)
        assert resolved.import_path == "vue/dist/vue.esm"
        assert resolved.import_absolute_path == str(root / "node_modules/vue/dist/vue.esm")

    def test_non_alias_path_resolves_relatively(self, write_tree):
        root = write_tree({"src/foo.js": "", "src/app.js": ""})
        resolver = self._resolver(root, {"@lib": "./src/lib"})
        resolved = resolver.resolve("./foo", str(root / "src/app.js"), target_is_ts=False)
        assert resolved.import_absolute_path == str(root / "src/foo.js")
