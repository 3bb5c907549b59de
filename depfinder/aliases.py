"""Bundler-style path aliases.

An alias table maps short import prefixes to directories (or packages):

    {"resolve": {"alias": {"@components": "./src/components", "vue$": "vue/dist/vue.esm.js"}}}

Keys ending in `$` only match the exact import path. Other keys match the
whole path or a `key/` prefix. The longest matching key wins.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import Mapping

logger = logging.getLogger(__name__)

PROBE_EXTENSIONS = (".js", ".ts")


class AliasConfigError(Exception):
    """Raised when an alias configuration file cannot be loaded."""
    def __init__(self, config_path: str, reason: str):
        self.config_path = config_path
        super().__init__(f"Invalid alias config {config_path}: {reason}")


@dataclass(frozen=True)
class AliasResolution:
    """Result of running an import path through the alias table.

    `module_abs_path` is empty when no alias applied; the caller then resolves
    the path relative to the importing file. `keep_relative` marks a module
    path that must be kept literally (no extension appended).
    """

    module: str
    module_abs_path: str = ""
    keep_relative: bool = False
    is_error: bool = False


def _is_package_target(target: str) -> bool:
    return not (target.startswith(".") or os.path.isabs(target))


def _exists_as_module(path: str) -> bool:
    if os.path.exists(path):
        return True
    return any(os.path.exists(path + ext) for ext in PROBE_EXTENSIONS)


class AliasTable:
    """Immutable alias mapping anchored at `base_dir`."""

    def __init__(self, aliases: Mapping[str, str], base_dir: str | Path):
        self.base_dir = os.path.abspath(base_dir)
        self._aliases = MappingProxyType(dict(aliases))
        # Longest key first so `@app/components` beats `@app`
        self._keys = sorted(self._aliases, key=lambda k: len(k.rstrip("$")), reverse=True)

    @property
    def aliases(self) -> Mapping[str, str]:
        return self._aliases

    def _match(self, import_path: str) -> tuple[str, str] | None:
        """Return (alias key, remainder) for the alias that applies, if any."""
        for key in self._keys:
            if key.endswith("$"):
                if import_path == key[:-1]:
                    return key, ""
            elif import_path == key:
                return key, ""
            elif import_path.startswith(key + "/"):
                return key, import_path[len(key) + 1:]
        return None

    def _target_path(self, target: str) -> str:
        if os.path.isabs(target):
            return os.path.normpath(target)
        return os.path.normpath(os.path.join(self.base_dir, target))

    def resolve(self, import_path: str) -> AliasResolution:
        """Substitute the alias prefix of `import_path`, if it has one."""
        match = self._match(import_path)
        if match is None:
            return AliasResolution(module=import_path)

        key, rest = match
        target = self._aliases[key]

        if _is_package_target(target):
            module = f"{target}/{rest}" if rest else target
            module_abs_path = os.path.normpath(os.path.join(self.base_dir, "node_modules", module))
            return AliasResolution(module=module, module_abs_path=module_abs_path, keep_relative=True)

        target_path = self._target_path(target)
        module_abs_path = os.path.normpath(os.path.join(target_path, rest)) if rest else target_path
        if not _exists_as_module(module_abs_path):
            logger.debug(f"Alias {key!r} in {import_path!r} points to missing {module_abs_path}")
            return AliasResolution(module=import_path, is_error=True)

        module = f"{target.rstrip('/')}/{rest}" if rest else target
        return AliasResolution(module=module, module_abs_path=module_abs_path)

    def find_alias(self, abs_path: str) -> list[str]:
        """Return the alias spellings an import could use to reach `abs_path`.

        Prefix aliases yield `alias/relative/path` without extension; exact
        aliases yield the key itself when they target the file.
        """
        abs_path = os.path.normpath(abs_path)
        stem = os.path.splitext(abs_path)[0]
        names = []
        for key in self._keys:
            target = self._aliases[key]
            if _is_package_target(target):
                continue
            target_path = self._target_path(target)
            if key.endswith("$"):
                if target_path in (abs_path, stem):
                    names.append(key[:-1])
                continue
            if target_path in (abs_path, stem):
                names.append(key)
            elif stem.startswith(target_path + os.sep):
                rel = os.path.relpath(stem, target_path).replace(os.sep, "/")
                names.append(f"{key}/{rel}")
        return names


def load_alias_config(config_path: str | Path) -> AliasTable:
    """Load an alias table from a JSON file.

    Accepts either a bundler-style object (`{"resolve": {"alias": {...}}}`)
    or a bare `{alias: target}` mapping. Relative targets are anchored at the
    directory of the config file.

    Raises:
        AliasConfigError: If the file is unreadable or has the wrong shape
    """
    config_path = Path(config_path)
    try:
        data = json.loads(config_path.read_text())
    except (OSError, json.JSONDecodeError) as e:
        raise AliasConfigError(str(config_path), str(e)) from e

    if isinstance(data, dict) and isinstance(data.get("resolve"), dict):
        data = data["resolve"].get("alias", {})

    if not isinstance(data, dict) or not all(
        isinstance(k, str) and isinstance(v, str) for k, v in data.items()
    ):
        raise AliasConfigError(str(config_path), "expected a mapping of alias -> path")

    logger.debug(f"Loaded {len(data)} aliases from {config_path}")
    return AliasTable(data, config_path.parent)
