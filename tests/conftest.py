"""Pytest configuration and fixtures."""

from pathlib import Path

import pytest


@pytest.fixture
def write_tree(tmp_path: Path):
    """Write a {relative path: content} mapping under tmp_path and return tmp_path."""

    def _write(files: dict[str, str]) -> Path:
        for rel_path, content in files.items():
            path = tmp_path / rel_path
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content)
        return tmp_path

    return _write


@pytest.fixture
def in_tmp(tmp_path: Path, monkeypatch):
    """Run the test with tmp_path as the working directory."""
    monkeypatch.chdir(tmp_path)
    return tmp_path
