"""Fixtures for integration tests using stub executables."""

import stat
from collections.abc import Callable
from pathlib import Path

import pytest

type WriteScriptFn = Callable[[str, str], Path]


@pytest.fixture
def write_script(tmp_path: Path) -> WriteScriptFn:
    """Return a function to create executable shell scripts."""
    bin_dir = tmp_path / "bin"
    bin_dir.mkdir()

    def _write(name: str, body: str) -> Path:
        script = bin_dir / name
        script.write_text(f"#!/bin/sh\n{body}\n")
        script.chmod(script.stat().st_mode | stat.S_IXUSR)
        return script

    return _write
