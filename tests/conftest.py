"""Shared pytest fixtures for rsyncfilter tests."""
import tempfile
from pathlib import Path
from typing import Generator

import pytest


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir).resolve()


@pytest.fixture
def source_dir(temp_dir: Path) -> Path:
    """Create a transfer root with a small project tree."""
    source = temp_dir / "source"
    source.mkdir()

    (source / "file.txt").write_text("Hello World")
    (source / "README.md").write_text("# Test README\n\nTest content")
    (source / "script.py").write_text("#!/usr/bin/env python\nprint('test')")
    (source / ".hidden").write_text("Hidden file")

    (source / "subdir").mkdir()
    (source / "subdir" / "nested.txt").write_text("Nested content")

    (source / "docs").mkdir()
    (source / "docs" / "api.md").write_text("# API Documentation")

    (source / "build").mkdir()
    (source / "build" / "output.o").write_text("Binary content")

    (source / "src" / "main" / "java").mkdir(parents=True)
    (source / "src" / "main" / "java" / "Main.java").write_text("class Main {}")
    (source / "src" / "main" / "java" / "Main.class").write_bytes(b"\xca\xfe\xba\xbe")

    return source


@pytest.fixture
def rules_file(temp_dir: Path) -> Path:
    """Create an exclude file with comments and blank lines."""
    path = temp_dir / "excludes.txt"
    path.write_text("# build output\n*.o\n\n; editor files\n*.swp\nbuild/\n")
    return path


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep RSYNCFILTER_* variables from the host out of tests."""
    import os

    for key in list(os.environ):
        if key.startswith("RSYNCFILTER_"):
            monkeypatch.delenv(key)
