"""Shared pytest fixtures for idl2ts tests."""

import shutil
from pathlib import Path

import pytest

from idl2ts.generator.options import Options
from idl2ts.generator.session import GenerationSession

DEFAULT_ENTRIES = ["prompt/coze.loop.prompt.manage.thrift"]


@pytest.fixture
def fixtures_dir() -> Path:
    """Return path to fixtures directory."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def idl_root(fixtures_dir: Path, tmp_path: Path) -> Path:
    """Copy the IDL fixtures into a scratch directory and return its root."""
    root = tmp_path / "idl"
    shutil.copytree(fixtures_dir / "idl", root)
    return root.resolve()


@pytest.fixture
def make_options(idl_root: Path, tmp_path: Path):
    """Factory for Options rooted at the scratch IDL tree."""

    def factory(entries: list[str] | None = None, **kwargs) -> Options:
        values = {
            "entries": [Path(e) for e in (DEFAULT_ENTRIES if entries is None else entries)],
            "idl_root": idl_root,
            "output_dir": tmp_path / "src" / "api" / "idl",
            "common_code_path": tmp_path / "src" / "api" / "config",
        }
        values.update(kwargs)
        return Options(**values)

    return factory


@pytest.fixture
def session(tmp_path: Path) -> GenerationSession:
    """A session with default options."""
    options = Options(entries=[], idl_root=tmp_path, output_dir=tmp_path / "out")
    return GenerationSession.from_options(options)
