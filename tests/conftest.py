"""Shared fixtures: a fake pdflatex and pipeline configs that use it."""

import shlex
import sys
from pathlib import Path

import pytest

from titleorder.contexts.rendering.pipeline import PipelineConfig

FAKE_PDFLATEX = Path(__file__).resolve().parent / "fake_pdflatex.py"


def fake_compiler(mode: str = "ok", capture: Path = None) -> str:
    """Compiler command line running fake_pdflatex.py in the given mode."""
    parts = [sys.executable, str(FAKE_PDFLATEX), f"--fake-mode={mode}"]
    if capture is not None:
        parts.append(f"--fake-capture={capture}")
    return shlex.join(parts)


@pytest.fixture
def staging_root(tmp_path):
    root = tmp_path / "staging"
    root.mkdir()
    return root


@pytest.fixture
def make_config(staging_root):
    """Factory for PipelineConfigs that compile with the fake pdflatex."""

    def _make(mode: str = "ok", capture: Path = None, timeout: float = 30) -> PipelineConfig:
        return PipelineConfig(
            staging_root=staging_root,
            compiler=fake_compiler(mode, capture),
            timeout=timeout,
        )

    return _make
