"""Tests for the distribution metadata."""

from pathlib import Path

import pytest

tomllib = pytest.importorskip("tomllib")

PYPROJECT = Path(__file__).resolve().parent.parent / "pyproject.toml"


def test_dashboard_script_is_not_installed():
    config = tomllib.loads(PYPROJECT.read_text(encoding="utf-8"))
    setuptools = config["tool"]["setuptools"]
    assert setuptools["packages"] == ["scorebook"]
    assert "streamlit_app" not in setuptools.get("py-modules", [])
