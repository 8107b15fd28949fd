"""The console script's ``cli`` package ships with the distribution."""

from pathlib import Path

import pytest
from setuptools import find_namespace_packages

tomllib = pytest.importorskip("tomllib")

ROOT = Path(__file__).resolve().parent.parent


def test_cli_packages_are_discovered():
    find = tomllib.loads((ROOT / "pyproject.toml").read_text(encoding="utf-8"))["tool"]["setuptools"][
        "packages"
    ]["find"]
    assert find["namespaces"] is True

    packages = find_namespace_packages(where=str(ROOT), include=find["include"])
    assert {"promptcraft", "promptcraft.llm", "cli", "cli.commands"} <= set(packages)
