"""Root test configuration: keep each test isolated from the caller's mdcf settings"""

import os

import pytest


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path, monkeypatch):
    """Run from an empty directory with no MDCF_* variables, so mdcf.yaml and env never leak in."""
    for name in list(os.environ):
        if name.startswith("MDCF_"):
            monkeypatch.delenv(name)
    monkeypatch.chdir(tmp_path)
    yield tmp_path
