"""Shared fixtures for CLI integration tests"""

import pytest
from typer.testing import CliRunner


@pytest.fixture(name="runner")
def runner_fixture():
    return CliRunner()
