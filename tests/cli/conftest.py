"""Fixtures for CLI tests."""

import pytest
import yaml
from click.testing import CliRunner


@pytest.fixture
def cli_runner():
    """Click test runner."""
    return CliRunner()


@pytest.fixture
def config_file(tmp_path, corpus_file):
    """A YAML config file pointing at the sample corpus."""
    path = tmp_path / "config.yaml"
    path.write_text(yaml.safe_dump({"corpus": str(corpus_file), "limit": 1}))
    return path


@pytest.fixture
def in_tmp_dir(tmp_path, monkeypatch):
    """Run with an empty working directory so no local config is picked up."""
    monkeypatch.chdir(tmp_path)
    return tmp_path
