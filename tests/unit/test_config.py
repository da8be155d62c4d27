"""Unit tests for config.py"""

import pytest

from mdcf.config import load_config, mask_token, missing_credentials


def test_load_config_defaults():
    """Settings defaults apply when there is no mdcf.yaml, env var or override."""
    settings = load_config()
    assert settings.strategy == "local-wins"
    assert settings.parser_config == "gfm-like"
    assert settings.mermaid_timeout == 60
    assert settings.skip_mermaid is False
    assert settings.log_level == "WARNING"


def test_load_config_reads_yaml(tmp_path):
    """Values in mdcf.yaml are applied."""
    (tmp_path / "mdcf.yaml").write_text("base_url: https://acme.atlassian.net\nmermaid_timeout: 15\n")
    settings = load_config()
    assert settings.base_url == "https://acme.atlassian.net"
    assert settings.mermaid_timeout == 15


def test_load_config_env_overrides_yaml(tmp_path, monkeypatch):
    """MDCF_<FIELD> takes precedence over mdcf.yaml."""
    (tmp_path / "mdcf.yaml").write_text("strategy: append\n")
    monkeypatch.setenv("MDCF_STRATEGY", "auto-merge")
    assert load_config().strategy == "auto-merge"


def test_load_config_env_coerces_types(monkeypatch):
    """Env strings are coerced to the field types."""
    monkeypatch.setenv("MDCF_MERMAID_TIMEOUT", "5")
    monkeypatch.setenv("MDCF_SKIP_MERMAID", "true")
    settings = load_config()
    assert settings.mermaid_timeout == 5
    assert settings.skip_mermaid is True


def test_load_config_cli_overrides_env(monkeypatch):
    """A non-None CLI override beats the env var; None overrides are ignored."""
    monkeypatch.setenv("MDCF_EMAIL", "env@example.com")
    assert load_config(overrides={"email": "cli@example.com"}).email == "cli@example.com"
    assert load_config(overrides={"email": None}).email == "env@example.com"


def test_load_config_invalid_yaml(tmp_path):
    """load_config raises ValueError when mdcf.yaml contains invalid YAML."""
    (tmp_path / "mdcf.yaml").write_text("key: [unclosed\n")
    with pytest.raises(ValueError, match="Invalid mdcf.yaml"):
        load_config()


def test_load_config_non_mapping_yaml(tmp_path):
    (tmp_path / "mdcf.yaml").write_text("- a\n- b\n")
    with pytest.raises(ValueError, match="Invalid mdcf.yaml"):
        load_config()


def test_load_config_rejects_unknown_strategy():
    """Strategy is validated against the merge strategies."""
    with pytest.raises(ValueError):
        load_config(overrides={"strategy": "mine"})


def test_load_config_rejects_zero_timeout():
    with pytest.raises(ValueError):
        load_config(overrides={"mermaid_timeout": 0})


def test_load_config_upper_cases_log_level(monkeypatch):
    monkeypatch.setenv("MDCF_LOG_LEVEL", "debug")
    assert load_config().log_level == "DEBUG"


def test_missing_credentials():
    """All three credentials are reported until set."""
    assert missing_credentials(load_config()) == ["base_url", "email", "token"]
    settings = load_config(overrides={"base_url": "https://x", "email": "e@x", "token": "t"})
    assert missing_credentials(settings) == []


def test_mask_token():
    """Only the first and last four characters are shown; short tokens are fully hidden."""
    assert mask_token("abcdefghijkl") == "abcd****ijkl"
    assert mask_token("12345678") == "****"
    assert mask_token("") == "****"
