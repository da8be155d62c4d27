"""Application configuration: settings schema and mdcf.yaml loader"""

import os
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import BaseModel, Field, field_validator

from mdcf.core.models import MergeStrategy


CONFIG_FILE = "mdcf.yaml"
CREDENTIAL_FIELDS = ("base_url", "email", "token")


class Settings(BaseModel):
    base_url:        Optional[str] = Field(default=None, description="Confluence site, e.g. https://acme.atlassian.net")
    email:           Optional[str] = Field(default=None, description="Atlassian account email")
    token:           Optional[str] = Field(default=None, description="Atlassian API token")
    parser_config:   str  = Field(default="gfm-like",   description="MarkdownIt parser preset name")
    strategy:        str  = Field(default=MergeStrategy.local_wins.value, description="Merge strategy used on update")
    mmdc_path:       Optional[str] = Field(default=None, description="Explicit path to the mermaid-cli binary")
    mermaid_timeout: int  = Field(default=60, ge=1, description="Seconds before a diagram render is abandoned")
    skip_mermaid:    bool = Field(default=False, description="Leave mermaid blocks as code instead of rendering")
    log_level:       str  = Field(default="WARNING", description="Root logging level")

    @field_validator("strategy")
    @classmethod
    def _known_strategy(cls, v: str) -> str:
        return MergeStrategy(v).value

    @field_validator("log_level")
    @classmethod
    def _upper_level(cls, v: str) -> str:
        return v.upper()


def load_config(overrides: dict[str, Any] = None) -> Settings:
    """Load Settings from mdcf.yaml, then MDCF_<FIELD> env vars, then non-None CLI overrides."""
    data: dict[str, Any] = {}
    if Path(CONFIG_FILE).exists():
        try:
            data = yaml.safe_load(Path(CONFIG_FILE).read_text()) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid {CONFIG_FILE}: {e}") from e
        if not isinstance(data, dict):
            raise ValueError(f"Invalid {CONFIG_FILE}: expected a mapping")

    for name in Settings.model_fields:
        if val := os.getenv(f"MDCF_{name.upper()}"):
            data[name] = val

    if overrides:
        data.update({k: v for k, v in overrides.items() if v is not None})
    return Settings(**data)


def missing_credentials(settings: Settings) -> list[str]:
    """Names of the credential fields that are unset."""
    return [name for name in CREDENTIAL_FIELDS if not getattr(settings, name)]


def mask_token(token: str) -> str:
    """Show only the first and last four characters of a token."""
    if len(token) <= 8:
        return "****"
    return token[:4] + "****" + token[-4:]
