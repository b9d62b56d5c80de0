"""Replance configuration management.

Order of precedence (later wins):
1. Field defaults
2. .env.<ENV> / .env files (never override real environment variables)
3. Environment variables (REPLANCE_*)
4. replance.yaml (or the file named by REPLANCE_CONFIG)
"""

from __future__ import annotations

import logging
import os
import re
from pathlib import Path
from typing import Any, Optional

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


APP_NAME = "replance"
CONFIG_YAML = Path.cwd() / f"{APP_NAME}.yaml"


class SessionConfig(BaseModel):
    """Connection settings resolved once at startup."""
    model_config = ConfigDict(frozen=True)

    host: str
    port: int = Field(ge=0, le=65535)
    json_mode: bool = False

    @property
    def endpoint(self) -> str:
        return f"{self.host}:{self.port}"


class Settings(BaseSettings):
    """Tool-wide settings loaded from env vars + YAML."""
    model_config = SettingsConfigDict(env_prefix="REPLANCE_")

    env: str = "prod"
    json_mode: bool = False
    prompt: str = ""

    cache_dir: Optional[Path] = None
    history: bool = True
    history_size: int = Field(default=100, ge=0)

    buffer_size: int = Field(default=4096, gt=0)

    log_file: str | None = None
    log_level: int = logging.WARNING


# ---- Loader helpers ---- #
_PLACEHOLDER_RE = re.compile(r"\${([A-Z0-9_]+)(?::-(.*?))?}")

def _expand_placeholders(text: str) -> str:
    """
    Replace ${VAR}            → value from env  (or '')
            ${VAR:-default}   → value or fallback
    """
    def repl(match: re.Match):
        var, default = match.group(1), match.group(2)
        return os.getenv(var, default or "")

    return _PLACEHOLDER_RE.sub(repl, text)

def _config_path() -> Path:
    override = os.getenv("REPLANCE_CONFIG")
    return Path(override) if override else CONFIG_YAML

def _yaml_overrides() -> dict[str, Any]:
    """Return dict from the YAML file, or {} when there is none."""
    path = _config_path()
    if not path.is_file():
        return {}
    raw = _expand_placeholders(path.read_text())
    return yaml.safe_load(raw) or {}

def _load_dotenv() -> None:
    """Populate os.environ from .env.<env> if it exists."""
    env = os.getenv("REPLANCE_ENV", "prod")
    load_dotenv(f".env.{env}", override=False)
    load_dotenv(".env", override=False)

def get_config() -> Settings:
    """Returns the settings object that will be used by the rest of the app."""
    _load_dotenv()
    return Settings(**_yaml_overrides())
