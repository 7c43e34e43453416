from __future__ import annotations
import json
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

from kraken_client.auth.credentials import Credentials
from kraken_client.constants import (
    DEFAULT_BASE_URL,
    DEFAULT_TIMEOUT_S,
    DEFAULT_USER_AGENT,
    ENV_API_KEY,
    ENV_SECRET_KEY,
)

ENV_PREFIX = "KRAKEN_"


class ClientConfig(BaseModel):
    base_url: str = DEFAULT_BASE_URL
    timeout_s: float = Field(default=DEFAULT_TIMEOUT_S, ge=1.0, le=120.0)
    user_agent: str = DEFAULT_USER_AGENT
    nonce_store_dir: Optional[Path] = None
    log_dir: Optional[Path] = None

    @field_validator("base_url", mode="before")
    def normalize_base_url(cls, v: str) -> str:
        """
        Strip trailing slashes so endpoint paths can be appended directly.
        Point this at a caching proxy to route calls through it.
        """
        if not v:
            return DEFAULT_BASE_URL
        return str(v).rstrip("/")


def _load_file(path: Path) -> Dict[str, Any]:
    with open(path, "r", encoding="utf-8") as f:
        if path.suffix in (".yaml", ".yml"):
            data = yaml.safe_load(f) or {}
        else:
            data = json.load(f)
    if not isinstance(data, dict):
        raise ValueError(f"Config file {path} must contain a mapping, got {type(data).__name__}")
    # Allow the settings to live under a "kraken" section
    return data.get("kraken", data)


def load_client_config(
    config_path: Optional[Path] = None,
    overrides: Optional[Dict[str, Any]] = None,
) -> ClientConfig:
    """Load and validate client configuration with priority: overrides > env > config_file > defaults."""
    data: Dict[str, Any] = {}

    # 1. Config File (YAML or JSON)
    if config_path:
        config_path = Path(config_path)
        if not config_path.exists():
            raise ValueError(f"Config file not found: {config_path}")
        data.update(_load_file(config_path))

    # 2. Environment Variables (KRAKEN_ prefix)
    for key in ClientConfig.model_fields.keys():
        env_val = os.environ.get(f"{ENV_PREFIX}{key.upper()}")
        if env_val:
            data[key] = env_val

    # 3. Overrides (CLI flags)
    if overrides:
        data.update({k: v for k, v in overrides.items() if v is not None})

    return ClientConfig(**data)


def load_credentials(env_file: Optional[Path] = None, validate: bool = True) -> Credentials:
    """
    Read KRAKEN_API_KEY / KRAKEN_SECRET_KEY from the environment (and .env).

    With `validate`, a secret that is not valid base64 raises DecodeError here
    instead of on the first private call.
    """
    load_dotenv(env_file)
    api_key = os.environ.get(ENV_API_KEY)
    secret = os.environ.get(ENV_SECRET_KEY)
    if not api_key or not secret:
        raise ValueError(
            "STRICT CONFIGURATION ERROR: Private endpoints require "
            f"{ENV_API_KEY} and {ENV_SECRET_KEY} environment variables "
            "(or entries in a .env file)."
        )

    credentials = Credentials(api_key=api_key, secret=secret)
    if validate:
        credentials.validate()
    return credentials
