import json
import os
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from conftest import SECRET
from kraken_client.core.config import ClientConfig, load_client_config, load_credentials
from kraken_client.errors import DecodeError


def test_defaults():
    config = load_client_config()
    assert config.base_url == "https://api.kraken.com"
    assert config.timeout_s == 30.0
    assert config.nonce_store_dir is None


def test_file_then_env_then_overrides(tmp_path):
    path = tmp_path / "client.yaml"
    path.write_text("kraken:\n  base_url: http://proxy:3000/\n  timeout_s: 15\n")

    assert load_client_config(path).base_url == "http://proxy:3000"

    with patch.dict(os.environ, {"KRAKEN_TIMEOUT_S": "10"}):
        config = load_client_config(path)
        assert config.timeout_s == 10.0
        assert config.base_url == "http://proxy:3000"

        config = load_client_config(path, overrides={"timeout_s": 5, "base_url": None})
        assert config.timeout_s == 5.0
        assert config.base_url == "http://proxy:3000"


def test_json_config_file(tmp_path):
    path = tmp_path / "client.json"
    path.write_text(json.dumps({"user_agent": "bot/1.0", "nonce_store_dir": str(tmp_path)}))
    config = load_client_config(path)
    assert config.user_agent == "bot/1.0"
    assert config.nonce_store_dir == tmp_path


def test_missing_config_file(tmp_path):
    with pytest.raises(ValueError):
        load_client_config(tmp_path / "nope.yaml")


def test_timeout_bounds():
    with pytest.raises(ValidationError):
        ClientConfig(timeout_s=0)
    with pytest.raises(ValidationError):
        ClientConfig(timeout_s=600)


def test_load_credentials_from_env(tmp_path):
    with patch.dict(os.environ, {"KRAKEN_API_KEY": "key", "KRAKEN_SECRET_KEY": SECRET}):
        creds = load_credentials(env_file=tmp_path / ".env")
    assert creds.api_key == "key"
    assert creds.secret == SECRET


def test_load_credentials_from_dotenv(tmp_path):
    env_file = tmp_path / ".env"
    env_file.write_text(f"KRAKEN_API_KEY=dotenv-key\nKRAKEN_SECRET_KEY={SECRET}\n")
    creds = load_credentials(env_file=env_file)
    assert creds.api_key == "dotenv-key"


def test_load_credentials_missing(tmp_path):
    with pytest.raises(ValueError, match="KRAKEN_API_KEY"):
        load_credentials(env_file=tmp_path / ".env")


def test_load_credentials_rejects_bad_secret(tmp_path):
    with patch.dict(os.environ, {"KRAKEN_API_KEY": "key", "KRAKEN_SECRET_KEY": "***not-base64***"}):
        with pytest.raises(DecodeError):
            load_credentials(env_file=tmp_path / ".env")
        creds = load_credentials(env_file=tmp_path / ".env", validate=False)
    assert creds.api_key == "key"
