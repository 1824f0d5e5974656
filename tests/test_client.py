"""Tests for client configuration and wiring."""

import json
from unittest.mock import MagicMock

import pydantic
import pytest

from intercom_client import client
from intercom_client.resources import users
from intercom_client.restapi import handler


def test_load_config_reads_json(tmp_path):
    """Values from the JSON file override defaults."""
    path = tmp_path / "intercom.json"
    path.write_text(json.dumps({"access_token": "tok", "timeout": 5}))

    config = client.load_config(str(path))

    assert config.access_token == "tok"
    assert config.timeout == 5
    assert config.base_url == "https://api.intercom.io"


def test_load_config_missing_file(tmp_path):
    """A missing config file is reported."""
    with pytest.raises(FileNotFoundError):
        client.load_config(str(tmp_path / "nope.json"))


def test_config_rejects_non_positive_timeout():
    """timeout must be greater than zero."""
    with pytest.raises(pydantic.ValidationError):
        client.ClientConfig(timeout=0)


def test_client_exposes_users_accessor():
    """The users accessor shares the client's handler."""
    mock_handler = MagicMock(spec=handler.RequestHandler)
    mock_handler.base_url = "https://api.intercom.io"

    intercom = client.IntercomClient(client.ClientConfig(), request_handler=mock_handler)

    assert isinstance(intercom.users, users.UserResourceClient)
    assert intercom.users.request_handler is mock_handler


def test_client_close_closes_handler():
    """Leaving the context closes the handler."""
    mock_handler = MagicMock(spec=handler.RequestHandler)
    mock_handler.base_url = "https://api.intercom.io"

    with client.IntercomClient(client.ClientConfig(), request_handler=mock_handler):
        pass

    mock_handler.close.assert_called_once()


def test_create_client_uses_env_path(tmp_path, monkeypatch):
    """create_client falls back to the config path environment variable."""
    path = tmp_path / "intercom.json"
    path.write_text(json.dumps({"access_token": "tok", "api_version": "1.2"}))
    monkeypatch.setenv(client.CONFIG_ENV_VAR, str(path))

    with client.create_client() as intercom:
        assert intercom.config.api_version == "1.2"
        assert intercom.request_handler.api_version == "1.2"


def test_load_config_rejects_invalid_values(tmp_path):
    """Invalid values in the file fail validation."""
    path = tmp_path / "intercom.json"
    path.write_text(json.dumps({"timeout": -1}))

    with pytest.raises(pydantic.ValidationError):
        client.load_config(str(path))


def test_redact_secrets_masks_credentials():
    """Credential keys are masked; other keys are untouched."""
    event = {"event": "configured", "access_token": "tok", "base_url": "https://x"}

    result = client.redact_secrets(None, "info", event)

    assert result["access_token"] == "[redacted]"
    assert result["base_url"] == "https://x"
