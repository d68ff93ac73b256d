"""
Name: Settings + Log Redaction Tests
"""

import json
import logging

import pytest
from pydantic import ValidationError

from commerce_api.context import (
    bind_context,
    clear_context,
    get_context_dict,
    set_request_context,
)
from commerce_api.crosscutting.config import Settings
from commerce_api.crosscutting.logger import JSONFormatter

pytestmark = pytest.mark.unit


def _settings(**overrides) -> Settings:
    values = {
        "database_url": "postgresql://u:p@localhost/db",
        "app_env": "development",
    }
    values.update(overrides)
    return Settings(**values)


def test_production_rejects_default_secret():
    with pytest.raises(ValidationError):
        _settings(app_env="production", jwt_secret="dev-secret")


def test_production_rejects_short_secret():
    with pytest.raises(ValidationError):
        _settings(app_env="production", jwt_secret="short-but-custom")


def test_production_rejects_dev_seed():
    with pytest.raises(ValidationError):
        _settings(app_env="production", jwt_secret="p" * 40, dev_seed_admin=True)


def test_production_accepts_strong_secret():
    assert _settings(app_env="production", jwt_secret="p" * 40).is_production()


@pytest.mark.parametrize("field", ["jwt_access_ttl_minutes", "password_min_length"])
def test_non_positive_values_are_rejected(field):
    with pytest.raises(ValidationError):
        _settings(**{field: 0})


def test_allowed_origins_are_split():
    settings = _settings(allowed_origins="http://a.com, http://b.com,")

    assert settings.get_allowed_origins_list() == ["http://a.com", "http://b.com"]


def test_formatter_redacts_sensitive_fields():
    record = logging.LogRecord("t", logging.INFO, __file__, 1, "login", None, None)
    record.password = "Str0ng!Pass"
    record.token = "eyJ..."
    record.document = "D1"

    payload = json.loads(JSONFormatter().format(record))

    assert payload["password"] == "***REDACTADO***"
    assert payload["token"] == "***REDACTADO***"
    assert payload["document"] == "D1"


def test_formatter_includes_request_context():
    set_request_context(request_id="rid-1", method="GET", path="/auth/profile")
    bind_context(account_id=7)
    try:
        record = logging.LogRecord("t", logging.INFO, __file__, 1, "perfil", None, None)
        payload = json.loads(JSONFormatter().format(record))
    finally:
        clear_context()

    assert payload["request_id"] == "rid-1"
    assert payload["path"] == "/auth/profile"
    assert payload["account_id"] == "7"
    assert get_context_dict() == {}
