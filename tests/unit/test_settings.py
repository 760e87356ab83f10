"""Unit tests for webhook settings."""

import pytest
from pydantic import ValidationError

from dns_target_webhook.errors import ConfigurationError
from dns_target_webhook.settings import Settings

SETTINGS_ENV = [
    "WEBHOOK_PORT",
    "WEBHOOK_HOST",
    "TLS_SECRET",
    "TARGET_IP_ADDRESS",
    "POD_NAMESPACE",
    "LOG_LEVEL",
    "JSON_LOGS",
    "OTEL_TRACING_ENABLED",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    """Isolate settings from the host environment and any .env file."""
    for name in SETTINGS_ENV:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)


def test_defaults():
    settings = Settings()

    assert settings.port == 8080
    assert settings.host == "0.0.0.0"
    assert settings.tls_secret == ""
    assert settings.ip_address == ""
    assert settings.json_logs is True
    assert settings.tracing_enabled is False


def test_environment_variables(monkeypatch):
    monkeypatch.setenv("WEBHOOK_PORT", "9443")
    monkeypatch.setenv("TLS_SECRET", "webhook-tls")
    monkeypatch.setenv("TARGET_IP_ADDRESS", "198.51.100.7")
    monkeypatch.setenv("JSON_LOGS", "false")

    settings = Settings()

    assert settings.port == 9443
    assert settings.tls_secret == "webhook-tls"
    assert settings.ip_address == "198.51.100.7"
    assert settings.json_logs is False


def test_keyword_overrides_environment(monkeypatch):
    monkeypatch.setenv("TARGET_IP_ADDRESS", "198.51.100.7")

    settings = Settings(ip_address="203.0.113.1", port=8443)

    assert settings.ip_address == "203.0.113.1"
    assert settings.port == 8443


@pytest.mark.parametrize("port", [0, 70000, -1])
def test_port_out_of_range(port):
    with pytest.raises(ValidationError):
        Settings(port=port)


def test_required_values_present():
    Settings(tls_secret="webhook-tls", ip_address="10.0.0.1").require_startup_values()


def test_missing_tls_secret_fails_fast():
    with pytest.raises(ConfigurationError, match="tlsSecret"):
        Settings(ip_address="10.0.0.1").require_startup_values()


def test_missing_ip_address_fails_fast():
    with pytest.raises(ConfigurationError, match="ipAddress"):
        Settings(tls_secret="webhook-tls").require_startup_values()
