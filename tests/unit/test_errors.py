"""Unit tests for the webhook error hierarchy."""

from dns_target_webhook.errors import (
    CertificateError,
    ConfigurationError,
    NamespaceDiscoveryError,
    ResponseEncodeError,
    ReviewDecodeError,
    WebhookError,
)


def test_request_errors_map_to_http_status():
    assert ReviewDecodeError("bad").http_status == 400
    assert ResponseEncodeError("bad").http_status == 500


def test_user_action_rendered():
    error = ConfigurationError("ipAddress missing", user_action="Pass --ipAddress")

    assert str(error) == "ipAddress missing\nAction required: Pass --ipAddress"


def test_categories():
    assert ReviewDecodeError("x").category == "transport"
    assert ResponseEncodeError("x").category == "internal"
    assert ConfigurationError("x").category == "configuration"
    assert CertificateError("x").category == "certificate"


def test_certificate_error_names_secret():
    error = CertificateError("secret missing tls.crt", secret_name="webhook-tls")

    assert str(error).startswith("TLS secret 'webhook-tls': secret missing tls.crt")


def test_namespace_discovery_is_configuration_error():
    cause = FileNotFoundError("absent")
    error = NamespaceDiscoveryError("/tmp/ns", cause=cause)

    assert isinstance(error, ConfigurationError)
    assert isinstance(error, WebhookError)
    assert error.cause is cause
    assert "/tmp/ns" in str(error)


def test_cause_is_kept():
    cause = ValueError("json")
    assert ReviewDecodeError("bad", cause=cause).cause is cause
