"""
Error handling module for the DNS target webhook.

This module provides the error hierarchy shared by the request path and the
startup sequence.
"""

from .webhook_errors import (
    CertificateError,
    ConfigurationError,
    NamespaceDiscoveryError,
    ResponseEncodeError,
    ReviewDecodeError,
    WebhookError,
)

__all__ = [
    "WebhookError",
    "ReviewDecodeError",
    "ResponseEncodeError",
    "ConfigurationError",
    "NamespaceDiscoveryError",
    "CertificateError",
]
