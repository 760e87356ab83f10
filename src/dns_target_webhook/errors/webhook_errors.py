"""
Webhook error hierarchy with categorization and user guidance.

This module defines the error types used throughout the DNS target webhook.
Errors raised at startup are fatal; errors raised while handling an admission
review map onto an HTTP status code.
"""


class WebhookError(Exception):
    """
    Base error class for all webhook-related exceptions.

    Provides categorization, an HTTP status for request-time errors, and user
    guidance for resolution.
    """

    def __init__(
        self,
        message: str,
        category: str,
        http_status: int = 500,
        user_action: str | None = None,
        cause: Exception | None = None,
    ):
        """
        Initialize webhook error.

        Args:
            message: Human-readable error description
            category: Error category (transport, internal, configuration, certificate)
            http_status: Status code returned when raised while serving a request
            user_action: What user should do to resolve the issue
            cause: Underlying exception that caused this error
        """
        super().__init__(message)
        self.category = category
        self.http_status = http_status
        self.user_action = user_action
        self.cause = cause

    def __str__(self) -> str:
        """Enhanced string representation with user guidance."""
        base_msg = super().__str__()
        if self.user_action:
            return f"{base_msg}\nAction required: {self.user_action}"
        return base_msg


class ReviewDecodeError(WebhookError):
    """The request body or its content type is not an admission review."""

    def __init__(self, message: str, cause: Exception | None = None):
        super().__init__(
            message=message,
            category="transport",
            http_status=400,
            user_action="Send an AdmissionReview as application/json",
            cause=cause,
        )


class ResponseEncodeError(WebhookError):
    """The admission review response could not be serialized."""

    def __init__(self, message: str, cause: Exception | None = None):
        super().__init__(
            message=message,
            category="internal",
            http_status=500,
            cause=cause,
        )


class ConfigurationError(WebhookError):
    """Error in webhook startup configuration."""

    def __init__(self, message: str, user_action: str | None = None):
        super().__init__(
            message=message,
            category="configuration",
            user_action=user_action or "Review and correct configuration",
        )


class NamespaceDiscoveryError(ConfigurationError):
    """The webhook could not determine the namespace it runs in."""

    def __init__(self, path: str, cause: Exception | None = None):
        super().__init__(
            message=f"Unable to read namespace from {path}",
            user_action="Run in-cluster or set POD_NAMESPACE",
        )
        self.cause = cause


class CertificateError(WebhookError):
    """TLS certificate material is missing or unusable."""

    def __init__(
        self, message: str, secret_name: str | None = None, cause: Exception | None = None
    ):
        if secret_name:
            message = f"TLS secret '{secret_name}': {message}"

        super().__init__(
            message=message,
            category="certificate",
            user_action="Check the secret exists and contains tls.crt and tls.key",
            cause=cause,
        )
