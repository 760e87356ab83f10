"""Centralized webhook settings using pydantic-settings.

This module provides a single source of truth for all webhook configuration
loaded from environment variables. Uses pydantic for automatic validation,
type coercion, and documentation. Command-line flags parsed by the entry
point override these values.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from dns_target_webhook.constants import DEFAULT_WEBHOOK_HOST, DEFAULT_WEBHOOK_PORT
from dns_target_webhook.errors import ConfigurationError


class Settings(BaseSettings):
    """Webhook configuration loaded from environment variables.

    ``tls_secret`` and ``ip_address`` have no usable default and must be
    provided either through the environment or on the command line.
    """

    model_config = SettingsConfigDict(
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    # Listener
    port: int = Field(
        default=DEFAULT_WEBHOOK_PORT,
        ge=1,
        le=65535,
        validation_alias="WEBHOOK_PORT",
        description="Port the mutating admission webhook listens on",
    )
    host: str = Field(
        default=DEFAULT_WEBHOOK_HOST,
        validation_alias="WEBHOOK_HOST",
        description="Host address to bind the webhook server",
    )
    tls_secret: str = Field(
        default="",
        validation_alias="TLS_SECRET",
        description="Kubernetes secret containing tls.crt and tls.key",
    )

    # Annotation
    ip_address: str = Field(
        default="",
        validation_alias="TARGET_IP_ADDRESS",
        description="IP address or hostname each Ingress and Gateway is annotated with",
    )

    # Pod identification (from downward API)
    namespace: str = Field(
        default="",
        validation_alias="POD_NAMESPACE",
        description="Namespace holding the TLS secret (empty = service account namespace)",
    )

    # Logging configuration
    log_level: str = Field(
        default="INFO",
        validation_alias="LOG_LEVEL",
        description="Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )
    json_logs: bool = Field(
        default=True,
        validation_alias="JSON_LOGS",
        description="Enable JSON formatted logging for structured log aggregation",
    )
    correlation_ids: bool = Field(
        default=True,
        validation_alias="CORRELATION_IDS",
        description="Enable correlation IDs in logs for request tracing",
    )
    log_health_probes: bool = Field(
        default=False,
        validation_alias="LOG_HEALTH_PROBES",
        description="Log /healthz and /metrics requests",
    )

    # Tracing
    tracing_enabled: bool = Field(
        default=False,
        validation_alias="OTEL_TRACING_ENABLED",
        description="Enable OpenTelemetry tracing of admission reviews",
    )
    tracing_endpoint: str = Field(
        default="http://localhost:4317",
        validation_alias="OTEL_EXPORTER_OTLP_ENDPOINT",
        description="OTLP collector endpoint (gRPC)",
    )
    tracing_sample_rate: float = Field(
        default=1.0,
        ge=0.0,
        le=1.0,
        validation_alias="OTEL_TRACES_SAMPLER_ARG",
        description="Fraction of admission reviews to trace",
    )

    def require_startup_values(self) -> None:
        """Fail fast when a value the webhook cannot run without is missing.

        Raises:
            ConfigurationError: If the TLS secret or the target address is unset
        """
        if not self.tls_secret:
            raise ConfigurationError(
                "tlsSecret command line flag must be specified",
                user_action="Pass --tlsSecret or set TLS_SECRET",
            )

        if not self.ip_address:
            raise ConfigurationError(
                "ipAddress command line flag must be specified",
                user_action="Pass --ipAddress or set TARGET_IP_ADDRESS",
            )

