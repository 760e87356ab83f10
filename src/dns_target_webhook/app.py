#!/usr/bin/env python3
"""
DNS Target Webhook - Main entry point for the mutating admission webhook.

The webhook annotates every Ingress and Gateway created in the cluster with
``external-dns.alpha.kubernetes.io/target`` so that external-dns publishes
records pointing at a fixed address.

Usage:
    dns-target-webhook --tlsSecret webhook-tls --ipAddress 203.0.113.10
    # Or as a module:
    python -m dns_target_webhook.app --tlsSecret webhook-tls --ipAddress 203.0.113.10

Environment Variables:
    WEBHOOK_PORT: Port to listen on (default 8080)
    TLS_SECRET: Secret in the webhook's namespace holding tls.crt and tls.key
    TARGET_IP_ADDRESS: Address written into the annotation
    POD_NAMESPACE: Namespace of the secret (default: service account namespace)
    LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR)
"""

import argparse
import asyncio
import logging
import signal
import ssl
import sys

from kubernetes import config
from pydantic import ValidationError

from dns_target_webhook.errors import ConfigurationError, WebhookError
from dns_target_webhook.observability.logging import setup_structured_logging
from dns_target_webhook.observability.tracing import setup_tracing, shutdown_tracing
from dns_target_webhook.server import WebhookServer
from dns_target_webhook.settings import Settings
from dns_target_webhook.utils.kubernetes import get_current_namespace, read_tls_secret
from dns_target_webhook.utils.tls import create_server_ssl_context
from dns_target_webhook.webhooks.annotate import AnnotationMutator
from dns_target_webhook.webhooks.handler import ReviewHandler

logger = logging.getLogger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line flags; unset flags fall back to the environment."""
    parser = argparse.ArgumentParser(
        prog="dns-target-webhook",
        description="Mutating admission webhook adding external-dns target annotations",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=None,
        help="The port the mutating admission webhook will listen on",
    )
    parser.add_argument(
        "--tlsSecret",
        dest="tls_secret",
        default=None,
        help="The Kubernetes secret containing the tls.crt and tls.key",
    )
    parser.add_argument(
        "--ipAddress",
        dest="ip_address",
        default=None,
        help="The IP address that each Ingress and Gateway should be annotated with",
    )
    return parser.parse_args(argv)


def build_settings(args: argparse.Namespace) -> Settings:
    """
    Merge command-line flags over environment settings.

    Raises:
        ConfigurationError: If a value fails validation
    """
    overrides = {
        key: value
        for key, value in vars(args).items()
        if value is not None
    }
    try:
        return Settings(**overrides)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid webhook settings: {e}") from e


def configure_logging(webhook_settings: Settings) -> None:
    """Configure structured logging for the webhook."""
    setup_structured_logging(
        log_level=webhook_settings.log_level.upper(),
        enable_json_formatting=webhook_settings.json_logs,
        correlation_id_enabled=webhook_settings.correlation_ids,
        log_health_probes=webhook_settings.log_health_probes,
    )


def load_ssl_context(webhook_settings: Settings) -> ssl.SSLContext:
    """
    Fetch the TLS key pair from the cluster and build the listener context.

    Raises:
        WebhookError: If the namespace or the key pair cannot be obtained
    """
    namespace = webhook_settings.namespace or get_current_namespace()
    cert_data, key_data = read_tls_secret(webhook_settings.tls_secret, namespace)
    return create_server_ssl_context(cert_data, key_data)


async def serve(webhook_settings: Settings, ssl_context: ssl.SSLContext | None) -> None:
    """Run the webhook server until SIGINT or SIGTERM."""
    mutator = AnnotationMutator(target_value=webhook_settings.ip_address)
    server = WebhookServer(
        ReviewHandler(mutator),
        port=webhook_settings.port,
        host=webhook_settings.host,
        ssl_context=ssl_context,
    )

    stop = asyncio.Event()
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, stop.set)

    async with server:
        logger.info("Listening...")
        await stop.wait()
        logger.info("Shutting down...")


def main(argv: list[str] | None = None) -> int:
    """
    Start the webhook.

    Returns:
        Process exit status: 0 after a clean shutdown, 1 on startup failure
    """
    args = parse_args(argv)

    try:
        webhook_settings = build_settings(args)
    except ConfigurationError as e:
        logger.critical(str(e))
        return 1

    configure_logging(webhook_settings)

    try:
        webhook_settings.require_startup_values()
        ssl_context = load_ssl_context(webhook_settings)
    except WebhookError as e:
        logger.critical(f"Startup failed: {e}", extra={"error_type": type(e).__name__})
        return 1
    except config.ConfigException as e:
        logger.critical(f"Startup failed: unable to configure Kubernetes client: {e}")
        return 1

    setup_tracing(
        enabled=webhook_settings.tracing_enabled,
        endpoint=webhook_settings.tracing_endpoint,
        sample_rate=webhook_settings.tracing_sample_rate,
    )

    try:
        asyncio.run(serve(webhook_settings, ssl_context))
    finally:
        shutdown_tracing()

    return 0


if __name__ == "__main__":
    sys.exit(main())
