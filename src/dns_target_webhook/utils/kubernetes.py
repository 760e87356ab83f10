"""
Kubernetes utilities for the DNS target webhook.

This module provides helper functions for interacting with the Kubernetes API
during startup:
- Kubernetes client management and configuration
- Discovery of the namespace the webhook runs in
- Retrieval of the TLS key pair from a secret
"""

import base64
import binascii
import logging

from kubernetes import client, config
from kubernetes.client.rest import ApiException

from dns_target_webhook.constants import (
    SERVICE_ACCOUNT_NAMESPACE_FILE,
    TLS_CERT_KEY,
    TLS_PRIVATE_KEY_KEY,
)
from dns_target_webhook.errors import CertificateError, NamespaceDiscoveryError

logger = logging.getLogger(__name__)


def get_kubernetes_client() -> client.ApiClient:
    """
    Get configured Kubernetes API client.

    This function handles both in-cluster and local development configurations.

    Returns:
        Configured Kubernetes API client
    """
    try:
        # Try in-cluster config first (when running in a pod)
        config.load_incluster_config()
        logger.debug("Loaded in-cluster Kubernetes configuration")
    except config.ConfigException:
        try:
            # Fall back to local kubeconfig (for development)
            config.load_kube_config()
            logger.debug("Loaded kubeconfig from local environment")
        except config.ConfigException as e:
            logger.error(f"Failed to load Kubernetes configuration: {e}")
            raise

    return client.ApiClient()


def get_current_namespace(path: str = SERVICE_ACCOUNT_NAMESPACE_FILE) -> str:
    """
    Read the namespace of the running pod from its service account mount.

    Args:
        path: Location of the mounted namespace file

    Returns:
        Namespace name

    Raises:
        NamespaceDiscoveryError: If the file cannot be read or is empty
    """
    try:
        with open(path) as f:
            namespace = f.read().strip()
    except OSError as e:
        raise NamespaceDiscoveryError(path, cause=e) from e

    if not namespace:
        raise NamespaceDiscoveryError(path)

    return namespace


def read_tls_secret(
    name: str, namespace: str, k8s_client: client.ApiClient | None = None
) -> tuple[bytes, bytes]:
    """
    Read the certificate and private key stored in a TLS secret.

    Args:
        name: Secret name
        namespace: Namespace holding the secret
        k8s_client: API client, created from the environment when omitted

    Returns:
        Tuple of (PEM certificate, PEM private key)

    Raises:
        CertificateError: If the secret cannot be read or lacks a key
    """
    if k8s_client is None:
        k8s_client = get_kubernetes_client()

    core_api = client.CoreV1Api(k8s_client)

    try:
        secret = core_api.read_namespaced_secret(name=name, namespace=namespace)
    except ApiException as e:
        raise CertificateError(
            f"unable to read secret in namespace {namespace} (reason: {e.reason})",
            secret_name=name,
            cause=e,
        ) from e

    data = secret.data or {}
    material = []
    for key in (TLS_CERT_KEY, TLS_PRIVATE_KEY_KEY):
        if key not in data:
            raise CertificateError(f"secret missing {key}", secret_name=name)
        try:
            material.append(base64.b64decode(data[key], validate=True))
        except (binascii.Error, ValueError) as e:
            raise CertificateError(
                f"{key} is not valid base64", secret_name=name, cause=e
            ) from e

    logger.info(f"Loaded TLS key pair from secret {namespace}/{name}")
    return material[0], material[1]
