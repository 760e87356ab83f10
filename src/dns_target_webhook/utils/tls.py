"""TLS helpers for serving the webhook over HTTPS."""

import contextlib
import logging
import os
import ssl
import tempfile
from collections.abc import Iterator

from dns_target_webhook.errors import CertificateError

logger = logging.getLogger(__name__)


@contextlib.contextmanager
def key_pair_files(cert_data: bytes, key_data: bytes) -> Iterator[tuple[str, str]]:
    """
    Write a key pair to temporary files for the lifetime of the context.

    ``ssl.SSLContext.load_cert_chain`` only accepts paths, so the material
    read from the secret has to touch the filesystem. The files are created
    readable by the owner only and removed on exit.

    Yields:
        Tuple of (certificate path, private key path)
    """
    paths: list[str] = []
    try:
        for prefix, data in (("cert-", cert_data), ("key-", key_data)):
            fd, path = tempfile.mkstemp(prefix=prefix)
            paths.append(path)
            with os.fdopen(fd, "wb") as f:
                f.write(data)
        yield paths[0], paths[1]
    finally:
        for path in paths:
            with contextlib.suppress(FileNotFoundError):
                os.remove(path)


def create_server_ssl_context(cert_data: bytes, key_data: bytes) -> ssl.SSLContext:
    """
    Build a server-side SSL context from PEM encoded material.

    Args:
        cert_data: PEM certificate chain
        key_data: PEM private key

    Returns:
        SSL context ready to pass to the listener

    Raises:
        CertificateError: If the key pair cannot be loaded
    """
    ssl_context = ssl.create_default_context(ssl.Purpose.CLIENT_AUTH)
    ssl_context.minimum_version = ssl.TLSVersion.TLSv1_2

    with key_pair_files(cert_data, key_data) as (cert_path, key_path):
        try:
            ssl_context.load_cert_chain(certfile=cert_path, keyfile=key_path)
        except ssl.SSLError as e:
            raise CertificateError(f"unable to load key pair: {e}", cause=e) from e

    logger.debug("Created server SSL context")
    return ssl_context
