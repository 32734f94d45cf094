"""
Mutual-TLS material loading.

The producer itself is handed file locations (librdkafka reads them), so the
files are loaded here with :mod:`ssl` first to report bad paths or
mismatched key pairs before any connection is attempted.
"""

import logging
import ssl
from dataclasses import dataclass
from typing import Dict

from kafka_producer_tui.common.exceptions import SecurityError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SecureContext:
    """Validated client certificate, key and CA bundle."""

    cert_file: str
    key_file: str
    ca_file: str
    ssl_context: ssl.SSLContext

    def producer_config(self) -> Dict[str, str]:
        return {
            "security.protocol": "SSL",
            "ssl.certificate.location": self.cert_file,
            "ssl.key.location": self.key_file,
            "ssl.ca.location": self.ca_file,
        }


def build_transport_security(cert_file: str, key_file: str, ca_file: str) -> SecureContext:
    """
    Load and validate mutual-TLS material.

    Args:
        cert_file: Client certificate (PEM)
        key_file: Client private key (PEM)
        ca_file: CA bundle used to verify the brokers (PEM)

    Returns:
        SecureContext wrapping a TLS 1.2+ client context

    Raises:
        SecurityError: If any file is missing or unusable
    """
    context = ssl.SSLContext(ssl.PROTOCOL_TLS_CLIENT)
    context.minimum_version = ssl.TLSVersion.TLSv1_2

    try:
        context.load_cert_chain(certfile=cert_file, keyfile=key_file)
    except (OSError, ssl.SSLError) as e:
        raise SecurityError(f"failed to load client certificate {cert_file}: {e}") from e

    try:
        context.load_verify_locations(cafile=ca_file)
    except OSError as e:
        raise SecurityError(f"failed to read CA certificate {ca_file}: {e}") from e
    except ssl.SSLError as e:
        raise SecurityError(f"failed to parse CA certificate {ca_file}: {e}") from e

    logger.info(f"Loaded mTLS material (cert={cert_file}, ca={ca_file})")
    return SecureContext(cert_file=cert_file, key_file=key_file, ca_file=ca_file, ssl_context=context)
