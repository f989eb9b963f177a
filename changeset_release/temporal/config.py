"""Configuration system for Temporal client connections.

Supports multiple authentication methods:
- Local development (default)
- Temporal Cloud with API key
- mTLS certificate authentication
"""

import logging
import os
from typing import Union

from dotenv import load_dotenv
from temporalio.client import Client
from temporalio.service import TLSConfig

load_dotenv(override=True)

logger = logging.getLogger(__name__)

# Temporal connection settings
TEMPORAL_ADDRESS = os.getenv("TEMPORAL_ADDRESS", "localhost:7233")
TEMPORAL_NAMESPACE = os.getenv("TEMPORAL_NAMESPACE", "default")
TEMPORAL_TASK_QUEUE = os.getenv("TEMPORAL_TASK_QUEUE", "changeset-release-task-queue")

# Authentication settings
TEMPORAL_TLS_CERT = os.getenv("TEMPORAL_TLS_CERT", "")
TEMPORAL_TLS_KEY = os.getenv("TEMPORAL_TLS_KEY", "")
TEMPORAL_API_KEY = os.getenv("TEMPORAL_API_KEY", "")


class TemporalConfigError(Exception):
    """Raised when the Temporal connection settings are unusable."""


def _load_tls_config() -> Union[TLSConfig, bool]:
    if not (TEMPORAL_TLS_CERT and TEMPORAL_TLS_KEY):
        return False

    logger.info(f"   TLS Certificate: {TEMPORAL_TLS_CERT}")
    logger.info("   Authentication: mTLS")
    try:
        with open(TEMPORAL_TLS_CERT, "rb") as f:
            client_cert = f.read()
        with open(TEMPORAL_TLS_KEY, "rb") as f:
            client_key = f.read()
    except OSError as e:
        raise TemporalConfigError(f"TLS certificate or key file not readable: {e}") from e

    return TLSConfig(client_cert=client_cert, client_private_key=client_key)


async def get_temporal_client() -> Client:
    """
    Creates a Temporal client based on environment configuration.
    Supports local server, mTLS, and API key authentication methods.

    Returns:
        Client: Configured Temporal client

    Raises:
        TemporalConfigError: If TLS material cannot be read
        RuntimeError: If the connection fails
    """
    logger.info("🔗 Connecting to Temporal server:")
    logger.info(f"   Address: {TEMPORAL_ADDRESS}")
    logger.info(f"   Namespace: {TEMPORAL_NAMESPACE}")
    logger.info(f"   Task Queue: {TEMPORAL_TASK_QUEUE}")

    if TEMPORAL_API_KEY:
        logger.info(f"   API Key: {TEMPORAL_API_KEY[:8]}...")
        try:
            return await Client.connect(
                TEMPORAL_ADDRESS,
                namespace=TEMPORAL_NAMESPACE,
                api_key=TEMPORAL_API_KEY,
                tls=True,  # Always use TLS with API key
            )
        except Exception as e:
            raise RuntimeError(f"Failed to connect with API key: {e}") from e

    tls_config = _load_tls_config()
    try:
        return await Client.connect(
            TEMPORAL_ADDRESS,
            namespace=TEMPORAL_NAMESPACE,
            tls=tls_config,
        )
    except Exception as e:
        if TEMPORAL_ADDRESS == "localhost:7233":
            raise RuntimeError(
                f"Failed to connect to local Temporal server. Is it running? Error: {e}"
            ) from e
        raise RuntimeError(f"Failed to connect to Temporal server: {e}") from e


def validate_configuration() -> None:
    """
    Validates the current configuration for common issues.

    Raises:
        TemporalConfigError: If configuration is invalid
    """
    has_mtls = bool(TEMPORAL_TLS_CERT and TEMPORAL_TLS_KEY)
    has_api_key = bool(TEMPORAL_API_KEY)

    if has_mtls and has_api_key:
        raise TemporalConfigError(
            "Cannot use both mTLS and API key authentication. Please set only one."
        )

    if bool(TEMPORAL_TLS_CERT) != bool(TEMPORAL_TLS_KEY):
        raise TemporalConfigError(
            "Both TEMPORAL_TLS_CERT and TEMPORAL_TLS_KEY are required for mTLS."
        )

    for path in (TEMPORAL_TLS_CERT, TEMPORAL_TLS_KEY):
        if path and not os.path.exists(path):
            raise TemporalConfigError(f"TLS file not found: {path}")


def get_configuration_summary() -> dict:
    """Returns a summary of the current configuration with secrets masked."""
    return {
        "address": TEMPORAL_ADDRESS,
        "namespace": TEMPORAL_NAMESPACE,
        "task_queue": TEMPORAL_TASK_QUEUE,
        "auth_method": (
            "api_key" if TEMPORAL_API_KEY else
            "mtls" if TEMPORAL_TLS_CERT and TEMPORAL_TLS_KEY else
            "none"
        ),
        "api_key_set": bool(TEMPORAL_API_KEY),
    }
