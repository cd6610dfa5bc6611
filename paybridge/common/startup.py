"""Startup-time helpers for safe config logging and the address banner."""

import os

from paybridge.common.logging import logger
from paybridge.common.network import InterfaceTable, describe_interfaces


def _safe_env(name: str) -> str:
    """Return env value with simple redaction for secret-like variable names."""

    value = os.getenv(name)
    if value is None:
        return "<unset>"
    if any(secret in name for secret in ["KEY", "SECRET", "PASSWORD", "TOKEN"]):
        return "<redacted>"
    return value


def log_startup_config(service_name: str, keys: list[str]) -> None:
    """Log selected startup config keys for quick troubleshooting."""

    config = {"service": service_name}
    for key in keys:
        config[key] = _safe_env(key)
    logger.info("startup_config=%s", config)


def log_startup_banner(
    service_name: str,
    local_address: str,
    port: int,
    interfaces: InterfaceTable | None = None,
) -> None:
    """Log where the service can be reached from this host and the LAN."""

    logger.info("%s running", service_name)
    logger.info("localhost url=http://localhost:%s", port)
    logger.info("device url=http://%s:%s", local_address, port)
    logger.info("health check url=http://%s:%s/health", local_address, port)
    for name, address in describe_interfaces(interfaces):
        logger.info("interface name=%s address=%s", name, address)
