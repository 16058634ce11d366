# tests/integration/conftest.py — v1
"""Shared fixtures for integration tests using testcontainers.

Container lifecycle:
- session scope: the MongoDB container starts once per pytest session
- function scope: fresh database per test for isolation

Uses DockerContainer directly with bridge network IP + internal port, so the
tests also work from inside a devcontainer with docker-outside-of-docker.
"""

from __future__ import annotations

import logging
import time
import uuid

import pytest

logger = logging.getLogger(__name__)


def pytest_configure(config):
    config.addinivalue_line("markers", "mongodb: marks tests requiring MongoDB container")


# =====================================================================
#  DEVCONTAINER NETWORKING HELPERS
# =====================================================================

def _get_container_bridge_ip(container, max_attempts: int = 10) -> str:
    """Get container bridge network IP with retries."""
    for attempt in range(max_attempts):
        try:
            wrapped = container.get_wrapped_container()
            wrapped.reload()
            networks = wrapped.attrs.get("NetworkSettings", {}).get("Networks", {})
            for net_name, net_info in networks.items():
                ip = net_info.get("IPAddress", "")
                if ip:
                    logger.info(
                        "Container %s IP: %s (network: %s, attempt %d)",
                        wrapped.short_id, ip, net_name, attempt + 1,
                    )
                    return ip
        except Exception as e:
            logger.debug("Error getting IP (attempt %d): %s", attempt + 1, e)
        time.sleep(0.5)

    raise RuntimeError(
        f"Could not obtain container bridge IP after {max_attempts} attempts"
    )


def _docker_available() -> bool:
    """Check if Docker daemon is reachable."""
    try:
        import docker
        client = docker.from_env()
        client.ping()
        return True
    except Exception:
        return False


# =====================================================================
#  MONGODB CONTAINER (session scope, bridge IP)
# =====================================================================

MONGO_IMAGE = "mongo:7.0"
MONGO_INTERNAL_PORT = 27017


@pytest.fixture(scope="session")
def mongodb_container():
    if not _docker_available():
        pytest.skip("Docker not available")

    from testcontainers.core.container import DockerContainer
    from testcontainers.core.waiting_utils import wait_for_logs

    container = DockerContainer(MONGO_IMAGE).with_exposed_ports(MONGO_INTERNAL_PORT)
    container.start()
    wait_for_logs(container, predicate=r"Waiting for connections", timeout=60)

    ip = _get_container_bridge_ip(container)
    logger.info("MongoDB ready at %s:%d", ip, MONGO_INTERNAL_PORT)
    yield {"host": ip, "port": MONGO_INTERNAL_PORT}
    container.stop()


@pytest.fixture(scope="session")
def mongodb_uri(mongodb_container) -> str:
    c = mongodb_container
    return f"mongodb://{c['host']}:{c['port']}"


@pytest.fixture
def mongodb_database(mongodb_uri):
    """Unique database name per test, dropped afterwards."""
    from pymongo import MongoClient

    name = f"gungnir_test_{uuid.uuid4().hex[:8]}"
    yield name
    client = MongoClient(mongodb_uri, serverSelectionTimeoutMS=5000)
    try:
        client.drop_database(name)
    finally:
        client.close()
