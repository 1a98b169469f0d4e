"""Test configuration and fixtures."""

import os

import pytest

from docker_pullator.core.types import ImageIdentity
from docker_pullator.operations.sync import ImageSynchronizer
from docker_pullator.operations.tags import TagResponseCache
from docker_pullator.profiles import ProfileStore
from tests.helpers import RecordingExecutor, StubFetcher, tag

NGINX = ImageIdentity(library=None, repo="nginx")


@pytest.fixture
def executor():
    """Runtime executor double."""
    return RecordingExecutor()


@pytest.fixture
def fetcher():
    """Tag fetcher double with an nginx listing where 1.25 and latest are aliases."""
    return StubFetcher(
        {
            "nginx": [
                tag("latest", "sha256:abc", ("linux", "amd64")),
                tag("1.25", "sha256:abc", ("linux", "amd64")),
                tag("1.24", "sha256:def"),
            ]
        }
    )


@pytest.fixture
def store():
    """Store tracking nginx 1.25 and latest."""
    store = ProfileStore()
    store.merge_tags(NGINX, {"1.25", "latest"})
    return store


@pytest.fixture
def synchronizer(executor, fetcher):
    return ImageSynchronizer(executor, TagResponseCache(fetcher))


def pytest_configure(config):
    """Configure pytest markers and settings."""
    config.addinivalue_line(
        "markers", "integration: mark test as integration test requiring docker"
    )


def pytest_collection_modifyitems(config, items):
    """Skip integration tests unless explicitly enabled."""
    skip_integration = pytest.mark.skip(reason="Docker not available")

    for item in items:
        if (
            "integration" in item.keywords
            and os.getenv("DOCKER_AVAILABLE", "false").lower() != "true"
        ):
            item.add_marker(skip_integration)
