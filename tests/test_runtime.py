"""Tests for the docker command executor."""

import shutil

import pytest

from docker_pullator.core.runtime import DockerExecutor
from docker_pullator.exceptions import RuntimeInvocationFailed

pytestmark = pytest.mark.skipif(
    shutil.which("true") is None or shutil.which("false") is None,
    reason="needs true/false executables",
)


@pytest.mark.asyncio
async def test_zero_exit_succeeds():
    executor = DockerExecutor(binary="true")

    await executor.pull("nginx:latest")
    await executor.tag("nginx:latest", "dest/nginx:latest")
    await executor.push("dest/nginx:latest")
    await executor.remove_image("dest/nginx:latest")


@pytest.mark.asyncio
async def test_non_zero_exit_raises():
    executor = DockerExecutor(binary="false")

    with pytest.raises(RuntimeInvocationFailed) as exc_info:
        await executor.push("dest/nginx:latest")

    assert exc_info.value.returncode == 1
    assert exc_info.value.command == ["false", "push", "dest/nginx:latest"]


@pytest.mark.asyncio
async def test_missing_binary_raises():
    executor = DockerExecutor(binary="definitely-not-a-container-runtime")

    with pytest.raises(RuntimeInvocationFailed, match="Could not launch") as exc_info:
        await executor.pull("nginx:latest")

    assert exc_info.value.returncode is None


@pytest.mark.asyncio
async def test_dry_run_does_not_execute():
    executor = DockerExecutor(binary="definitely-not-a-container-runtime", dry_run=True)

    await executor.remove_image("nginx:latest")
