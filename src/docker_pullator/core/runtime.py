"""Container runtime command execution."""

import asyncio
import logging
from typing import Protocol

from ..exceptions import RuntimeInvocationFailed

logger = logging.getLogger(__name__)


class RuntimeExecutor(Protocol):
    """Issues image commands against a container runtime.

    Each call completes before returning and raises RuntimeInvocationFailed
    when the command fails.
    """

    async def pull(self, ref: str) -> None: ...

    async def tag(self, source: str, target: str) -> None: ...

    async def push(self, ref: str) -> None: ...

    async def remove_image(self, ref: str) -> None: ...


class DockerExecutor:
    """Runs the docker CLI (or a compatible binary such as podman)."""

    def __init__(self, binary: str = "docker", dry_run: bool = False) -> None:
        """Initialize the executor.

        Args:
            binary: Runtime executable name or path
            dry_run: Log commands without running them
        """
        self.binary = binary
        self.dry_run = dry_run

    async def pull(self, ref: str) -> None:
        await self._run("pull", ref)

    async def tag(self, source: str, target: str) -> None:
        await self._run("tag", source, target)

    async def push(self, ref: str) -> None:
        await self._run("push", ref)

    async def remove_image(self, ref: str) -> None:
        await self._run("image", "rm", ref)

    async def _run(self, *args: str) -> None:
        """Run one runtime command with inherited stdout/stderr.

        Raises:
            RuntimeInvocationFailed: If the binary cannot be started or exits non-zero
        """
        command = [self.binary, *args]
        logger.info("Running: %s", " ".join(command))
        if self.dry_run:
            return

        try:
            process = await asyncio.create_subprocess_exec(*command)
        except OSError as e:
            raise RuntimeInvocationFailed(command) from e

        returncode = await process.wait()
        if returncode != 0:
            raise RuntimeInvocationFailed(command, returncode)
