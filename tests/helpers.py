"""Test doubles for the runtime executor and the tag fetcher."""

from docker_pullator.core.types import (
    ImageIdentity,
    Platform,
    TagDescriptor,
    image_identity_to_string,
)
from docker_pullator.exceptions import RuntimeInvocationFailed


class RecordingExecutor:
    """Records runtime invocations instead of running them.

    ``fail_on`` holds (operation, ref) pairs that should fail, where ref is
    any argument of the call (the source or the target of a tag).
    """

    def __init__(self, fail_on=()):
        self.calls: list[tuple[str, ...]] = []
        self.fail_on = set(fail_on)

    async def _record(self, operation: str, *args: str) -> None:
        self.calls.append((operation, *args))
        if any((operation, arg) in self.fail_on for arg in args):
            raise RuntimeInvocationFailed(["docker", operation, *args], 1)

    async def pull(self, ref):
        await self._record("pull", ref)

    async def tag(self, source, target):
        await self._record("tag", source, target)

    async def push(self, ref):
        await self._record("push", ref)

    async def remove_image(self, ref):
        await self._record("rm", ref)

    def refs(self, operation: str) -> list[str]:
        return [call[-1] for call in self.calls if call[0] == operation]


class StubFetcher:
    """Serves canned tag listings and counts calls per image."""

    def __init__(self, listings=None, errors=None):
        self.listings: dict[str, list[TagDescriptor]] = listings or {}
        self.errors: dict[str, Exception] = errors or {}
        self.calls: list[str] = []

    async def __call__(self, identity: ImageIdentity) -> list[TagDescriptor]:
        key = image_identity_to_string(identity)
        self.calls.append(key)
        if key in self.errors:
            raise self.errors[key]
        return self.listings.get(key, [])


def tag(name, digest=None, *platforms):
    """Shorthand for building a TagDescriptor."""
    return TagDescriptor(
        name=name,
        digest=digest,
        platforms=tuple(Platform(os=o, architecture=a) for o, a in platforms),
    )
