"""Pull, push, clean and sync of tracked images."""

import logging
from dataclasses import dataclass, field

from ..core.runtime import RuntimeExecutor
from ..core.types import PullProfile, TagDescriptor
from ..exceptions import PullatorError, RegistryError
from ..profiles import ProfileStore
from .tags import TagResponseCache

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SyncFailure:
    """One failed step, with the image and tag it happened for."""

    image: str
    tag: str
    step: str
    error: str

    def __str__(self) -> str:
        return f"{self.step} failed for {self.image}:{self.tag}: {self.error}"


@dataclass
class PushReport:
    """Outcome of a push pass."""

    pushed: list[str] = field(default_factory=list)
    failures: list[SyncFailure] = field(default_factory=list)
    clean_failures: list[SyncFailure] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures and not self.clean_failures


def resolve_push_targets(tag: str, descriptors: list[TagDescriptor]) -> list[str]:
    """Tags to publish when pushing ``tag``.

    The requested tag comes first, followed by every other tag in the listing
    that shares its digest, in listing order. A tag missing from the listing
    or one without a digest is published alone.

    Args:
        tag: Requested tag
        descriptors: Tag listing of the image

    Returns:
        list[str]: Deduplicated tag names
    """
    targets = [tag]
    item = next((d for d in descriptors if d.name == tag), None)
    if item is None or item.digest is None:
        return targets

    for descriptor in descriptors:
        if descriptor.digest == item.digest and descriptor.name not in targets:
            targets.append(descriptor.name)
    return targets


def _record(failures: list[SyncFailure], failure: SyncFailure) -> None:
    logger.error(str(failure))
    failures.append(failure)


class ImageSynchronizer:
    """Synchronizes a profile store against a runtime and a registry."""

    def __init__(
        self,
        executor: RuntimeExecutor,
        cache: TagResponseCache,
        clean_after_push: bool = False,
    ) -> None:
        """Initialize the synchronizer.

        Args:
            executor: Container runtime command executor
            cache: Tag listing cache for this run
            clean_after_push: Remove the pulled images once the push pass is done
        """
        self.executor = executor
        self.cache = cache
        self.clean_after_push = clean_after_push

    async def pull(self, store: ProfileStore) -> None:
        """Pull every declared tag.

        Raises:
            RuntimeInvocationFailed: On the first failing pull; nothing after it runs
        """
        for _, profile in store.list():
            for tag in profile.sorted_tags():
                await self.executor.pull(profile.ref(tag))

    async def push(self, store: ProfileStore, registry: str) -> PushReport:
        """Re-tag and push every declared tag and its digest aliases.

        Failures are recorded in the report and never stop the pass.

        Args:
            store: Tracked profiles
            registry: Destination registry prefix (e.g. "registry.example.com:5000")

        Returns:
            PushReport: Pushed references and failures
        """
        registry = registry.rstrip("/")
        report = PushReport()
        # Targets already published this pass; failed ones may be retried
        # from a later requested tag that aliases them
        published: set[str] = set()

        for identity, profile in store.list():
            try:
                descriptors = await self.cache.get_or_fetch(identity)
            except RegistryError as e:
                for tag in profile.sorted_tags():
                    _record(report.failures, SyncFailure(profile.image, tag, "fetch", str(e)))
                continue

            for tag in profile.sorted_tags():
                for alias in resolve_push_targets(tag, descriptors):
                    target = f"{registry}/{profile.image}:{alias}"
                    if target in published:
                        continue
                    if await self._push_target(profile, tag, target, report):
                        published.add(target)

        if self.clean_after_push:
            report.clean_failures = await self.clean(store)

        return report

    async def _push_target(
        self, profile: PullProfile, tag: str, target: str, report: PushReport
    ) -> bool:
        """Tag, push and remove one target; True when it was tagged and pushed."""
        source = profile.ref(tag)
        tagged = pushed = False

        try:
            await self.executor.tag(source, target)
            tagged = True
        except PullatorError as e:
            _record(report.failures, SyncFailure(profile.image, tag, f"tag {target}", str(e)))

        try:
            await self.executor.push(target)
            pushed = tagged
        except PullatorError as e:
            _record(report.failures, SyncFailure(profile.image, tag, f"push {target}", str(e)))

        try:
            await self.executor.remove_image(target)
        except PullatorError as e:
            _record(report.failures, SyncFailure(profile.image, tag, f"remove {target}", str(e)))

        if pushed:
            report.pushed.append(target)
        return pushed

    async def sync(self, store: ProfileStore, registry: str) -> PushReport:
        """Pull everything, then push everything."""
        await self.pull(store)
        return await self.push(store, registry)

    async def clean(self, store: ProfileStore) -> list[SyncFailure]:
        """Remove every declared tag from the local runtime.

        Returns:
            list[SyncFailure]: Removals that failed
        """
        failures: list[SyncFailure] = []
        for _, profile in store.list():
            for tag in profile.sorted_tags():
                try:
                    await self.executor.remove_image(profile.ref(tag))
                except PullatorError as e:
                    _record(failures, SyncFailure(profile.image, tag, "remove", str(e)))
        return failures
