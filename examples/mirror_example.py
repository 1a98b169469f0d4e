"""Example: mirror a couple of images to a private registry."""

import asyncio
import logging
import sys

# Add parent directory to path
sys.path.insert(0, "src")

from docker_pullator import (
    DockerExecutor,
    ImageIdentity,
    ImageSynchronizer,
    ProfileStore,
    PullatorError,
    TagResponseCache,
)
from docker_pullator.core.session import create_session

# Set up logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


async def main():
    """Pull nginx and redis, then push them with their aliases."""
    registry = "localhost:15000"

    store = ProfileStore()
    store.merge_tags(ImageIdentity(None, "nginx"), {"stable"})
    store.merge_tags(ImageIdentity("bitnami", "redis"), {"7.2"})

    async with await create_session() as session:
        synchronizer = ImageSynchronizer(
            DockerExecutor(dry_run="--run" not in sys.argv),
            TagResponseCache.for_session(session),
        )
        try:
            report = await synchronizer.sync(store, registry)
        except PullatorError as e:
            logger.error(f"Sync aborted: {e}")
            return

    logger.info(f"Pushed {len(report.pushed)} images")
    for failure in report.failures:
        logger.warning(f"  {failure}")


if __name__ == "__main__":
    asyncio.run(main())
