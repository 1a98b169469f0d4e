"""Tag listing retrieval from the Docker Hub API."""

import asyncio
import logging
import re
from typing import Any, Awaitable, Callable, Optional

import aiohttp

from ..core.session import create_session, parse_json_response
from ..core.types import (
    HubConfig,
    ImageIdentity,
    Platform,
    TagDescriptor,
    image_identity_to_string,
)
from ..exceptions import RegistryNotFound, RegistryResponseInvalid, RegistryUnreachable

logger = logging.getLogger(__name__)

# Regex pattern for valid digest format (algorithm:hex)
DIGEST_PATTERN = re.compile(r"^(sha256|sha512):[a-f0-9]+$")

TagFetcher = Callable[[ImageIdentity], Awaitable[list[TagDescriptor]]]


def validate_digest(digest: Any) -> bool:
    """Check a listing digest has the algorithm:hex form."""
    return isinstance(digest, str) and DIGEST_PATTERN.match(digest) is not None


def parse_platforms(images: Any) -> tuple[Platform, ...]:
    """Extract (os, architecture) pairs from a tag's ``images`` array.

    Entries lacking either field are skipped.
    """
    if not isinstance(images, list):
        return ()

    platforms = []
    for image in images:
        if not isinstance(image, dict):
            continue
        os_name = image.get("os")
        architecture = image.get("architecture")
        if isinstance(os_name, str) and isinstance(architecture, str):
            platforms.append(Platform(os=os_name, architecture=architecture))
    return tuple(platforms)


def parse_tag_descriptor(item: Any) -> TagDescriptor:
    """Convert one listing entry into a TagDescriptor.

    Raises:
        RegistryResponseInvalid: If the entry has no name or a malformed digest
    """
    if not isinstance(item, dict) or not isinstance(item.get("name"), str):
        raise RegistryResponseInvalid(f"Invalid tag entry: {item!r}")

    # Older registries omit the digest or send it empty; that is not an error
    digest = item.get("digest") or None
    if digest is not None and not validate_digest(digest):
        raise RegistryResponseInvalid(
            f"Invalid digest for tag {item['name']}: {digest!r}"
        )

    return TagDescriptor(
        name=item["name"],
        digest=digest,
        platforms=parse_platforms(item.get("images")),
    )


def parse_tags_page(data: Any) -> tuple[list[TagDescriptor], Optional[str]]:
    """Parse one page of the tag listing.

    Returns:
        Descriptors of the page and the URL of the next page (None on the last)

    Raises:
        RegistryResponseInvalid: If the page does not have the expected shape
    """
    if not isinstance(data, dict) or not isinstance(data.get("results"), list):
        raise RegistryResponseInvalid("Tag listing has no results array")

    next_url = data.get("next")
    if next_url is not None and not isinstance(next_url, str):
        raise RegistryResponseInvalid(f"Invalid next page link: {next_url!r}")

    return [parse_tag_descriptor(item) for item in data["results"]], next_url or None


async def _get_page(session: aiohttp.ClientSession, url: str, image: str) -> Any:
    try:
        async with session.get(url) as resp:
            body = await resp.read()
            status = resp.status
    except (aiohttp.ClientError, asyncio.TimeoutError) as e:
        raise RegistryUnreachable(f"Failed to fetch tags for {image}: {e}") from e

    if status == 404:
        raise RegistryNotFound(f"Repository not found: {image}")
    if status >= 500:
        raise RegistryUnreachable(
            f"Registry error while fetching tags for {image}: HTTP {status}"
        )
    if status != 200:
        raise RegistryResponseInvalid(
            f"Unexpected status while fetching tags for {image}: HTTP {status}"
        )

    data = parse_json_response(body)
    if data is None:
        raise RegistryResponseInvalid(f"Failed to parse response for {image}")
    return data


async def fetch_tags(
    identity: ImageIdentity,
    config: Optional[HubConfig] = None,
    session: Optional[aiohttp.ClientSession] = None,
) -> list[TagDescriptor]:
    """Fetch every tag of an image, most recently updated first.

    All pages of the listing are followed and concatenated.

    Args:
        identity: Image to list
        config: Registry API configuration
        session: Existing session to reuse (a temporary one is created otherwise)

    Returns:
        list[TagDescriptor]: Full tag listing

    Raises:
        RegistryUnreachable: On network failure, timeout or server error
        RegistryNotFound: If the repository does not exist
        RegistryResponseInvalid: If a page has an unexpected shape
    """
    config = config or HubConfig()
    image = image_identity_to_string(identity)

    if session is None:
        async with await create_session(config) as own_session:
            return await fetch_tags(identity, config, own_session)

    descriptors: list[TagDescriptor] = []
    url: Optional[str] = config.tags_url(identity)
    pages = 0

    while url:
        if pages >= config.max_pages:
            raise RegistryResponseInvalid(
                f"Tag listing for {image} exceeds {config.max_pages} pages"
            )
        data = await _get_page(session, url, image)
        page, url = parse_tags_page(data)
        descriptors.extend(page)
        pages += 1

    logger.debug(f"Fetched {len(descriptors)} tags for {image} in {pages} page(s)")
    return descriptors


class TagResponseCache:
    """Per-run memo of tag listings keyed by canonical image identity.

    Each identity is fetched at most once; failed fetches are not stored.
    """

    def __init__(self, fetcher: TagFetcher) -> None:
        """Initialize the cache.

        Args:
            fetcher: Coroutine function returning the listing for an identity
        """
        self._fetcher = fetcher
        self._responses: dict[str, list[TagDescriptor]] = {}
        self.fetch_count = 0

    @classmethod
    def for_session(
        cls, session: aiohttp.ClientSession, config: Optional[HubConfig] = None
    ) -> "TagResponseCache":
        """Cache backed by fetch_tags over a shared session."""

        async def fetcher(identity: ImageIdentity) -> list[TagDescriptor]:
            return await fetch_tags(identity, config, session)

        return cls(fetcher)

    def __contains__(self, identity: ImageIdentity) -> bool:
        return image_identity_to_string(identity) in self._responses

    def __len__(self) -> int:
        return len(self._responses)

    async def get_or_fetch(self, identity: ImageIdentity) -> list[TagDescriptor]:
        key = image_identity_to_string(identity)
        if key in self._responses:
            logger.debug(f"Using cached tag listing for {key}")
            return self._responses[key]

        self.fetch_count += 1
        descriptors = await self._fetcher(identity)
        self._responses[key] = descriptors
        return descriptors
