"""Core data types for profiles, tag listings and registry access."""

from dataclasses import dataclass, field
from typing import Optional

DEFAULT_HUB_URL = "https://hub.docker.com"

# Namespace Docker Hub uses for official images
DEFAULT_LIBRARY = "library"


@dataclass(frozen=True, eq=False)
class ImageIdentity:
    """A (library, repo) pair naming one repository in a registry.

    ``library=None`` means the registry's default namespace and is distinct
    from an empty string.
    """

    library: Optional[str]
    repo: str

    @property
    def key(self) -> str:
        return image_identity_to_string(self)

    @classmethod
    def parse(cls, key: str) -> "ImageIdentity":
        """Build an identity from its canonical string form."""
        if "/" in key:
            library, repo = key.split("/", 1)
            return cls(library=library, repo=repo)
        return cls(library=None, repo=key)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ImageIdentity):
            return NotImplemented
        return self.key == other.key

    def __hash__(self) -> int:
        return hash(self.key)

    def __str__(self) -> str:
        return self.key


def image_identity_to_string(identity: ImageIdentity) -> str:
    """Canonical string form of an image identity.

    Args:
        identity: Image identity

    Returns:
        ``repo`` when no library is set, otherwise ``library/repo``
    """
    if identity.library is None:
        return identity.repo
    return f"{identity.library}/{identity.repo}"


@dataclass
class PullProfile:
    """A tracked image and the tags wanted for it."""

    library: Optional[str]
    repo: str
    tags: set[str] = field(default_factory=set)

    @property
    def identity(self) -> ImageIdentity:
        return ImageIdentity(library=self.library, repo=self.repo)

    @property
    def image(self) -> str:
        return image_identity_to_string(self.identity)

    def sorted_tags(self) -> list[str]:
        return sorted(self.tags)

    def ref(self, tag: str) -> str:
        """Local image reference for one of the profile's tags."""
        return f"{self.image}:{tag}"


@dataclass(frozen=True)
class Platform:
    """Operating system and architecture of one image variant."""

    os: str
    architecture: str


@dataclass(frozen=True)
class TagDescriptor:
    """A tag as reported by the registry tag listing."""

    name: str
    digest: Optional[str] = None
    platforms: tuple[Platform, ...] = ()


@dataclass(frozen=True)
class HubConfig:
    """Registry API configuration."""

    url: str = DEFAULT_HUB_URL
    timeout: int = 30
    page_size: int = 100
    max_pages: int = 100

    @property
    def base_url(self) -> str:
        return self.url.rstrip("/")

    def tags_url(self, identity: ImageIdentity) -> str:
        """First page URL of the tag listing for an image."""
        library = identity.library or DEFAULT_LIBRARY
        return (
            f"{self.base_url}/v2/repositories/{library}/{identity.repo}/tags"
            f"?page_size={self.page_size}&ordering=last_updated"
        )
