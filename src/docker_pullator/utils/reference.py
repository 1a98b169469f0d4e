"""Image reference parsing."""

from typing import Optional

from ..core.types import ImageIdentity


def parse_image_reference(reference: str) -> tuple[ImageIdentity, Optional[str]]:
    """Split an image reference into its identity and optional tag.

    Args:
        reference: Image reference
            - e.g. "nginx", "nginx:1.25", "bitnami/redis:7.2"

    Returns:
        tuple[ImageIdentity, Optional[str]]: identity and tag (None if absent)

    Raises:
        ValueError: If the reference has no repository name

    Examples:
        parse_image_reference("nginx:alpine")
        # (ImageIdentity(library=None, repo="nginx"), "alpine")

        parse_image_reference("bitnami/redis")
        # (ImageIdentity(library="bitnami", repo="redis"), None)
    """
    reference = reference.strip()
    tag: Optional[str] = None

    # Split only on the last ':' so a tag never swallows a path segment
    if ":" in reference:
        name, candidate = reference.rsplit(":", 1)
        if "/" not in candidate:
            reference = name
            tag = candidate or None

    if not reference or reference.startswith("/") or reference.endswith("/"):
        raise ValueError(f"Invalid image reference: {reference!r}")

    return ImageIdentity.parse(reference), tag
