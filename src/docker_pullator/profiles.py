"""Profile store: the tracked images and their wanted tags."""

from typing import Any, Iterable, Iterator

from .core.types import ImageIdentity, PullProfile, image_identity_to_string
from .exceptions import ConfigError, ProfileNotFound


class ProfileStore:
    """In-memory mapping of canonical image key to pull profile.

    The store never reads or writes files; see ``docker_pullator.config``
    for persistence.
    """

    def __init__(self, profiles: Iterable[PullProfile] = ()) -> None:
        self._profiles: dict[str, PullProfile] = {}
        for profile in profiles:
            self.merge_tags(profile.identity, profile.tags)

    def __contains__(self, identity: object) -> bool:
        if not isinstance(identity, ImageIdentity):
            return False
        return image_identity_to_string(identity) in self._profiles

    def __len__(self) -> int:
        return len(self._profiles)

    def __iter__(self) -> Iterator[PullProfile]:
        return (profile for _, profile in self.list())

    def keys(self) -> list[str]:
        return sorted(self._profiles)

    def get(self, identity: ImageIdentity) -> PullProfile:
        """Return the tracked profile for an identity.

        Raises:
            ProfileNotFound: If the identity is not tracked
        """
        try:
            return self._profiles[image_identity_to_string(identity)]
        except KeyError as e:
            raise ProfileNotFound(f"No profile for {identity}") from e

    def get_or_create(self, identity: ImageIdentity) -> PullProfile:
        """Return the profile for an identity, inserting an empty one if needed."""
        key = image_identity_to_string(identity)
        profile = self._profiles.get(key)
        if profile is None:
            profile = PullProfile(library=identity.library, repo=identity.repo)
            self._profiles[key] = profile
        return profile

    def merge_tags(self, identity: ImageIdentity, tags: Iterable[str]) -> PullProfile:
        """Union tags into the identity's profile, creating it if needed."""
        profile = self.get_or_create(identity)
        profile.tags.update(tags)
        return profile

    def replace_tags(self, identity: ImageIdentity, tags: Iterable[str]) -> None:
        """Overwrite the identity's tags; an empty result drops the profile.

        Raises:
            ProfileNotFound: If the identity is not tracked
        """
        profile = self.get(identity)
        profile.tags = set(tags)
        if not profile.tags:
            self.remove(identity)

    def remove(self, identity: ImageIdentity) -> None:
        self._profiles.pop(image_identity_to_string(identity), None)

    def list(self) -> list[tuple[ImageIdentity, PullProfile]]:
        """Profiles in canonical key order."""
        return [
            (self._profiles[key].identity, self._profiles[key])
            for key in sorted(self._profiles)
        ]

    def to_dict(self) -> dict[str, Any]:
        """Persisted form with sorted keys and tags."""
        return {
            "pull_profiles": {
                key: {
                    "library": profile.library,
                    "repo": profile.repo,
                    "tags": profile.sorted_tags(),
                }
                for key, profile in sorted(self._profiles.items())
            }
        }

    @classmethod
    def from_dict(cls, data: Any) -> "ProfileStore":
        """Build a store from its persisted form.

        Raises:
            ConfigError: If the data does not have the expected shape
        """
        if not isinstance(data, dict):
            raise ConfigError("Config must be a JSON object")

        profiles = data.get("pull_profiles", {})
        if not isinstance(profiles, dict):
            raise ConfigError("pull_profiles must be an object")

        store = cls()
        for key, entry in profiles.items():
            if not isinstance(entry, dict) or not isinstance(entry.get("repo"), str):
                raise ConfigError(f"Invalid profile entry: {key}")

            library = entry.get("library")
            if library is not None and not isinstance(library, str):
                raise ConfigError(f"Invalid library for profile: {key}")

            tags = entry.get("tags", [])
            if not isinstance(tags, list) or not all(isinstance(t, str) for t in tags):
                raise ConfigError(f"Invalid tags for profile: {key}")

            store.merge_tags(ImageIdentity(library=library, repo=entry["repo"]), tags)

        return store
