"""docker-pullator - keep a catalog of container images and mirror it to a registry."""

__version__ = "0.3.0"

from .config import load_config, save_config
from .core.runtime import DockerExecutor, RuntimeExecutor
from .core.types import (
    HubConfig,
    ImageIdentity,
    Platform,
    PullProfile,
    TagDescriptor,
    image_identity_to_string,
)
from .exceptions import (
    ConfigError,
    ProfileNotFound,
    PullatorError,
    RegistryError,
    RegistryNotFound,
    RegistryResponseInvalid,
    RegistryUnreachable,
    RuntimeInvocationFailed,
)
from .operations.sync import ImageSynchronizer, PushReport, SyncFailure, resolve_push_targets
from .operations.tags import TagResponseCache, fetch_tags
from .profiles import ProfileStore

__all__ = [
    "ConfigError",
    "DockerExecutor",
    "HubConfig",
    "ImageIdentity",
    "ImageSynchronizer",
    "Platform",
    "ProfileNotFound",
    "ProfileStore",
    "PullProfile",
    "PullatorError",
    "PushReport",
    "RegistryError",
    "RegistryNotFound",
    "RegistryResponseInvalid",
    "RegistryUnreachable",
    "RuntimeExecutor",
    "RuntimeInvocationFailed",
    "SyncFailure",
    "TagDescriptor",
    "TagResponseCache",
    "fetch_tags",
    "image_identity_to_string",
    "load_config",
    "resolve_push_targets",
    "save_config",
]
