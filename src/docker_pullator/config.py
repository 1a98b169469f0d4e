"""Config file load/save."""

import json
from pathlib import Path
from typing import Union

import aiofiles

from .exceptions import ConfigError
from .profiles import ProfileStore

DEFAULT_CONFIG_PATH = "config.json"


async def load_config(path: Union[str, Path]) -> ProfileStore:
    """Load the profile store from a JSON file.

    A missing file yields an empty store.

    Raises:
        ConfigError: If the file cannot be read or parsed
    """
    path = Path(path)
    if not path.exists():
        return ProfileStore()

    try:
        async with aiofiles.open(path, "r", encoding="utf-8") as f:
            content = await f.read()
    except OSError as e:
        raise ConfigError(f"Failed to read config {path}: {e}") from e

    try:
        data = json.loads(content)
    except json.JSONDecodeError as e:
        raise ConfigError(f"Failed to parse config {path}: {e}") from e

    return ProfileStore.from_dict(data)


async def save_config(path: Union[str, Path], store: ProfileStore) -> None:
    """Write the profile store as pretty-printed JSON.

    Raises:
        ConfigError: If the file cannot be written
    """
    content = json.dumps(store.to_dict(), indent=2, sort_keys=True) + "\n"
    try:
        async with aiofiles.open(path, "w", encoding="utf-8") as f:
            await f.write(content)
    except OSError as e:
        raise ConfigError(f"Failed to write config {path}: {e}") from e
