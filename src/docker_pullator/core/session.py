"""aiohttp session helpers."""

import json
from typing import Any, Optional, Union

import aiohttp

from .types import HubConfig


async def create_session(config: Optional[HubConfig] = None) -> aiohttp.ClientSession:
    """Create a client session for registry API calls.

    Args:
        config: Registry API configuration (timeout is taken from it)

    Returns:
        New aiohttp session; the caller is responsible for closing it
    """
    config = config or HubConfig()
    return aiohttp.ClientSession(
        timeout=aiohttp.ClientTimeout(total=config.timeout),
        headers={"Accept": "application/json"},
    )


def parse_json_response(body: Union[str, bytes]) -> Optional[Any]:
    """Parse a JSON response body.

    Returns:
        Decoded value, or None if the body is empty, not UTF-8 or not valid JSON
    """
    if not body:
        return None
    try:
        return json.loads(body)
    except (json.JSONDecodeError, UnicodeDecodeError):
        return None
