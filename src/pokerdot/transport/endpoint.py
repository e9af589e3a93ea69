"""
Game server endpoint derivation.

Local development hosts talk to the API directly on port 7000; deployed hosts
``<name>.<domain>`` talk to a sibling ``<name>-api.<domain>`` over TLS.
"""

import re

from pokerdot.config import API_PATH, API_PORT

_LOCAL_HOST = re.compile(r"(localhost|[0-9]{1,3}\.[0-9]{1,3}\.[0-9]{1,3}\.[0-9]{1,3})")
_DEPLOYED_HOST = re.compile(r"(\w+?)\.(.*)", re.ASCII)


class InvalidHostnameError(ValueError):
    """The host name has no ``<subdomain>.<rest>`` shape to derive an API host from."""


def api_uri(hostname: str) -> str:
    """
    Return the WebSocket endpoint for the page host name.

    Examples:
        api_uri("localhost")        -> "ws://localhost:7000/api"
        api_uri("192.168.1.5")      -> "ws://192.168.1.5:7000/api"
        api_uri("foo.example.com")  -> "wss://foo-api.example.com/"
    """
    if _LOCAL_HOST.search(hostname):
        return f"ws://{hostname}:{API_PORT}{API_PATH}"

    match = _DEPLOYED_HOST.search(hostname)
    if not match:
        raise InvalidHostnameError(f"Cannot derive API host from {hostname!r}")
    return f"wss://{match.group(1)}-api.{match.group(2)}/"
