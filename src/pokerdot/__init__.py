"""
pokerdot client runtime.

- storage:   injected key/value blob storage (memory and file backed)
- session:   saved-game cache with dedup-on-write and lazy expiry
- transport: reconnecting WebSocket bridge, endpoint rule and wire codec
- adapter:   wiring between the bridge, the cache and the application ports
"""

__version__ = "0.1.0"
