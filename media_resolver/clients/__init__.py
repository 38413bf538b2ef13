"""
Platform clients.

The resolver depends only on the PlatformClient contract. A concrete client
is selected at startup through the ``platform_client`` setting, a
``package.module:attribute`` path to a PlatformClient subclass or a
zero-argument factory returning one.
"""

import importlib

from .base import PlatformClient


def load_client(path: str) -> PlatformClient:
    """Import and instantiate the client named by *path* ("module:attribute")."""
    module_name, sep, attribute = path.partition(":")
    if not sep or not module_name or not attribute:
        raise ValueError(f"Expected 'module:attribute', got {path!r}")

    factory = getattr(importlib.import_module(module_name), attribute)
    client = factory()
    if not isinstance(client, PlatformClient):
        raise TypeError(f"{path} produced {type(client).__name__}, not a PlatformClient")
    return client


__all__ = ["PlatformClient", "load_client"]
