"""Registry backend abstraction and factory.

Use :func:`for_url` to obtain a registry instance -- never import a
backend class directly.
"""

from __future__ import annotations

from abc import ABC, abstractmethod


class RegistryBase(ABC):
    """Abstract base class for OCI registries."""

    url: str

    @abstractmethod
    def login(self, token: str, actor: str) -> None:
        """Authenticate to the registry."""

    @abstractmethod
    def push(self, image_ref: str) -> None:
        """Push a fully-qualified, tagged image reference."""


def for_url(url: str, engine: str = "docker") -> RegistryBase:
    """Return the appropriate registry backend for *url*.

    Parameters
    ----------
    url:
        Registry URL or prefix (e.g. ``ghcr.io`` or ``ghcr.io/blockfrost``).
    engine:
        Container engine CLI used for login and push.
    """
    if "ghcr.io" in url:
        from ocirelease.registry.ghcr import GHCR
        return GHCR(url, engine)
    from ocirelease.registry.generic import GenericRegistry
    return GenericRegistry(url, engine)
