"""Generic OCI registry backend.

Works with any OCI-compliant registry.  Login and push go through the
configured container engine.
"""

from __future__ import annotations

from ocirelease import engine as engine_mod
from ocirelease import log
from ocirelease.config import registry_host
from ocirelease.registry import RegistryBase


class GenericRegistry(RegistryBase):
    """Backend for any OCI-compliant registry."""

    def __init__(self, url: str, engine: str = "docker") -> None:
        self.url = url
        self.engine = engine

    def login(self, token: str, actor: str) -> None:
        """Login via ``<engine> login --password-stdin``."""
        host = self._registry_host()
        log.add_secret(token)
        log.info(f"Logging in to {host} as {actor}")
        engine_mod.login(self.engine, host, actor, token)
        log.success(f"Logged in to {host}")

    def push(self, image_ref: str) -> None:
        """Push *image_ref* via ``<engine> push``."""
        self.check_ref(image_ref)
        log.info(f"Pushing {image_ref}")
        engine_mod.push(self.engine, image_ref)
        log.success(f"Pushed {image_ref}")

    def check_ref(self, image_ref: str) -> None:
        """Raise ValueError if *image_ref* is not hosted on this registry."""
        host = self._registry_host()
        if image_ref.split("/", 1)[0] != host:
            raise ValueError(f"{image_ref} is not hosted on {host}")

    def _registry_host(self) -> str:
        """Extract the registry hostname from self.url."""
        return registry_host(self.url)
