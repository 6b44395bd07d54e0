"""GitHub Container Registry (ghcr.io) backend.

Inherits from :class:`~ocirelease.registry.generic.GenericRegistry` and
adds the ghcr.io naming rules.
"""

from __future__ import annotations

from ocirelease.registry.generic import GenericRegistry


class GHCR(GenericRegistry):
    """Backend for GitHub Container Registry (ghcr.io).

    GHCR only accepts lowercase repository paths; a reference such as
    ``ghcr.io/Blockfrost/app:latest`` is rejected here instead of by the
    registry after the upload has started.
    """

    def check_ref(self, image_ref: str) -> None:
        super().check_ref(image_ref)
        name = image_ref.split("@", 1)[0]
        head, _, last = name.rpartition("/")
        repo_path = f"{head}/{last.split(':', 1)[0]}"
        if repo_path != repo_path.lower():
            raise ValueError(
                f"GHCR repository names must be lowercase: {image_ref}"
            )
