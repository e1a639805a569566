"""Error kinds raised inside the association engine.

None of these are fatal to a page scan: each is caught at the nearest phase
boundary and turned into "try the next strategy" or a null association.
"""

from __future__ import annotations


class AssociationError(Exception):
    """Base class for every engine error."""


class EmptyInput(AssociationError):
    """A geometry or cluster helper was called with nothing to work on."""


class ContainerNotFound(AssociationError):
    """All container-resolution phases were exhausted for an image."""


class NoValidCandidate(AssociationError):
    """A tier found structural matches but none passed spatial validation."""

    def __init__(self, tier: str, rejected: int) -> None:
        super().__init__(f"tier {tier}: {rejected} candidate(s) failed spatial validation")
        self.tier = tier
        self.rejected = rejected


class AmbiguousCluster(AssociationError):
    """A proximity cluster holds more than one product image."""

    def __init__(self, image_count: int) -> None:
        super().__init__(f"cluster contains {image_count} product images")
        self.image_count = image_count


class ConfigError(AssociationError, ValueError):
    """An AssociationConfig value is out of range."""


class SnapshotError(AssociationError, ValueError):
    """A page snapshot could not be loaded into an element tree."""
