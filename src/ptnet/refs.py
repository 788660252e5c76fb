"""
ptnet.refs - Identity of places and transitions.

A reference pairs a human-readable label with a serial number drawn when the
reference is minted, so equal labels never collapse into one node.
"""

import itertools
from dataclasses import dataclass, field

_serials = itertools.count(1)


def _next_serial() -> int:
    return next(_serials)


@dataclass(frozen=True, order=True)
class NodeRef:
    """Ordered by label first, then by serial."""
    label: str
    serial: int = field(default_factory=_next_serial)

    def __str__(self) -> str:
        return self.label


class PlaceRef(NodeRef):
    """Reference to a Place in a PetriNet."""


class TransitionRef(NodeRef):
    """Reference to a Transition in a PetriNet."""
