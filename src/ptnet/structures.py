import logging
from typing import Dict, FrozenSet, Generic, Iterator, List, Set, Tuple, TypeVar

from .exceptions import (
    DuplicateArcError,
    InconsistentStateError,
    InvalidReferenceError,
    TokenOverflowError,
    TokenUnderflowError,
)
from .refs import NodeRef, PlaceRef, TransitionRef

logger = logging.getLogger("ptnet.structures")

# Largest marking a place can hold (unsigned 64-bit counter).
MAX_TOKENS = 2 ** 64 - 1

R = TypeVar("R", bound=NodeRef)


class Node(Generic[R]):
    """Base class for places and transitions: the arcs touching one node."""

    def __init__(self):
        self._preset: Set[R] = set()
        self._postset: Set[R] = set()

    @property
    def preset(self) -> FrozenSet[R]:
        """Nodes with an arc pointing into this node."""
        return frozenset(self._preset)

    @property
    def postset(self) -> FrozenSet[R]:
        """Nodes this node has an arc pointing to."""
        return frozenset(self._postset)

    def add_incoming(self, ref: R) -> bool:
        """Returns True if the reference was not in the preset yet."""
        if ref in self._preset:
            return False
        self._preset.add(ref)
        return True

    def add_outgoing(self, ref: R) -> bool:
        """Returns True if the reference was not in the postset yet."""
        if ref in self._postset:
            return False
        self._postset.add(ref)
        return True

    def remove_incoming(self, ref: R) -> bool:
        """Returns True if the reference was in the preset."""
        if ref not in self._preset:
            return False
        self._preset.remove(ref)
        return True

    def remove_outgoing(self, ref: R) -> bool:
        """Returns True if the reference was in the postset."""
        if ref not in self._postset:
            return False
        self._postset.remove(ref)
        return True

    def is_connected(self) -> bool:
        return bool(self._preset or self._postset)

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} in={len(self._preset)} out={len(self._postset)}>"


class Place(Node[TransitionRef]):
    """A container for tokens. Preset and postset hold transition references."""

    def __init__(self):
        super().__init__()
        self._marking = 0

    @property
    def marking(self) -> int:
        return self._marking

    def is_empty(self) -> bool:
        return self._marking == 0

    def add_token(self, n: int = 1):
        _check_count(n)
        if self._marking + n > MAX_TOKENS:
            raise TokenOverflowError(
                f"Adding {n} tokens to a place holding {self._marking} exceeds {MAX_TOKENS}")
        self._marking += n

    def remove_token(self, n: int = 1):
        _check_count(n)
        if n > self._marking:
            raise TokenUnderflowError(
                f"Cannot remove {n} tokens from a place holding {self._marking}")
        self._marking -= n

    def __repr__(self) -> str:
        return f"<Place marking={self._marking} in={len(self._preset)} out={len(self._postset)}>"


class Transition(Node[PlaceRef]):
    """A transformation unit. Preset and postset hold place references."""


def _check_count(n: int):
    if n < 0:
        raise ValueError(f"Token count must be non-negative, got {n}")


def _check_arc_insertion(inserted_incoming: bool, inserted_outgoing: bool, arc: str):
    if not inserted_incoming and not inserted_outgoing:
        raise DuplicateArcError(f"Cannot add the arc {arc}: it already exists")
    if not inserted_incoming or not inserted_outgoing:
        raise InconsistentStateError(
            f"The arc {arc} existed on one side only; the net is in an inconsistent state")


class PetriNet:
    """A Place/Transition net.

    Places and transitions are keyed by references minted on insertion and
    are always traversed in reference order. Arcs are stored on both of their
    endpoints and are only ever written through the add_arc_* methods, which
    keep the two sides in sync.
    """

    def __init__(self):
        self._places: Dict[PlaceRef, Place] = {}
        self._transitions: Dict[TransitionRef, Transition] = {}

    # --- Construction ---

    def add_place(self, label: str) -> PlaceRef:
        """Adds an empty place. Labels need not be unique: every call creates a new node."""
        place_ref = PlaceRef(label)
        self._places[place_ref] = Place()
        logger.debug(f"Added place {place_ref!r}")
        return place_ref

    def add_transition(self, label: str) -> TransitionRef:
        """Adds a transition. Labels need not be unique: every call creates a new node."""
        transition_ref = TransitionRef(label)
        self._transitions[transition_ref] = Transition()
        logger.debug(f"Added transition {transition_ref!r}")
        return transition_ref

    def add_arc_place_transition(self, place_ref: PlaceRef, transition_ref: TransitionRef):
        """Adds an arc with multiplicity one from a place to a transition.

        Raises InvalidReferenceError if either reference is unknown,
        DuplicateArcError if the arc exists and InconsistentStateError if it
        was found on one endpoint only.
        """
        place, transition = self._get_place_transition_pair(place_ref, transition_ref)
        inserted_outgoing = place.add_outgoing(transition_ref)
        inserted_incoming = transition.add_incoming(place_ref)
        _check_arc_insertion(inserted_incoming, inserted_outgoing, f"({place_ref}, {transition_ref})")
        logger.debug(f"Added arc {place_ref} -> {transition_ref}")

    def add_arc_transition_place(self, transition_ref: TransitionRef, place_ref: PlaceRef):
        """Adds an arc with multiplicity one from a transition to a place.

        Raises the same errors as add_arc_place_transition.
        """
        place, transition = self._get_place_transition_pair(place_ref, transition_ref)
        inserted_outgoing = transition.add_outgoing(place_ref)
        inserted_incoming = place.add_incoming(transition_ref)
        _check_arc_insertion(inserted_incoming, inserted_outgoing, f"({transition_ref}, {place_ref})")
        logger.debug(f"Added arc {transition_ref} -> {place_ref}")

    # --- Tokens ---

    def add_token(self, place_ref: PlaceRef, n: int = 1):
        """Adds n tokens to a place. Raises TokenOverflowError past MAX_TOKENS."""
        self.get_place(place_ref).add_token(n)

    def remove_token(self, place_ref: PlaceRef, n: int = 1):
        """Removes n tokens from a place. Raises TokenUnderflowError if it holds fewer."""
        self.get_place(place_ref).remove_token(n)

    def marking(self, place_ref: PlaceRef) -> int:
        return self.get_place(place_ref).marking

    def marking_vector(self) -> Dict[PlaceRef, int]:
        """Number of tokens of every place, in reference order."""
        return {place_ref: place.marking for place_ref, place in self.places_iter()}

    # --- Queries ---

    def get_cardinality_places(self) -> int:
        return len(self._places)

    def get_cardinality_transitions(self) -> int:
        return len(self._transitions)

    def check_place_ref(self, place_ref: PlaceRef) -> bool:
        return place_ref in self._places

    def check_transition_ref(self, transition_ref: TransitionRef) -> bool:
        return transition_ref in self._transitions

    def get_place(self, place_ref: PlaceRef) -> Place:
        try:
            return self._places[place_ref]
        except KeyError:
            raise InvalidReferenceError(
                f"Place reference {place_ref!r} is invalid. It is not present in the net.") from None

    def get_transition(self, transition_ref: TransitionRef) -> Transition:
        try:
            return self._transitions[transition_ref]
        except KeyError:
            raise InvalidReferenceError(
                f"Transition reference {transition_ref!r} is invalid. It is not present in the net.") from None

    def places_iter(self) -> Iterator[Tuple[PlaceRef, Place]]:
        return iter(sorted(self._places.items(), key=lambda item: item[0]))

    def transitions_iter(self) -> Iterator[Tuple[TransitionRef, Transition]]:
        return iter(sorted(self._transitions.items(), key=lambda item: item[0]))

    def find_unconnected_places(self) -> Set[PlaceRef]:
        return {place_ref for place_ref, place in self._places.items() if not place.is_connected()}

    def find_arcs_place_transition(self) -> List[Tuple[PlaceRef, TransitionRef]]:
        """All arcs from places to transitions as (source, target), in reference order."""
        return sorted(
            (place_ref, transition_ref)
            for place_ref, place in self._places.items()
            for transition_ref in place.postset
        )

    def find_arcs_transition_place(self) -> List[Tuple[TransitionRef, PlaceRef]]:
        """All arcs from transitions to places as (source, target), in reference order."""
        return sorted(
            (transition_ref, place_ref)
            for transition_ref, transition in self._transitions.items()
            for place_ref in transition.postset
        )

    def _get_place_transition_pair(self, place_ref: PlaceRef,
                                   transition_ref: TransitionRef) -> Tuple[Place, Transition]:
        return self.get_place(place_ref), self.get_transition(transition_ref)

    def __str__(self) -> str:
        header = "-" * 37
        lines = [header, "Places:", *(f"{p}: {place.marking}" for p, place in self.places_iter())]
        lines += ["Transitions:", *(str(t) for t, _ in self.transitions_iter())]
        lines += ["Arcs:", *(f"{s} -> {d}" for s, d in self.find_arcs_place_transition())]
        lines += [f"{s} -> {d}" for s, d in self.find_arcs_transition_place()]
        lines.append(header)
        return "\n".join(lines)
