from typing import Optional

from .refs import PlaceRef
from .structures import PetriNet


def place_label(index: int) -> str:
    return f"P{index}"


def transition_label(index: int) -> str:
    return f"T{index}"


class PetriNetFactory:
    """Utility class to generate standard Petri Net patterns."""

    @staticmethod
    def build_unconnected(n_places: int, n_transitions: int) -> PetriNet:
        """Places P1..Pn and transitions T1..Tm without arcs."""
        net = PetriNet()
        for i in range(1, n_places + 1):
            net.add_place(place_label(i))
        for i in range(1, n_transitions + 1):
            net.add_transition(transition_label(i))
        return net

    @staticmethod
    def build_chain(length: int) -> PetriNet:
        """Generates a linear sequence P1 -> T1 -> P2 -> ... -> Pn."""
        if length < 0:
            raise ValueError(f"Chain length must be non-negative, got {length}")

        net = PetriNet()
        if length == 0:
            return net

        places = [net.add_place(place_label(i)) for i in range(1, length + 1)]
        transitions = [net.add_transition(transition_label(i)) for i in range(1, length)]

        for i, t in enumerate(transitions):
            net.add_arc_place_transition(places[i], t)
            net.add_arc_transition_place(t, places[i + 1])

        return net

    @staticmethod
    def build_loop() -> PetriNet:
        """One place and one transition forming a cycle: P1 -> T1 -> P1."""
        net = PetriNet()
        p = net.add_place(place_label(1))
        t = net.add_transition(transition_label(1))
        net.add_arc_place_transition(p, t)
        net.add_arc_transition_place(t, p)
        return net

    @staticmethod
    def build_fork(depth: int, net: Optional[PetriNet] = None,
                   root_place: Optional[PlaceRef] = None) -> PetriNet:
        """Generates a binary tree of forks rooted at a marked place."""
        if net is None:
            net = PetriNet()
        if root_place is None:
            root_place = net.add_place("root")
            net.add_token(root_place, 1)

        if depth <= 0:
            return net

        # Create two branches
        t1, t2 = net.add_transition(f"fork_t{depth}_L"), net.add_transition(f"fork_t{depth}_R")
        p_l, p_r = net.add_place(f"p{depth}_L"), net.add_place(f"p{depth}_R")

        net.add_arc_place_transition(root_place, t1)
        net.add_arc_place_transition(root_place, t2)
        net.add_arc_transition_place(t1, p_l)
        net.add_arc_transition_place(t2, p_r)

        for p_branch in (p_l, p_r):
            PetriNetFactory.build_fork(depth - 1, net, p_branch)

        return net
