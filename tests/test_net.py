import unittest
import os
import sys
import logging

# Ensure the library can be found in the src directory
sys.path.append(os.path.join(os.path.dirname(__file__), "../src"))

from ptnet.exceptions import (
    DuplicateArcError, InconsistentStateError, InvalidReferenceError,
    TokenOverflowError, TokenUnderflowError,
)
from ptnet.refs import PlaceRef, TransitionRef
from ptnet.structures import MAX_TOKENS, PetriNet

# Set up logging for test transparency
logging.basicConfig(level=logging.DEBUG)


class TestPetriNetConstruction(unittest.TestCase):

    def test_new_net_is_empty(self):
        net = PetriNet()
        self.assertEqual(net.get_cardinality_places(), 0)
        self.assertEqual(net.get_cardinality_transitions(), 0)
        self.assertEqual(net.find_unconnected_places(), set())
        self.assertEqual(net.marking_vector(), {})

    def test_add_place_and_transition_update_size(self):
        net = PetriNet()
        p = net.add_place("Example place")
        t = net.add_transition("Example transition")
        self.assertEqual(net.get_cardinality_places(), 1)
        self.assertEqual(net.get_cardinality_transitions(), 1)
        self.assertTrue(net.check_place_ref(p))
        self.assertTrue(net.check_transition_ref(t))

    def test_same_label_creates_distinct_nodes(self):
        """Re-adding a label never overwrites the existing node."""
        net = PetriNet()
        p1 = net.add_place("P")
        net.add_token(p1, 3)
        p2 = net.add_place("P")

        self.assertNotEqual(p1, p2)
        self.assertEqual(net.get_cardinality_places(), 2)
        self.assertEqual(net.marking(p1), 3)
        self.assertEqual(net.marking(p2), 0)

    def test_check_ref_for_foreign_refs(self):
        net = PetriNet()
        other = PetriNet()
        self.assertFalse(net.check_place_ref(other.add_place("P1")))
        self.assertFalse(net.check_transition_ref(other.add_transition("T1")))

    def test_iteration_is_in_reference_order(self):
        net = PetriNet()
        for label in ("c", "a", "b"):
            net.add_place(label)
        self.assertEqual([p.label for p, _ in net.places_iter()], ["a", "b", "c"])


class TestPetriNetArcs(unittest.TestCase):
    def setUp(self):
        """Set up a chain: P1 -> T1 -> P2 -> T2 -> P3"""
        self.net = PetriNet()
        self.p1 = self.net.add_place("P1")
        self.p2 = self.net.add_place("P2")
        self.p3 = self.net.add_place("P3")
        self.t1 = self.net.add_transition("T1")
        self.t2 = self.net.add_transition("T2")

    def _build_chain(self):
        self.net.add_arc_place_transition(self.p1, self.t1)
        self.net.add_arc_transition_place(self.t1, self.p2)
        self.net.add_arc_place_transition(self.p2, self.t2)
        self.net.add_arc_transition_place(self.t2, self.p3)

    def test_arc_updates_both_endpoints(self):
        self.net.add_arc_place_transition(self.p1, self.t1)
        self.assertEqual(self.net.get_place(self.p1).postset, {self.t1})
        self.assertEqual(self.net.get_transition(self.t1).preset, {self.p1})

        self.net.add_arc_transition_place(self.t1, self.p2)
        self.assertEqual(self.net.get_transition(self.t1).postset, {self.p2})
        self.assertEqual(self.net.get_place(self.p2).preset, {self.t1})

    def test_find_arcs(self):
        self._build_chain()
        self.assertEqual(self.net.find_arcs_place_transition(), [(self.p1, self.t1), (self.p2, self.t2)])
        self.assertEqual(self.net.find_arcs_transition_place(), [(self.t1, self.p2), (self.t2, self.p3)])

    def test_connected_place_is_not_unconnected(self):
        self.net.add_arc_place_transition(self.p1, self.t1)
        self.net.add_arc_transition_place(self.t1, self.p2)
        self.net.add_arc_place_transition(self.p2, self.t2)
        self.assertEqual(self.net.find_unconnected_places(), {self.p3})

    def test_all_places_unconnected_without_arcs(self):
        self.assertEqual(self.net.find_unconnected_places(), {self.p1, self.p2, self.p3})

    def test_self_loop(self):
        self.net.add_arc_place_transition(self.p1, self.t1)
        self.net.add_arc_transition_place(self.t1, self.p1)
        self.assertEqual(self.net.find_arcs_place_transition(), [(self.p1, self.t1)])
        self.assertEqual(self.net.find_arcs_transition_place(), [(self.t1, self.p1)])

    def test_duplicate_arc_fails_and_keeps_arc_count(self):
        self.net.add_arc_place_transition(self.p1, self.t1)
        with self.assertRaises(DuplicateArcError):
            self.net.add_arc_place_transition(self.p1, self.t1)
        self.assertEqual(len(self.net.find_arcs_place_transition()), 1)

        self.net.add_arc_transition_place(self.t1, self.p1)
        with self.assertRaises(DuplicateArcError):
            self.net.add_arc_transition_place(self.t1, self.p1)
        self.assertEqual(len(self.net.find_arcs_transition_place()), 1)

    def test_one_sided_arc_is_inconsistent_state(self):
        """Simulates a corrupted net where only the place side knows the arc."""
        self.net.get_place(self.p1).add_outgoing(self.t1)
        with self.assertRaises(InconsistentStateError):
            self.net.add_arc_place_transition(self.p1, self.t1)

        self.net.get_place(self.p2).add_incoming(self.t2)
        with self.assertRaises(InconsistentStateError):
            self.net.add_arc_transition_place(self.t2, self.p2)

    def test_invalid_references(self):
        foreign_place = PlaceRef("P1")
        foreign_transition = TransitionRef("T1")
        with self.assertRaises(InvalidReferenceError):
            self.net.add_arc_place_transition(foreign_place, self.t1)
        with self.assertRaises(InvalidReferenceError):
            self.net.add_arc_transition_place(foreign_transition, self.p1)
        # Nothing was written on the valid endpoint
        self.assertEqual(self.net.get_transition(self.t1).preset, frozenset())
        self.assertEqual(self.net.get_place(self.p1).preset, frozenset())

    def test_str_lists_nodes_and_arcs(self):
        self._build_chain()
        text = str(self.net)
        self.assertIn("P1: 0", text)
        self.assertIn("T1 -> P2", text)
        self.assertIn("P2 -> T2", text)


class TestPetriNetMarking(unittest.TestCase):
    def setUp(self):
        self.net = PetriNet()
        self.place = self.net.add_place("Example place")

    def test_marking_starts_at_zero(self):
        self.assertEqual(self.net.marking(self.place), 0)

    def test_add_and_remove_tokens_round_trip(self):
        for n in (0, 1, 5, 1000, MAX_TOKENS):
            self.net.add_token(self.place, n)
            self.net.remove_token(self.place, n)
            self.assertEqual(self.net.marking(self.place), 0)

    def test_remove_more_than_marking_fails(self):
        self.net.add_token(self.place, 2)
        with self.assertRaises(TokenUnderflowError):
            self.net.remove_token(self.place, 3)
        self.assertEqual(self.net.marking(self.place), 2)

    def test_remove_from_empty_place_fails(self):
        with self.assertRaises(TokenUnderflowError):
            self.net.remove_token(self.place, 1)

    def test_overflow(self):
        self.net.add_token(self.place, MAX_TOKENS)
        with self.assertRaises(TokenOverflowError):
            self.net.add_token(self.place, 1)

    def test_marking_of_unknown_place(self):
        with self.assertRaises(InvalidReferenceError):
            self.net.marking(PlaceRef("ghost"))
        with self.assertRaises(InvalidReferenceError):
            self.net.add_token(PlaceRef("ghost"), 1)

    def test_marking_vector_covers_every_place(self):
        p2 = self.net.add_place("Another place")
        self.net.add_token(self.place, 5)
        self.net.add_token(p2, 3)
        self.assertEqual(self.net.marking_vector(), {p2: 3, self.place: 5})
        self.assertEqual(list(self.net.marking_vector()), [p2, self.place])


if __name__ == "__main__":
    unittest.main()
