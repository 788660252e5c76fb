import pathlib
import logging
from typing import Dict, List, Optional, Tuple

from lark import Lark, Transformer
from lark.exceptions import LarkError, VisitError

from .exceptions import NetDefinitionError, PetriNetError
from .refs import NodeRef, PlaceRef, TransitionRef
from .structures import PetriNet

logger = logging.getLogger("ptnet.transformer")


def _unquote(text: str) -> str:
    return text[1:-1].replace('\\"', '"').replace("\\\\", "\\")


class PNTransformer(Transformer):
    """Builds a PetriNet from a parsed net description.

    Statements are applied in order, so every name has to be declared before
    an arc chain uses it.
    """

    def __init__(self):
        super().__init__()
        self.net = PetriNet()
        self.registry: Dict[str, NodeRef] = {}

    def _declare(self, label: str, ref: NodeRef):
        if label in self.registry:
            raise NetDefinitionError(f"'{label}' is declared more than once")
        self.registry[label] = ref

    def _lookup(self, label: str) -> NodeRef:
        try:
            return self.registry[label]
        except KeyError:
            raise NetDefinitionError(f"'{label}' is used before being declared") from None

    def identifier(self, items):
        return str(items[0])

    def quoted(self, items):
        return _unquote(str(items[0]))

    def place_item(self, items):
        marking = int(items[1]) if len(items) > 1 else 0
        return items[0], marking

    def place_decl(self, items):
        return self._declare_places, items

    def transition_decl(self, items):
        return self._declare_transitions, items

    def arc_chain(self, items):
        return self._connect, items

    def _declare_places(self, items: List[Tuple[str, int]]):
        for label, marking in items:
            place_ref = self.net.add_place(label)
            self._declare(label, place_ref)
            if marking:
                self.net.add_token(place_ref, marking)
            logger.debug(f"[Registry] Created Place: {label} ({marking} tokens)")

    def _declare_transitions(self, items: List[str]):
        for label in items:
            self._declare(label, self.net.add_transition(label))
            logger.debug(f"[Registry] Created Transition: {label}")

    def _connect(self, items: List[str]):
        for source_label, target_label in zip(items, items[1:]):
            source, target = self._lookup(source_label), self._lookup(target_label)
            if isinstance(source, PlaceRef) and isinstance(target, TransitionRef):
                self.net.add_arc_place_transition(source, target)
            elif isinstance(source, TransitionRef) and isinstance(target, PlaceRef):
                self.net.add_arc_transition_place(source, target)
            else:
                kind = "places" if isinstance(source, PlaceRef) else "transitions"
                raise NetDefinitionError(
                    f"Cannot connect '{source_label}' to '{target_label}': both are {kind}")
            logger.debug(f"  {source_label} -> {target_label}")

    def start(self, statements):
        for apply, items in statements:
            apply(items)
        logger.info(f"[Summary] Petri Net built: {self.net.get_cardinality_places()} Places, "
                    f"{self.net.get_cardinality_transitions()} Transitions")
        return self.net


def get_parser() -> Lark:
    grammar_path = pathlib.Path(__file__).parent / "pn.lark"
    with open(grammar_path, "r", encoding="utf-8") as f:
        return Lark(f.read(), start='start', parser='earley')


def parse_string(code: str) -> Tuple[Optional[PetriNet], List[str]]:
    """Parses a net description. Returns the net and an empty list, or None and the errors."""
    parser = get_parser()
    try:
        tree = parser.parse(code)
        net = PNTransformer().transform(tree)
        return net, []
    except VisitError as e:
        if not isinstance(e.orig_exc, PetriNetError):
            raise
        logger.error(f"Transformation failed: {e.orig_exc}")
        return None, [str(e.orig_exc)]
    except LarkError as e:
        logger.error(f"Parsing failed: {e}")
        return None, [str(e)]


def compile_string(code: str) -> PetriNet:
    """Reads a string containing a net description and returns the net."""
    net, errors = parse_string(code)

    if errors:
        raise NetDefinitionError(f"Parsing errors: {', '.join(errors)}")

    return net


def compile_file(filepath: str) -> PetriNet:
    """Reads a net description file and returns the net."""
    path = pathlib.Path(filepath)
    if not path.exists():
        raise FileNotFoundError(f"File not found: {filepath}")

    with open(path, 'r', encoding='utf-8') as f:
        code = f.read()

    return compile_string(code)
