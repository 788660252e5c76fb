# Re-exporting from transformer.py
from .transformer import compile_file, compile_string, parse_string

# Re-exporting core structures
from .refs import PlaceRef, TransitionRef
from .structures import PetriNet, Place, Transition, MAX_TOKENS
from .exceptions import (
    PetriNetError,
    InvalidReferenceError,
    DuplicateArcError,
    InconsistentStateError,
    TokenOverflowError,
    TokenUnderflowError,
    ExportError,
    NetDefinitionError,
)

# Re-exporting exporters and generators
from .exporter import (
    to_dot, to_dot_string,
    to_lola, to_lola_string,
    to_pnml, to_pnml_string,
)
from .generators import PetriNetFactory

# Re-exporting visualization
from .viewer import PetriNetViewer

__all__ = [
    'compile_file',
    'compile_string',
    'parse_string',
    'PlaceRef',
    'TransitionRef',
    'PetriNet',
    'Place',
    'Transition',
    'MAX_TOKENS',
    'PetriNetError',
    'InvalidReferenceError',
    'DuplicateArcError',
    'InconsistentStateError',
    'TokenOverflowError',
    'TokenUnderflowError',
    'ExportError',
    'NetDefinitionError',
    'to_dot',
    'to_dot_string',
    'to_lola',
    'to_lola_string',
    'to_pnml',
    'to_pnml_string',
    'PetriNetFactory',
    'PetriNetViewer'
]
