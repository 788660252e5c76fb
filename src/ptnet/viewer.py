"""
ptnet - Visualization module using Graphviz/Pydot.
Renders the DOT export of a PetriNet to images.
"""

import logging

import pydot

from .exceptions import ExportError
from .exporter import to_dot_string
from .structures import PetriNet

logger = logging.getLogger("ptnet.viewer")


class PetriNetViewer:
    """Generates Pydot graphs from PetriNet objects."""

    def __init__(self, net: PetriNet):
        if not isinstance(net, PetriNet):
            raise TypeError("Input must be a PetriNet")
        self.net = net

    def to_pydot_graph(self) -> pydot.Dot:
        """Constructs a pydot.Dot object representing the net."""
        graphs = pydot.graph_from_dot_data(to_dot_string(self.net))
        if not graphs:
            raise ExportError("Graphviz could not read the DOT export of the net")
        return graphs[0]

    def save_png(self, filename: str):
        """Helper to render the graph directly to a file."""
        self._save(filename, "png")

    def save_svg(self, filename: str):
        self._save(filename, "svg")

    def _save(self, filename: str, fmt: str):
        logger.debug(f"Rendering {fmt} to {filename}")
        try:
            self.to_pydot_graph().write(filename, format=fmt)
        except OSError as e:
            raise ExportError(f"Could not render the net to {filename}: {e}") from e
