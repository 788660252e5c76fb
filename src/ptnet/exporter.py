"""
ptnet.exporter - Writes a PetriNet as DOT, LoLA or PNML.

Every format has a sink form, writing UTF-8 bytes to a binary file-like
object, and a *_string form returning the text.
"""

import io
import logging
import xml.etree.ElementTree as ET
from typing import BinaryIO, Callable, Dict, Iterable

from .exceptions import ExportError
from .structures import PetriNet

logger = logging.getLogger("ptnet.exporter")

TOKEN_CHAR = "•"
MAX_TOKENS_AS_DOT = 5

PNML_NAMESPACE = "http://www.pnml.org/version-2009/grammar/pnml"
PNML_GRAMMAR = "http://www.pnml.org/version-2009/grammar/ptnet"
XML_DECLARATION = '<?xml version="1.0" encoding="utf-8"?>\n'


def _write(writer: BinaryIO, text: str):
    try:
        writer.write(text.encode("utf-8"))
    except (OSError, ValueError, TypeError) as e:
        # Closed sinks raise ValueError, text-mode sinks TypeError
        raise ExportError(f"Could not write to the output: {e}") from e


def _to_string(export: Callable[[PetriNet, BinaryIO], None], net: PetriNet) -> str:
    buffer = io.BytesIO()
    export(net, buffer)
    try:
        return buffer.getvalue().decode("utf-8")
    except UnicodeDecodeError as e:
        raise ExportError("Could not convert the output to UTF-8") from e


# --- DOT ---

def _dot_label(label: str) -> str:
    """Removes newlines and escapes quotes. Graphviz escape sequences are left alone."""
    return label.replace("\n", "").replace('"', '\\"')


def _dot_marking(marking: int) -> str:
    if marking == 0:
        return ""
    if marking <= MAX_TOKENS_AS_DOT:
        return TOKEN_CHAR * marking
    return str(marking)


def to_dot(net: PetriNet, writer: BinaryIO):
    """Writes the net in the Graphviz DOT format."""
    _write(writer, "digraph petrinet {\n")

    # Places: circles with the tokens inside
    for place_ref, place in net.places_iter():
        label = _dot_label(place_ref.label)
        _write(writer, f'    {label} [shape="circle" xlabel="{label}" label="{_dot_marking(place.marking)}"];\n')

    # Transitions: boxes
    for transition_ref, _ in net.transitions_iter():
        label = _dot_label(transition_ref.label)
        _write(writer, f'    {label} [shape="box" xlabel="{label}" label=""];\n')

    for source, target in net.find_arcs_place_transition():
        _write(writer, f"    {_dot_label(source.label)} -> {_dot_label(target.label)};\n")
    for source, target in net.find_arcs_transition_place():
        _write(writer, f"    {_dot_label(source.label)} -> {_dot_label(target.label)};\n")

    _write(writer, "}\n")


def to_dot_string(net: PetriNet) -> str:
    return _to_string(to_dot, net)


# --- LoLA ---

def _lola_list(writer: BinaryIO, entries: Iterable[str]):
    """Writes one entry per line, comma separated, with a semicolon after the last."""
    entries = list(entries)
    for i, entry in enumerate(entries):
        end = ";" if i == len(entries) - 1 else ","
        _write(writer, f"    {entry}{end}\n")


def _lola_arcs(writer: BinaryIO, header: str, place_refs):
    if not place_refs:
        _write(writer, f"  {header};\n")
        return
    _write(writer, f"  {header}\n")
    # Multiplicity is always 1
    _lola_list(writer, (f"{place_ref.label} : 1" for place_ref in sorted(place_refs)))


def to_lola(net: PetriNet, writer: BinaryIO):
    """Writes the net in the input format of the LoLA model checker.

    Nothing is written for a net without places. The transition stanzas
    follow each other directly and the block ends with a blank line.
    """
    if net.get_cardinality_places() == 0:
        return

    _write(writer, "PLACE\n")
    _lola_list(writer, (place_ref.label for place_ref, _ in net.places_iter()))
    _write(writer, "\n")

    _write(writer, "MARKING\n")
    _lola_list(writer, (f"{place_ref.label} : {place.marking}" for place_ref, place in net.places_iter()))
    _write(writer, "\n")

    for transition_ref, transition in net.transitions_iter():
        _write(writer, f"TRANSITION {transition_ref.label}\n")
        _lola_arcs(writer, "CONSUME", transition.preset)
        _lola_arcs(writer, "PRODUCE", transition.postset)
    if net.get_cardinality_transitions():
        _write(writer, "\n")


def to_lola_string(net: PetriNet) -> str:
    return _to_string(to_lola, net)


# --- PNML ---

def _pnml_text(parent: ET.Element, tag: str, text: str) -> ET.Element:
    element = ET.SubElement(parent, tag)
    ET.SubElement(element, "text").text = text
    return element


def _pnml_arc(page: ET.Element, source: str, target: str):
    arc_id = f"({source}, {target})"
    arc = ET.SubElement(page, "arc", source=source, target=target, id=arc_id)
    _pnml_text(arc, "name", arc_id)
    # Weighted arcs are not supported
    _pnml_text(arc, "inscription", "1")


def build_pnml_tree(net: PetriNet) -> ET.Element:
    """Builds the <pnml> element for the net."""
    pnml = ET.Element("pnml", xmlns=PNML_NAMESPACE)
    net_element = ET.SubElement(pnml, "net", id="net0", type=PNML_GRAMMAR)
    page = ET.SubElement(net_element, "page", id="page0")

    for place_ref, place in net.places_iter():
        element = ET.SubElement(page, "place", id=place_ref.label)
        _pnml_text(element, "name", place_ref.label)
        if place.marking > 0:
            _pnml_text(element, "initialMarking", str(place.marking))

    for transition_ref, _ in net.transitions_iter():
        element = ET.SubElement(page, "transition", id=transition_ref.label)
        _pnml_text(element, "name", transition_ref.label)

    for source, target in net.find_arcs_place_transition():
        _pnml_arc(page, source.label, target.label)
    for source, target in net.find_arcs_transition_place():
        _pnml_arc(page, source.label, target.label)

    return pnml


def to_pnml(net: PetriNet, writer: BinaryIO):
    """Writes the net in the Petri Net Markup Language (PNML)."""
    pnml = build_pnml_tree(net)
    ET.indent(pnml, space="  ")
    _write(writer, XML_DECLARATION + ET.tostring(pnml, encoding="unicode"))


def to_pnml_string(net: PetriNet) -> str:
    return _to_string(to_pnml, net)


EXPORTERS: Dict[str, Callable[[PetriNet, BinaryIO], None]] = {
    "dot": to_dot,
    "lola": to_lola,
    "pnml": to_pnml,
}
