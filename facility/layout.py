# FILE: facility/layout.py
"""
Reads the facility layout document.

The layout is an XML file with a ``<nodes>`` and an ``<edges>`` section::

    <map>
      <nodes>
        <node id="1">
          <nodePosition><x>0.0</x><y>0.0</y><allowedDeviationXY>0.1</allowedDeviationXY></nodePosition>
        </node>
      </nodes>
      <edges>
        <edge id="1">
          <startNodeId>1</startNodeId><endNodeId>2</endNodeId>
          <maxSpeed>2.0</maxSpeed><maxHeight>2.0</maxHeight>
          <rotationAllowed>true</rotationAllowed><length>10.0</length>
        </edge>
      </edges>
    </map>

The schema is owned by the facility tooling; this module only turns it into
plain records and does no graph work.
"""
import logging
import math
import xml.etree.ElementTree as ET
from dataclasses import dataclass
from typing import List, Tuple

from errors import LayoutError

_TRUE_VALUES = {"true", "1"}
_FALSE_VALUES = {"false", "0"}


@dataclass(frozen=True)
class NodeSpec:
    id: int
    x: float
    y: float
    allowed_deviation_xy: float


@dataclass(frozen=True)
class EdgeSpec:
    id: int
    start_node_id: int
    end_node_id: int
    max_speed: float
    max_height: float
    rotation_allowed: bool
    length: float


@dataclass(frozen=True)
class FacilityLayout:
    nodes: Tuple[NodeSpec, ...]
    edges: Tuple[EdgeSpec, ...]


def _child(element: ET.Element, tag: str) -> ET.Element:
    child = element.find(tag)
    if child is None:
        raise LayoutError(f"<{element.tag}> is missing required element <{tag}>")
    return child


def _text(element: ET.Element, tag: str) -> str:
    text = _child(element, tag).text
    if text is None or not text.strip():
        raise LayoutError(f"<{tag}> in <{element.tag}> is empty")
    return text.strip()


def _float(element: ET.Element, tag: str) -> float:
    raw = _text(element, tag)
    try:
        value = float(raw)
    except ValueError as e:
        raise LayoutError(f"<{tag}> in <{element.tag}> is not a number: {raw!r}") from e
    if not math.isfinite(value):
        raise LayoutError(f"<{tag}> in <{element.tag}> is not a finite number: {raw!r}")
    return value


def _int(raw: str, what: str) -> int:
    try:
        return int(raw.strip())
    except (ValueError, AttributeError) as e:
        raise LayoutError(f"{what} is not an integer: {raw!r}") from e


def _bool(element: ET.Element, tag: str) -> bool:
    raw = _text(element, tag).lower()
    if raw in _TRUE_VALUES:
        return True
    if raw in _FALSE_VALUES:
        return False
    raise LayoutError(f"<{tag}> in <{element.tag}> is not a boolean: {raw!r}")


def _id_attribute(element: ET.Element) -> int:
    raw = element.get("id")
    if raw is None:
        raise LayoutError(f"<{element.tag}> is missing its id attribute")
    return _int(raw, f"<{element.tag}> id")


def _parse_node(element: ET.Element) -> NodeSpec:
    position = _child(element, "nodePosition")
    return NodeSpec(
        id=_id_attribute(element),
        x=_float(position, "x"),
        y=_float(position, "y"),
        allowed_deviation_xy=_float(position, "allowedDeviationXY"),
    )


def _parse_edge(element: ET.Element) -> EdgeSpec:
    return EdgeSpec(
        id=_id_attribute(element),
        start_node_id=_int(_text(element, "startNodeId"), "<startNodeId>"),
        end_node_id=_int(_text(element, "endNodeId"), "<endNodeId>"),
        max_speed=_float(element, "maxSpeed"),
        max_height=_float(element, "maxHeight"),
        rotation_allowed=_bool(element, "rotationAllowed"),
        length=_float(element, "length"),
    )


def parse_layout(xml_text: str) -> FacilityLayout:
    """Parses a layout document. Raises LayoutError if it is malformed."""
    try:
        root = ET.fromstring(xml_text)
    except ET.ParseError as e:
        logging.error(f"Facility layout is not well-formed XML: {e}")
        raise LayoutError(f"Facility layout is not well-formed XML: {e}") from e

    nodes: List[NodeSpec] = [_parse_node(el) for el in _child(root, "nodes").findall("node")]
    edges: List[EdgeSpec] = [_parse_edge(el) for el in _child(root, "edges").findall("edge")]

    seen = set()
    for node in nodes:
        if node.id in seen:
            raise LayoutError(f"Node id {node.id} is declared more than once")
        seen.add(node.id)

    logging.debug(f"Parsed facility layout with {len(nodes)} nodes and {len(edges)} edges.")
    return FacilityLayout(nodes=tuple(nodes), edges=tuple(edges))
