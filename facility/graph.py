# FILE: facility/graph.py
import logging
import math
from dataclasses import dataclass
from types import MappingProxyType
from typing import Callable, Dict, Iterator, List, Optional, Tuple

import networkx as nx

from config import DECLARED_LENGTH_TOLERANCE
from errors import UnknownNodeError
from facility.layout import FacilityLayout, parse_layout
from utils.geometry import calculate_distance_2d

# Dense indices handed out by the graph
NodeId = int
EdgeId = int
Bounds = Tuple[Tuple[float, float], Tuple[float, float]]


@dataclass(frozen=True)
class Node:
    id: NodeId
    x: float
    y: float
    deviation: float
    external_id: int

    @property
    def position(self) -> Tuple[float, float]:
        return self.x, self.y


@dataclass(frozen=True)
class Edge:
    id: EdgeId
    source: NodeId
    target: NodeId
    length: float
    declared_length: float
    max_speed: float
    max_height: float
    rotation_allowed: bool
    external_id: int


class NodeIdMapping:
    """Both directions between layout node ids and dense graph indices.

    The two tables are filled together during graph construction and are
    read-only afterwards.
    """

    def __init__(self, pairs: List[Tuple[int, NodeId]]):
        to_internal: Dict[int, NodeId] = {}
        to_external: Dict[NodeId, int] = {}
        for external_id, index in pairs:
            to_internal[external_id] = index
            to_external[index] = external_id
        self._to_internal = MappingProxyType(to_internal)
        self._to_external = MappingProxyType(to_external)

    def to_internal(self, external_id: int) -> NodeId:
        try:
            return self._to_internal[external_id]
        except KeyError:
            raise UnknownNodeError(external_id, "id mapping") from None

    def to_external(self, index: NodeId) -> int:
        try:
            return self._to_external[index]
        except KeyError:
            raise UnknownNodeError(index, "id mapping") from None

    def __contains__(self, external_id) -> bool:
        return external_id in self._to_internal

    def __len__(self) -> int:
        return len(self._to_internal)


class FacilityGraph:
    """Immutable directed graph of facility nodes and edges.

    Outgoing and incoming edge lists are computed once so forward and reverse
    expansion can enumerate them without any work.
    """

    def __init__(self, nodes: List[Node], edges: List[Edge]):
        self._nodes: Tuple[Node, ...] = tuple(nodes)
        self._edges: Tuple[Edge, ...] = tuple(edges)
        edges_out: List[List[EdgeId]] = [[] for _ in self._nodes]
        edges_in: List[List[EdgeId]] = [[] for _ in self._nodes]
        for edge in self._edges:
            edges_out[edge.source].append(edge.id)
            edges_in[edge.target].append(edge.id)
        self._edges_out = tuple(tuple(ids) for ids in edges_out)
        self._edges_in = tuple(tuple(ids) for ids in edges_in)

    def num_nodes(self) -> int:
        return len(self._nodes)

    def num_edges(self) -> int:
        return len(self._edges)

    def get_node(self, node_id: NodeId) -> Node:
        return self._nodes[node_id]

    def get_edge(self, edge_id: EdgeId) -> Edge:
        return self._edges[edge_id]

    def get_edges_out(self, node_id: NodeId) -> Tuple[EdgeId, ...]:
        return self._edges_out[node_id]

    def get_edges_in(self, node_id: NodeId) -> Tuple[EdgeId, ...]:
        return self._edges_in[node_id]

    def nodes(self) -> Iterator[Node]:
        return iter(self._nodes)

    def edges(self) -> Iterator[Edge]:
        return iter(self._edges)

    def bounds(self) -> Optional[Bounds]:
        """((min_x, min_y), (max_x, max_y)) over all node positions."""
        if not self._nodes:
            return None
        xs = [n.x for n in self._nodes]
        ys = [n.y for n in self._nodes]
        return (min(xs), min(ys)), (max(xs), max(ys))

    def to_networkx(self, weight: Callable[[Edge], float]) -> nx.DiGraph:
        """Snapshot as a networkx DiGraph; parallel edges keep the cheapest weight."""
        digraph = nx.DiGraph()
        digraph.add_nodes_from(range(len(self._nodes)))
        for edge in self._edges:
            cost = weight(edge)
            existing = digraph.get_edge_data(edge.source, edge.target)
            if existing is None or cost < existing["weight"]:
                digraph.add_edge(edge.source, edge.target, weight=cost, edge_id=edge.id)
        return digraph


def build_facility_graph(layout: FacilityLayout) -> Tuple[FacilityGraph, NodeIdMapping]:
    """Builds the graph and the external id mapping from a parsed layout.

    Edge lengths are recomputed from the endpoint positions; the length
    declared in the layout is kept on the edge for reference only.
    """
    nodes: List[Node] = []
    lookup: Dict[int, NodeId] = {}
    for index, spec in enumerate(layout.nodes):
        nodes.append(Node(id=index, x=spec.x, y=spec.y,
                          deviation=spec.allowed_deviation_xy, external_id=spec.id))
        lookup[spec.id] = index

    edges: List[Edge] = []
    overridden = 0
    for index, spec in enumerate(layout.edges):
        if spec.start_node_id not in lookup:
            logging.error(f"Edge {spec.id} starts at unknown node {spec.start_node_id}.")
            raise UnknownNodeError(spec.start_node_id, f"edge {spec.id}")
        if spec.end_node_id not in lookup:
            logging.error(f"Edge {spec.id} ends at unknown node {spec.end_node_id}.")
            raise UnknownNodeError(spec.end_node_id, f"edge {spec.id}")
        source, target = lookup[spec.start_node_id], lookup[spec.end_node_id]
        length = calculate_distance_2d(nodes[source].position, nodes[target].position)
        if not math.isclose(length, spec.length, rel_tol=DECLARED_LENGTH_TOLERANCE, abs_tol=DECLARED_LENGTH_TOLERANCE):
            overridden += 1
        edges.append(Edge(
            id=index, source=source, target=target, length=length,
            declared_length=spec.length, max_speed=spec.max_speed,
            max_height=spec.max_height, rotation_allowed=spec.rotation_allowed,
            external_id=spec.id,
        ))

    if overridden:
        logging.warning(f"{overridden} of {len(edges)} edges declare a length that differs from the "
                        f"distance between their nodes; the computed distance is used.")

    mapping = NodeIdMapping([(spec.id, index) for index, spec in enumerate(layout.nodes)])
    graph = FacilityGraph(nodes, edges)
    logging.info(f"Facility graph built: {graph.num_nodes()} nodes, {graph.num_edges()} edges.")
    return graph, mapping


def xml_to_graph(xml_text: str) -> Tuple[FacilityGraph, NodeIdMapping]:
    return build_facility_graph(parse_layout(xml_text))
