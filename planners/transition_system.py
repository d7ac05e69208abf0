# FILE: planners/transition_system.py
import logging
from abc import ABC, abstractmethod
from typing import Iterator

import networkx as nx

from config import AGENT_CONTACT_RADIUS
from errors import DegenerateGeometryError
from facility.graph import EdgeId, FacilityGraph, NodeId
from fleet.cbs_components import Move
from fleet.vehicle import VehicleProfile
from planners.conflict_oracle import ConflictOracle
from utils.geometry import calculate_distance_2d


class TransitionSystem(ABC):
    """What the multi-agent search needs from a world: states, actions, costs and conflicts.

    States are graph node indices and actions are edge indices. Implementations
    must be safe to call from several search branches at once.
    """

    @abstractmethod
    def actions_from(self, state: NodeId) -> Iterator[EdgeId]:
        pass

    @abstractmethod
    def transition(self, state: NodeId, action: EdgeId) -> NodeId:
        pass

    @abstractmethod
    def transition_cost(self, state: NodeId, action: EdgeId) -> float:
        pass

    @abstractmethod
    def reverse_actions_from(self, state: NodeId) -> Iterator[EdgeId]:
        pass

    @abstractmethod
    def reverse_transition(self, state: NodeId, action: EdgeId) -> NodeId:
        pass

    @abstractmethod
    def reverse_transition_cost(self, state: NodeId, action: EdgeId) -> float:
        pass

    @abstractmethod
    def can_wait_at(self, state: NodeId) -> bool:
        pass

    @abstractmethod
    def conflict(self, move_a: Move, move_b: Move) -> bool:
        pass


class AgvWorld(TransitionSystem):
    """AGVs driving straight edges of a facility graph at their top allowed speed."""

    def __init__(self, graph: FacilityGraph, vehicle: VehicleProfile,
                 contact_radius: float = AGENT_CONTACT_RADIUS):
        self.graph = graph
        self.vehicle = vehicle.validate()
        self.oracle = ConflictOracle(graph, contact_radius)

        for edge in graph.edges():
            if not edge.max_speed > 0:
                logging.error(f"Edge {edge.external_id} has non-positive maxSpeed {edge.max_speed}.")
                raise DegenerateGeometryError(
                    f"Edge {edge.external_id} has non-positive maxSpeed {edge.max_speed}")

        self._cost_graph = nx.freeze(
            graph.to_networkx(weight=lambda edge: self.traversal_time(edge.id)))

    def effective_speed(self, edge_id: EdgeId) -> float:
        return min(self.vehicle.speed_max, self.graph.get_edge(edge_id).max_speed)

    def traversal_time(self, edge_id: EdgeId) -> float:
        """Seconds needed to drive an edge at the slower of vehicle and edge limit."""
        edge = self.graph.get_edge(edge_id)
        if edge.length == 0:
            return 0.0
        return edge.length / self.effective_speed(edge_id)

    def lower_bound_time(self, node_a: NodeId, node_b: NodeId) -> float:
        """Straight-line time at full vehicle speed; never above the real travel time."""
        distance = calculate_distance_2d(self.graph.get_node(node_a).position,
                                         self.graph.get_node(node_b).position)
        return distance / self.vehicle.speed_max

    def successors(self, node: NodeId) -> Iterator[EdgeId]:
        return iter(self.graph.get_edges_out(node))

    def predecessors(self, node: NodeId) -> Iterator[EdgeId]:
        return iter(self.graph.get_edges_in(node))

    def actions_from(self, state: NodeId) -> Iterator[EdgeId]:
        return self.successors(state)

    def transition(self, state: NodeId, action: EdgeId) -> NodeId:
        return self.graph.get_edge(action).target

    def transition_cost(self, state: NodeId, action: EdgeId) -> float:
        return self.traversal_time(action)

    def reverse_actions_from(self, state: NodeId) -> Iterator[EdgeId]:
        return self.predecessors(state)

    def reverse_transition(self, state: NodeId, action: EdgeId) -> NodeId:
        return self.graph.get_edge(action).source

    def reverse_transition_cost(self, state: NodeId, action: EdgeId) -> float:
        return self.traversal_time(action)

    def can_wait_at(self, state: NodeId) -> bool:
        return True

    def conflict(self, move_a: Move, move_b: Move) -> bool:
        return self.oracle.conflicts(move_a, move_b)

    def cost_graph(self) -> nx.DiGraph:
        """The facility graph weighted with real traversal times.

        Built once per world and frozen, so every caller shares the same snapshot.
        """
        return self._cost_graph

    def reference_travel_time(self, source: NodeId, goal: NodeId) -> float:
        """Shortest single-agent travel time under real edge costs, inf if unreachable."""
        try:
            return nx.dijkstra_path_length(self._cost_graph, source, goal, weight="weight")
        except nx.NetworkXNoPath:
            return float('inf')
