# FILE: planners/conflict_oracle.py
from typing import Tuple

import numpy as np

from config import AGENT_CONTACT_RADIUS
from facility.graph import FacilityGraph
from fleet.cbs_components import Move
from utils.geometry import time_of_impact_disks


class ConflictOracle:
    """Continuous collision check between two timed moves.

    Each agent is a disk of ``contact_radius`` travelling at constant velocity
    along the straight segment of its move. Two moves conflict if the disks
    touch at any instant of the time the moves share. The oracle only reads
    the graph, so one instance can serve any number of search threads.
    """

    def __init__(self, graph: FacilityGraph, contact_radius: float = AGENT_CONTACT_RADIUS):
        self.graph = graph
        self.contact_radius = contact_radius

    def center_and_velocity(self, move: Move, at_time: float) -> Tuple[np.ndarray, np.ndarray]:
        """Position of the agent at ``at_time`` and its velocity during the move."""
        origin = np.array(self.graph.get_node(move.source).position, dtype=float)
        destination = np.array(self.graph.get_node(move.target).position, dtype=float)
        duration = move.interval.duration
        if duration <= 0:
            # Instantaneous moves never reach the impact test; keep them finite.
            return origin, np.zeros(2)
        velocity = (destination - origin) / duration
        center = origin + velocity * (at_time - move.interval.start)
        return center, velocity

    def conflicts(self, move_a: Move, move_b: Move) -> bool:
        overlap = move_a.interval.overlap(move_b.interval)
        if overlap is None:
            return False

        center_a, vel_a = self.center_and_velocity(move_a, overlap.start)
        center_b, vel_b = self.center_and_velocity(move_b, overlap.start)

        toi = time_of_impact_disks(
            center_a, vel_a, self.contact_radius,
            center_b, vel_b, self.contact_radius,
            overlap.duration,
        )
        return toi is not None
