# ==============================================================================
# File: utils/heuristics.py
# ==============================================================================
from abc import ABC, abstractmethod
from typing import List, Tuple, TYPE_CHECKING

import networkx as nx

from config import TIME_EPSILON
from fleet.cbs_components import Task

# Use TYPE_CHECKING to avoid circular import errors
if TYPE_CHECKING:
    from planners.transition_system import AgvWorld

NodeId = int


class Heuristic(ABC):
    def __init__(self, world: 'AgvWorld', goal: NodeId):
        self.world = world
        self.goal = goal

    @abstractmethod
    def estimate(self, node: NodeId) -> float:
        """Estimate the remaining travel time from node to the goal."""
        pass


class LowerBoundHeuristic(Heuristic):
    """Straight-line time to the goal at the vehicle's top speed.

    Real edges are at least as long as the straight line and never allow
    more than the vehicle's top speed, so the estimate is admissible.
    """

    def estimate(self, node: NodeId) -> float:
        return self.world.lower_bound_time(node, self.goal)

    @classmethod
    def build(cls, world: 'AgvWorld', task: Task) -> 'LowerBoundHeuristic':
        return cls(world, task.goal)


def find_admissibility_violations(world: 'AgvWorld', heuristic: Heuristic,
                                  tolerance: float = TIME_EPSILON) -> List[Tuple[NodeId, float, float]]:
    """
    Returns (node, estimate, true_cost) for every node that can reach the
    goal and whose estimate exceeds the real remaining travel time.
    """
    # One reverse Dijkstra from the goal yields every node's remaining cost.
    reversed_costs = world.cost_graph().reverse(copy=False)
    true_costs = nx.single_source_dijkstra_path_length(reversed_costs, heuristic.goal, weight="weight")

    violations = []
    for node, true_cost in true_costs.items():
        estimate = heuristic.estimate(node)
        if estimate > true_cost + tolerance:
            violations.append((node, estimate, true_cost))
    return violations
