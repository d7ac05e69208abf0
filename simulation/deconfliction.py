# FILE: simulation/deconfliction.py
import logging
from itertools import combinations
from typing import Dict, List, Sequence, Tuple

import numpy as np

from facility.graph import FacilityGraph
from fleet.cbs_components import AgentID, Conflict, Interval, Move
from planners.transition_system import TransitionSystem

# A timed path: (node index, arrival time) pairs in time order
TimedPath = Sequence[Tuple[int, float]]


def moves_from_steps(steps: TimedPath) -> List[Move]:
    """Splits a timed path into consecutive moves; repeated nodes become waits."""
    moves = []
    for (node, time), (next_node, next_time) in zip(steps, steps[1:]):
        if next_time < time:
            raise ValueError(f"Timed path goes back in time: {time} -> {next_time}")
        moves.append(Move(source=node, target=next_node, interval=Interval(time, next_time)))
    return moves


def find_conflicts(world: TransitionSystem, plans: Dict[AgentID, TimedPath]) -> List[Conflict]:
    """Checks all pairs of agents' moves and returns every conflicting pair."""
    moves_per_agent = {agent_id: moves_from_steps(steps) for agent_id, steps in plans.items()}
    conflicts = []
    for a1_id, a2_id in combinations(moves_per_agent, 2):
        for m1 in moves_per_agent[a1_id]:
            for m2 in moves_per_agent[a2_id]:
                if m1.interval.overlap(m2.interval) is None:
                    continue
                if world.conflict(m1, m2):
                    conflict = Conflict(a1_id, a2_id, m1, m2)
                    logging.warning(f"Conflict between agents {a1_id} and {a2_id} from t={conflict.start_time:.2f}")
                    conflicts.append(conflict)
    return conflicts


def position_at(graph: FacilityGraph, steps: TimedPath, time: float) -> Tuple[float, float]:
    """Where an agent following ``steps`` is at ``time``, moving at constant velocity between steps."""
    if not steps:
        raise ValueError("Cannot place an agent with an empty path")
    if time <= steps[0][1]:
        return graph.get_node(steps[0][0]).position

    for (node, t_start), (next_node, t_end) in zip(steps, steps[1:]):
        if t_start <= time <= t_end:
            start = np.array(graph.get_node(node).position)
            end = np.array(graph.get_node(next_node).position)
            if t_end == t_start:
                return tuple(float(c) for c in end)
            center = start + (end - start) * (time - t_start) / (t_end - t_start)
            return tuple(float(c) for c in center)

    # Finished agents stay parked at their goal.
    return graph.get_node(steps[-1][0]).position


def solution_cost(plans: Dict[AgentID, TimedPath]) -> float:
    """Sum of each agent's arrival time at its last step."""
    return float(sum(steps[-1][1] for steps in plans.values() if steps))
