# FILE: fleet/cbs_components.py
from dataclasses import dataclass
from typing import Any, Optional

# Type alias for clarity
NodeId = int
AgentID = Any


@dataclass(frozen=True)
class Interval:
    """Half-open time window [start, end) in seconds."""
    start: float
    end: float

    @property
    def duration(self) -> float:
        return self.end - self.start

    def overlap(self, other: 'Interval') -> Optional['Interval']:
        """Common part of both windows, or None when it has no duration."""
        start, end = max(self.start, other.start), min(self.end, other.end)
        if end <= start:
            return None
        return Interval(start, end)


@dataclass(frozen=True)
class Move:
    """One agent occupying the segment source -> target during an interval.

    The agent is assumed to travel at constant velocity. A wait is a move
    with source == target.
    """
    source: NodeId
    target: NodeId
    interval: Interval

    @property
    def is_wait(self) -> bool:
        return self.source == self.target


@dataclass(frozen=True)
class Task:
    """A start/goal pair in dense graph indices, handed to the search."""
    start: NodeId
    goal: NodeId
    initial_time: float = 0.0

    def reverse(self) -> 'Task':
        return Task(start=self.goal, goal=self.start, initial_time=self.initial_time)


@dataclass(frozen=True)
class AgentTask:
    """A task as written in the task list, using layout node ids."""
    agent: int
    start_id: int
    goal_id: int


@dataclass(frozen=True)
class Conflict:
    """Two agents whose footprints touch while executing the given moves."""
    agent1_id: AgentID
    agent2_id: AgentID
    move1: Move
    move2: Move

    @property
    def start_time(self) -> float:
        return max(self.move1.interval.start, self.move2.interval.start)
