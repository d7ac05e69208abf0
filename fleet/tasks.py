# FILE: fleet/tasks.py
import json
import logging
from typing import List

from errors import TaskSpecError, UnknownNodeError
from facility.graph import NodeIdMapping
from fleet.cbs_components import AgentTask, Task


def _require_int(entry: dict, key: str, position: int) -> int:
    if key not in entry:
        raise TaskSpecError(f"Task #{position} is missing '{key}'")
    value = entry[key]
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise TaskSpecError(f"Task #{position} field '{key}' must be a non-negative integer, got {value!r}")
    return value


def json_to_tasks(json_text: str) -> List[AgentTask]:
    """Parses the task list: {"tasks": [{"agent", "startId", "goalId"}, ...]}."""
    try:
        data = json.loads(json_text)
    except json.JSONDecodeError as e:
        logging.error(f"Task list is not valid JSON: {e}")
        raise TaskSpecError(f"Task list is not valid JSON: {e}") from e

    entries = data.get("tasks") if isinstance(data, dict) else None
    if not isinstance(entries, list):
        raise TaskSpecError("Task list has no 'tasks' array")

    tasks = []
    for position, entry in enumerate(entries):
        if not isinstance(entry, dict):
            raise TaskSpecError(f"Task #{position} is not an object")
        tasks.append(AgentTask(
            agent=_require_int(entry, "agent", position),
            start_id=_require_int(entry, "startId", position),
            goal_id=_require_int(entry, "goalId", position),
        ))
    return tasks


def resolve_tasks(agent_tasks: List[AgentTask], mapping: NodeIdMapping,
                  initial_time: float = 0.0) -> List[Task]:
    """Translates layout node ids into graph indices, keeping the list order."""
    resolved = []
    for agent_task in agent_tasks:
        for node_id in (agent_task.start_id, agent_task.goal_id):
            if node_id not in mapping:
                logging.error(f"Task for agent {agent_task.agent} references unknown node {node_id}.")
                raise UnknownNodeError(node_id, f"task of agent {agent_task.agent}")
        resolved.append(Task(
            start=mapping.to_internal(agent_task.start_id),
            goal=mapping.to_internal(agent_task.goal_id),
            initial_time=initial_time,
        ))
    return resolved
