# FILE: scenario.py
"""
Loads a planning scenario: facility layout, vehicle factsheet and task list.

Everything built here is created once and then only read. The scenario owns
the graph; the world, oracle and heuristics hold references to it and never
change it, so the same scenario can back any number of concurrent searches.
"""
import logging
from dataclasses import dataclass
from typing import Tuple

from config import MAP_FILE_PATH, VEHICLE_FILE_PATH, TASKS_FILE_PATH
from facility.graph import FacilityGraph, NodeIdMapping, xml_to_graph
from fleet.cbs_components import AgentTask, Task
from fleet.tasks import json_to_tasks, resolve_tasks
from fleet.vehicle import VehicleProfile, json_to_vehicle
from planners.transition_system import AgvWorld
from utils.heuristics import LowerBoundHeuristic


@dataclass(frozen=True)
class Scenario:
    graph: FacilityGraph
    mapping: NodeIdMapping
    vehicle: VehicleProfile
    world: AgvWorld
    agent_tasks: Tuple[AgentTask, ...]
    tasks: Tuple[Task, ...]
    # One per task, guiding the forward search to the task's goal
    heuristics: Tuple[LowerBoundHeuristic, ...]
    # One per task, built on the reversed task for searches rooted at the goal
    reverse_heuristics: Tuple[LowerBoundHeuristic, ...]


def read_from_file(filename: str) -> str:
    with open(filename, encoding="utf-8") as f:
        return f.read()


def build_scenario(map_xml: str, vehicle_json: str, tasks_json: str) -> Scenario:
    graph, mapping = xml_to_graph(map_xml)
    vehicle = json_to_vehicle(vehicle_json)
    world = AgvWorld(graph, vehicle)

    agent_tasks = json_to_tasks(tasks_json)
    tasks = resolve_tasks(agent_tasks, mapping)

    heuristics = [LowerBoundHeuristic.build(world, task) for task in tasks]
    reverse_heuristics = [LowerBoundHeuristic.build(world, task.reverse()) for task in tasks]

    logging.info(f"Scenario ready: {graph.num_nodes()} nodes, {graph.num_edges()} edges, {len(tasks)} tasks.")
    return Scenario(
        graph=graph,
        mapping=mapping,
        vehicle=vehicle,
        world=world,
        agent_tasks=tuple(agent_tasks),
        tasks=tuple(tasks),
        heuristics=tuple(heuristics),
        reverse_heuristics=tuple(reverse_heuristics),
    )


def load_scenario(map_path: str = MAP_FILE_PATH,
                  vehicle_path: str = VEHICLE_FILE_PATH,
                  tasks_path: str = TASKS_FILE_PATH) -> Scenario:
    logging.info(f"Loading scenario from {map_path}, {vehicle_path} and {tasks_path}")
    return build_scenario(
        read_from_file(map_path),
        read_from_file(vehicle_path),
        read_from_file(tasks_path),
    )
