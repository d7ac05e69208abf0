import json

import pytest

from facility.graph import build_facility_graph
from facility.layout import EdgeSpec, FacilityLayout, NodeSpec
from fleet.vehicle import VehicleProfile
from planners.transition_system import AgvWorld


def _node_xml(node_id, x, y, deviation=0.1):
    return (f'<node id="{node_id}"><nodePosition><x>{x}</x><y>{y}</y>'
            f'<allowedDeviationXY>{deviation}</allowedDeviationXY></nodePosition></node>')


def _edge_xml(edge_id, start, end, max_speed=1.0, length=1.0, rotation="true"):
    return (f'<edge id="{edge_id}"><startNodeId>{start}</startNodeId><endNodeId>{end}</endNodeId>'
            f'<maxSpeed>{max_speed}</maxSpeed><maxHeight>2.0</maxHeight>'
            f'<rotationAllowed>{rotation}</rotationAllowed><length>{length}</length></edge>')


@pytest.fixture
def layout_xml():
    """Builds a layout document from (id, x, y) nodes and (id, start, end, max_speed) edges."""
    def build(nodes, edges):
        node_part = "".join(_node_xml(*n) for n in nodes)
        edge_part = "".join(_edge_xml(*e) for e in edges)
        return f"<map><nodes>{node_part}</nodes><edges>{edge_part}</edges></map>"
    return build


@pytest.fixture
def vehicle_json():
    def build(**overrides):
        params = {
            "speedMin": 0.01, "speedMax": 1.0,
            "accelerationMax": 0.5, "decelerationMax": 0.5,
            "heightMin": 0.3, "heightMax": 0.5,
            "width": 0.6, "length": 0.8,
        }
        params.update(overrides)
        return json.dumps({"physicalParameters": params})
    return build


@pytest.fixture
def vehicle():
    return VehicleProfile(speed_min=0.01, speed_max=1.0, acceleration_max=0.5, deceleration_max=0.5,
                          height_min=0.3, height_max=0.5, width=0.6, length=0.8)


@pytest.fixture
def line_graph():
    """Two nodes 10 m apart joined by one edge limited to 2 m/s, plus the return edge."""
    layout = FacilityLayout(
        nodes=(NodeSpec(100, 0.0, 0.0, 0.1), NodeSpec(200, 10.0, 0.0, 0.1)),
        edges=(EdgeSpec(1, 100, 200, 2.0, 2.0, True, 10.0),
               EdgeSpec(2, 200, 100, 0.5, 2.0, True, 10.0)),
    )
    graph, _ = build_facility_graph(layout)
    return graph


@pytest.fixture
def grid_layout():
    """A 3x3 grid, 4 m spacing, two-way edges; the 2<->5 link is slow (0.5 m/s)."""
    nodes = []
    node_id = 1
    for y in (0.0, 4.0, 8.0):
        for x in (0.0, 4.0, 8.0):
            nodes.append(NodeSpec(node_id, x, y, 0.1))
            node_id += 1
    links = [(1, 2), (2, 3), (4, 5), (5, 6), (7, 8), (8, 9),
             (1, 4), (4, 7), (2, 5), (5, 8), (3, 6), (6, 9)]
    edges = []
    edge_id = 1
    for a, b in links:
        speed = 0.5 if (a, b) == (2, 5) else 2.0
        for start, end in ((a, b), (b, a)):
            edges.append(EdgeSpec(edge_id, start, end, speed, 2.0, True, 4.0))
            edge_id += 1
    return FacilityLayout(nodes=tuple(nodes), edges=tuple(edges))


@pytest.fixture
def grid_world(grid_layout, vehicle):
    graph, _ = build_facility_graph(grid_layout)
    return AgvWorld(graph, vehicle)


@pytest.fixture
def open_floor(vehicle):
    """Nodes used by the conflict scenarios: a 10 m track and two parking spots beside its middle."""
    layout = FacilityLayout(
        nodes=(NodeSpec(1, 0.0, 0.0, 0.1), NodeSpec(2, 10.0, 0.0, 0.1),
               NodeSpec(3, 5.0, 0.5, 0.1), NodeSpec(4, 5.0, 2.0, 0.1),
               NodeSpec(5, 10.0, 10.0, 0.1)),
        edges=(EdgeSpec(1, 1, 2, 2.0, 2.0, True, 10.0),
               EdgeSpec(2, 2, 1, 2.0, 2.0, True, 10.0)),
    )
    graph, _ = build_facility_graph(layout)
    return AgvWorld(graph, vehicle)
