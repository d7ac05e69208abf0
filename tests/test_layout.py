import pytest

from errors import LayoutError
from facility.layout import parse_layout


def test_parses_nodes_and_edges(layout_xml):
    xml = layout_xml([(1, 0.0, 0.0), (2, 3.0, 4.0, 0.25)], [(7, 1, 2, 1.5, 5.0)])
    layout = parse_layout(xml)

    assert [n.id for n in layout.nodes] == [1, 2]
    assert layout.nodes[1].x == 3.0
    assert layout.nodes[1].allowed_deviation_xy == 0.25
    edge = layout.edges[0]
    assert (edge.id, edge.start_node_id, edge.end_node_id) == (7, 1, 2)
    assert edge.max_speed == 1.5
    assert edge.length == 5.0
    assert edge.rotation_allowed is True


def test_empty_sections_are_allowed():
    layout = parse_layout("<map><nodes/><edges/></map>")
    assert layout.nodes == ()
    assert layout.edges == ()


def test_root_tag_and_xml_declaration_are_free():
    xml = '<?xml version="1.0" encoding="UTF-8"?><layout><nodes></nodes><edges></edges></layout>'
    assert parse_layout(xml).nodes == ()


@pytest.mark.parametrize("flag, expected", [("false", False), ("0", False), ("TRUE", True), ("1", True)])
def test_rotation_flag_spellings(layout_xml, flag, expected):
    xml = layout_xml([(1, 0, 0), (2, 1, 0)], [(1, 1, 2, 1.0, 1.0, flag)])
    assert parse_layout(xml).edges[0].rotation_allowed is expected


@pytest.mark.parametrize("xml", [
    "<map><nodes>",                                   # not well-formed
    "<map><edges/></map>",                            # no <nodes>
    "<map><nodes/></map>",                            # no <edges>
    "<map><nodes><node><nodePosition><x>0</x><y>0</y><allowedDeviationXY>0</allowedDeviationXY>"
    "</nodePosition></node></nodes><edges/></map>",   # node without id
    "<map><nodes><node id=\"1\"><nodePosition><x>abc</x><y>0</y><allowedDeviationXY>0</allowedDeviationXY>"
    "</nodePosition></node></nodes><edges/></map>",   # non-numeric coordinate
    "<map><nodes><node id=\"1\"><nodePosition><x>0</x></nodePosition></node></nodes><edges/></map>",
])
def test_malformed_layouts_are_rejected(xml):
    with pytest.raises(LayoutError):
        parse_layout(xml)


def test_bad_rotation_flag_is_rejected(layout_xml):
    xml = layout_xml([(1, 0, 0), (2, 1, 0)], [(1, 1, 2, 1.0, 1.0, "maybe")])
    with pytest.raises(LayoutError):
        parse_layout(xml)


def test_duplicate_node_ids_are_rejected(layout_xml):
    with pytest.raises(LayoutError, match="more than once"):
        parse_layout(layout_xml([(1, 0, 0), (1, 5, 5)], []))


@pytest.mark.parametrize("value", ["nan", "inf", "-inf", "1e400"])
def test_non_finite_coordinates_are_rejected(layout_xml, value):
    with pytest.raises(LayoutError, match="finite"):
        parse_layout(layout_xml([(1, value, 0), (2, 1, 0)], []))


@pytest.mark.parametrize("value", ["nan", "inf"])
def test_non_finite_edge_speed_is_rejected(layout_xml, value):
    xml = layout_xml([(1, 0, 0), (2, 1, 0)], [(1, 1, 2, value, 1.0)])
    with pytest.raises(LayoutError, match="maxSpeed"):
        parse_layout(xml)
