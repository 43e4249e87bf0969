"""Tests for the radial partition layout."""

import math

import pytest

from pysunburst.compute.colors import ColorPalette
from pysunburst.compute.convert import convert
from pysunburst.compute.core.types import Slice
from pysunburst.compute.partition import FULL_CIRCLE, partition, ring_unit
from pysunburst.io.base import data_view_from_mapping


def scenario_data():
    return convert(
        data_view_from_mapping(
            {
                "children": [
                    {"name": "A", "value": 10},
                    {"name": "B", "children": [{"name": "B1", "value": 5}, {"name": "B2", "value": 5}]},
                ]
            }
        ),
        ColorPalette(),
    )


def by_name(nodes):
    return {node.name: node for node in nodes}


class TestScenarioLayout:
    """root -> {A: 10, B: {B1: 5, B2: 5}}."""

    def test_angles(self):
        """A and B split the circle in half, B1 and B2 split B."""
        data = scenario_data()
        nodes = by_name(partition(data.root, 250.0))
        a, b, b1, b2 = nodes["A"], nodes["B"], nodes["B1"], nodes["B2"]
        assert a.dx / FULL_CIRCLE == pytest.approx(0.5)
        assert b.dx / FULL_CIRCLE == pytest.approx(0.5)
        assert b1.dx == pytest.approx(b.dx / 2)
        assert b2.dx == pytest.approx(b.dx / 2)
        assert a.x == pytest.approx(0.0)
        assert b.x == pytest.approx(math.pi)
        assert b1.x == pytest.approx(math.pi)
        assert b2.x == pytest.approx(1.5 * math.pi)

    def test_root_spans_full_circle_with_no_radius(self):
        data = scenario_data()
        partition(data.root, 250.0)
        root = data.root
        assert (root.x, root.dx, root.y, root.dy) == (0.0, FULL_CIRCLE, 0.0, 0.0)
        assert root.depth == 0

    def test_rings_have_equal_area(self):
        """Radii are squared: every ring gets the same squared thickness."""
        data = scenario_data()
        nodes = by_name(partition(data.root, 250.0))
        unit = 250.0**2 / 3
        assert ring_unit(2, 250.0) == pytest.approx(unit)
        assert nodes["A"].y == pytest.approx(unit)
        assert nodes["A"].dy == pytest.approx(unit)
        assert nodes["B1"].y == pytest.approx(2 * unit)
        assert nodes["B1"].outer_radius == pytest.approx(250.0)
        assert nodes["A"].inner_radius == pytest.approx(math.sqrt(unit))

    def test_pre_order_and_depths(self):
        data = scenario_data()
        nodes = partition(data.root, 250.0)
        assert [n.name for n in nodes] == [None, "A", "B", "B1", "B2"]
        assert [n.depth for n in nodes] == [0, 1, 1, 2, 2]


class TestLayoutInvariants:
    """Properties that hold for any tree."""

    def make_tree(self):
        return convert(
            data_view_from_mapping(
                {
                    "children": [
                        {"name": "x", "value": 3, "children": [{"name": "x1", "value": 1}]},
                        {"name": "y", "value": 2},
                        {"name": "z", "children": [{"name": "z1", "value": 6}, {"name": "z2", "value": 0}]},
                    ]
                }
            ),
            ColorPalette(),
        )

    def test_children_stay_within_parent(self):
        """Children tile a sub-range of the parent's span, in input order."""
        data = self.make_tree()
        partition(data.root)
        for node in data.root.iter_nodes():
            if not node.children:
                continue
            assert sum(c.dx for c in node.children) <= node.dx + 1e-9
            cursor = node.x
            for child in node.children:
                assert child.x == pytest.approx(cursor)
                cursor += child.dx
            assert cursor <= node.x + node.dx + 1e-9

    def test_top_level_widths_cover_circle(self):
        data = self.make_tree()
        partition(data.root)
        assert sum(c.dx for c in data.root.children) == pytest.approx(FULL_CIRCLE)

    def test_angular_conservation(self):
        """Children with a positive total fill their parent's span exactly."""
        data = self.make_tree()
        partition(data.root)
        for node in data.root.iter_nodes():
            if node.children and sum(c.total for c in node.children) > 0:
                assert sum(c.dx for c in node.children) == pytest.approx(node.dx)

    def test_own_value_is_split_relative_to_siblings(self):
        """Widths use sibling totals, so an only child spans its whole parent."""
        data = self.make_tree()
        partition(data.root)
        x = data.root.children[0]
        assert x.total == 4
        assert x.children[0].dx == pytest.approx(x.dx)

    def test_zero_total_child_has_zero_width(self):
        data = self.make_tree()
        nodes = partition(data.root)
        z2 = by_name(nodes)["z2"]
        assert z2 in nodes
        assert z2.dx == 0.0

    def test_all_zero_siblings(self):
        """Siblings summing to zero all get zero width without dividing by zero."""
        root = Slice(children=[Slice(name="a"), Slice(name="b")])
        nodes = partition(root)
        assert len(nodes) == 3
        assert all(child.dx == 0.0 for child in root.children)

    def test_outer_radius_bounded(self):
        data = self.make_tree()
        for node in partition(data.root, 100.0):
            assert node.outer_radius <= 100.0 + 1e-9

    def test_identical_input_gives_identical_geometry(self):
        first = [(n.x, n.dx, n.y, n.dy) for n in partition(self.make_tree().root)]
        second = [(n.x, n.dx, n.y, n.dy) for n in partition(self.make_tree().root)]
        assert first == second

    def test_single_ring(self):
        """A flat tree has one ring from half the area out to the edge."""
        root = Slice(children=[Slice(name="a", total=1.0)])
        partition(root, 10.0)
        child = root.children[0]
        assert child.y == pytest.approx(50.0)
        assert child.outer_radius == pytest.approx(10.0)
