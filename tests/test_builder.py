"""Tests for the layer/path builder in isolation."""

from __future__ import annotations

import pytest

from gcode_layers.interpreter.builder import Layer, LayerBuilder
from gcode_layers.interpreter.state import MachineState, Vector3


def _state(x: float = 0.0, y: float = 0.0, z: float = 0.0, extruding: bool = False) -> MachineState:
    return MachineState(x=x, y=y, z=z, extruding=extruding)


@pytest.fixture()
def builder() -> LayerBuilder:
    b = LayerBuilder()
    b.open_layer(0.2, line_index=3)
    return b


class TestOpenLayer:
    def test_no_layer_before_open(self) -> None:
        b = LayerBuilder()
        assert b.current_z is None
        assert b.finish() == []
        assert b.needs_new_layer(0.0)

    def test_new_layer_starts_with_empty_path(self, builder: LayerBuilder) -> None:
        (layer,) = builder.finish()
        assert layer == Layer(z=0.2, start_line=3, paths=[[]])

    def test_same_z_does_not_need_layer(self, builder: LayerBuilder) -> None:
        assert not builder.needs_new_layer(0.2)
        assert builder.needs_new_layer(0.4)

    def test_finish_includes_in_progress(self, builder: LayerBuilder) -> None:
        builder.open_layer(0.4, line_index=9)
        layers = builder.finish()
        assert [l.z for l in layers] == [0.2, 0.4]
        assert [l.start_line for l in layers] == [3, 9]


class TestAddSegment:
    def test_extruding_adds_two_points(self, builder: LayerBuilder) -> None:
        builder.add_segment(_state(0, 0, 0.2), _state(10, 0, 0.2, extruding=True))
        paths = builder.finish()[0].paths
        assert paths == [[Vector3(0, 0, 0.2), Vector3(10, 0, 0.2)]]

    def test_consecutive_extrusion_duplicates_joints(self, builder: LayerBuilder) -> None:
        a, b, c = _state(0, 0, 0.2), _state(1, 0, 0.2, True), _state(1, 1, 0.2, True)
        builder.add_segment(a, b)
        builder.add_segment(b, c)
        path = builder.finish()[0].paths[0]
        assert path == [a.position, b.position, b.position, c.position]

    def test_travel_after_drawing_starts_new_path(self, builder: LayerBuilder) -> None:
        builder.add_segment(_state(0, 0, 0.2), _state(1, 0, 0.2, True))
        builder.add_segment(_state(1, 0, 0.2), _state(5, 5, 0.2))
        paths = builder.finish()[0].paths
        assert len(paths) == 2
        assert paths[1] == []

    def test_repeated_travel_adds_one_placeholder(self, builder: LayerBuilder) -> None:
        builder.add_segment(_state(0, 0, 0.2), _state(1, 0, 0.2, True))
        builder.add_segment(_state(1, 0, 0.2), _state(2, 0, 0.2))
        builder.add_segment(_state(2, 0, 0.2), _state(3, 0, 0.2))
        assert builder.finish()[0].paths[1:] == [[]]

    def test_travel_before_any_layer_dropped(self) -> None:
        b = LayerBuilder()
        b.add_segment(_state(), _state(5, 5, 0))
        assert b.finish() == []

    def test_counts(self, builder: LayerBuilder) -> None:
        builder.add_segment(_state(0, 0, 0.2), _state(1, 0, 0.2, True))
        builder.add_segment(_state(1, 0, 0.2), _state(2, 0, 0.2, True))
        layer = builder.finish()[0]
        assert layer.point_count == 4
        assert layer.segment_count == 2
