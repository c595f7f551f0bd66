"""Tests for the G-code reader."""

import pytest

from tangentcnc.config.machine import MachineConfig
from tangentcnc.core.geometry import HeadingSample, Point2D
from tangentcnc.core.spline import sample
from tangentcnc.gcode.generator import generate_oriented, generate_positional
from tangentcnc.gcode.parser import parse_line, parse_program, parse_with_heading


def _machine(text: str) -> list[tuple[float, float]]:
    return [p.as_tuple() for p in parse_program(text, to_canvas=False)]


class TestParseLine:
    def test_words_and_move(self):
        line = parse_line("G1 X1.5 Y-2 Z.5 F300 ; cut", 3)
        assert line.number == 3
        assert line.move == "G1"
        assert line.values == {"X": 1.5, "Y": -2.0, "Z": 0.5, "F": 300.0}
        assert line.comment == " cut"
        assert line.is_motion

    def test_leading_zero_move_codes(self):
        assert parse_line("G00 X1").move == "G0"
        assert parse_line("G01 X1").move == "G1"

    def test_mode_words_are_not_moves(self):
        for raw in ("G17", "G90", "G21", "M2", "F1000.000 ; Rapid feed rate"):
            assert not parse_line(raw).is_motion

    def test_malformed_token_kept_out_of_values(self):
        line = parse_line("G1 X1.2.3 Y4")
        assert "X" in line.words
        assert "X" not in line.values
        assert line.values["Y"] == 4.0


class TestParseProgram:
    def test_comment_only_text(self):
        text = "; just a comment\n(another)\n\n   ; indented\n"
        assert parse_program(text) == []
        assert parse_with_heading(text) == []

    def test_modal_coordinates(self):
        assert _machine("G1 X1 Y2\nG1 X3\nG1 Y4") == [(1, 2), (3, 2), (3, 4)]

    def test_waits_for_both_axes(self):
        assert _machine("G1 X5\nG1 Y6\nG1 X7") == [(5, 6), (7, 6)]

    def test_z_only_lines_add_no_samples(self):
        text = "G0 Z5\nG0 X1 Y1\nG1 Z-1 F100\nG1 X2 Y1\nG0 Z5"
        assert _machine(text) == [(1, 1), (2, 1)]

    def test_malformed_token_keeps_modal_value(self):
        assert _machine("G1 X1 Y1\nG1 X1.2.3 Y5\nG1 X-- Y6") == [(1, 1), (1, 5), (1, 6)]

    def test_malformed_only_field_emits_nothing(self):
        assert _machine("G1 X1 Y1\nG1 Xabc") == [(1, 1)]

    def test_inline_comments_stripped(self):
        assert _machine("G1 (go to X99) X1 Y2 ; Y77") == [(1, 2)]

    def test_case_insensitive_and_packed_words(self):
        assert _machine("g1 x1 y2\nG1X3Y4") == [(1, 2), (3, 4)]

    def test_field_order_irrelevant(self):
        assert _machine("G1 F100 Y2 X1") == [(1, 2)]

    def test_crlf_line_endings(self):
        assert _machine("G1 X1 Y2\r\nG1 X3 Y4\r\n") == [(1, 2), (3, 4)]

    def test_canvas_frame_inverse(self):
        cfg = MachineConfig(scale_factor=0.5, tool_offset_x=1.0, tool_offset_y=1.0)
        assert parse_program("G1 X2 Y-3", cfg) == [Point2D(2.0, 8.0)]


class TestParseWithHeading:
    def test_modal_heading(self):
        text = "G0 X0 Y0\nG1 X1 Y0 C10\nG1 X2 Y0\nG1 C45\nG1 X3"
        assert parse_with_heading(text, to_canvas=False) == [
            HeadingSample(0, 0, None),
            HeadingSample(1, 0, 10.0),
            HeadingSample(2, 0, 10.0),
            HeadingSample(3, 0, 45.0),
        ]


class TestRoundTrip:
    @pytest.fixture
    def polyline(self) -> list[Point2D]:
        pts = [Point2D(0, 0), Point2D(133.3, 21.7), Point2D(80.1, 190.9), Point2D(-12.5, 60)]
        return sample(pts, 20)

    def test_positional_round_trip(self, polyline):
        cfg = MachineConfig(scale_factor=0.1)
        parsed = parse_program(generate_positional(polyline, cfg), cfg, to_canvas=False)
        assert len(parsed) == len(polyline)
        for p, q in zip(polyline, parsed):
            mx, my = cfg.to_machine(p.x, p.y)
            assert abs(q.x - mx) <= 0.0005 + 1e-12
            assert abs(q.y - my) <= 0.0005 + 1e-12

    def test_canvas_round_trip(self, polyline):
        cfg = MachineConfig(scale_factor=0.25, tool_offset_x=3.0, tool_offset_y=-4.0)
        parsed = parse_program(generate_oriented(polyline, cfg), cfg)
        tol = 0.0005 / cfg.scale_factor + 1e-9
        for p, q in zip(polyline, parsed):
            assert q.x == pytest.approx(p.x, abs=tol)
            assert q.y == pytest.approx(p.y, abs=tol)

    def test_corner_scenario_reimport(self):
        corners = [Point2D(0, 0), Point2D(100, 0), Point2D(100, 100)]
        cfg = MachineConfig(scale_factor=0.1)
        parsed = parse_program(generate_positional(sample(corners, 10), cfg), cfg)
        assert parsed[0] == Point2D(0.0, 0.0)
        assert parsed[10].x == pytest.approx(100.0, abs=0.005)
        assert parsed[10].y == pytest.approx(0.0, abs=0.005)
        assert parsed[-1].x == pytest.approx(100.0, abs=0.005)
        assert parsed[-1].y == pytest.approx(100.0, abs=0.005)
