from types import SimpleNamespace

import pytest

from odonto.models.odontogram import ConditionType, Surface
from odonto.services.tooth_chart import (
    DEFAULT_FILL,
    CONDITION_COLORS,
    chart_layout,
    chart_rows,
    is_valid_tooth,
    overlays,
    range_info,
    region_fill,
    region_surfaces,
    render_chart_svg,
)


def _condition(tooth, surface, kind, range_end=None):
    return SimpleNamespace(
        tooth_number=tooth, surface=surface, condition_type=kind, range_end_tooth=range_end
    )


@pytest.mark.parametrize(
    ("tooth", "expected"),
    [
        (16, {"top": "vestibular", "right": "mesial", "bottom": "lingual", "left": "distal", "center": "occlusal"}),
        (21, {"top": "vestibular", "right": "distal", "bottom": "lingual", "left": "mesial", "center": "incisal"}),
        (36, {"top": "lingual", "right": "distal", "bottom": "vestibular", "left": "mesial", "center": "occlusal"}),
        (43, {"top": "lingual", "right": "mesial", "bottom": "vestibular", "left": "distal", "center": "incisal"}),
        (55, {"top": "vestibular", "right": "mesial", "bottom": "lingual", "left": "distal", "center": "occlusal"}),
        (72, {"top": "lingual", "right": "distal", "bottom": "vestibular", "left": "mesial", "center": "incisal"}),
    ],
)
def test_region_surfaces_follow_arch_and_side(tooth, expected):
    assert {region: surface.value for region, surface in region_surfaces(tooth).items()} == expected


@pytest.mark.parametrize("tooth", [11, 18, 28, 31, 48, 51, 65, 75, 85])
def test_valid_fdi_numbers(tooth):
    assert is_valid_tooth(tooth)


@pytest.mark.parametrize("tooth", [0, 10, 19, 29, 49, 56, 66, 86, 99])
def test_invalid_fdi_numbers(tooth):
    assert not is_valid_tooth(tooth)


def test_whole_surface_condition_fills_every_region():
    conditions = [
        _condition(36, Surface.occlusal, ConditionType.caries),
        _condition(36, Surface.whole, ConditionType.crown),
    ]
    assert region_fill(Surface.occlusal, conditions) == CONDITION_COLORS[ConditionType.crown]
    assert region_fill(Surface.mesial, conditions) == CONDITION_COLORS[ConditionType.crown]


def test_region_without_condition_uses_default_fill():
    conditions = [_condition(36, Surface.occlusal, ConditionType.caries)]
    assert region_fill(Surface.occlusal, conditions) == CONDITION_COLORS[ConditionType.caries]
    assert region_fill(Surface.distal, conditions) == DEFAULT_FILL


def test_palatal_paints_lingual_region():
    conditions = [_condition(16, Surface.palatal, ConditionType.restoration)]
    assert region_fill(Surface.lingual, conditions) == CONDITION_COLORS[ConditionType.restoration]


def test_overlays_in_fixed_order():
    conditions = [
        _condition(46, Surface.whole, ConditionType.implant),
        _condition(46, Surface.occlusal, ConditionType.endodontics),
        _condition(46, Surface.mesial, ConditionType.missing),
    ]
    assert overlays(conditions) == ["missing", "endodontics", "implant"]


def test_bridge_range_positions():
    bridge = [_condition(14, Surface.whole, ConditionType.bridge, range_end=11)]
    assert range_info(14, bridge).position == "start"
    assert range_info(13, bridge).position == "middle"
    assert range_info(12, bridge).position == "middle"
    assert range_info(11, bridge).position == "end"
    assert range_info(21, bridge) is None
    assert range_info(14, bridge).type == ConditionType.bridge


def test_range_crossing_midline():
    splint = [_condition(13, Surface.whole, ConditionType.orthodontics, range_end=23)]
    assert range_info(11, splint).position == "middle"
    assert range_info(21, splint).position == "middle"
    assert range_info(23, splint).position == "end"


def test_range_between_arches_marks_anchor_only():
    odd = [_condition(16, Surface.whole, ConditionType.prosthesis, range_end=46)]
    assert range_info(16, odd).position == "single"
    assert range_info(46, odd) is None


def test_chart_rows_by_dentition():
    assert [len(row) for row in chart_rows("adult")] == [16, 16]
    assert [len(row) for row in chart_rows("deciduous")] == [10, 10]
    assert [len(row) for row in chart_rows("mixed")] == [16, 10, 10, 16]


def test_chart_layout_applies_conditions():
    rows = chart_layout([_condition(36, Surface.occlusal, ConditionType.caries)])
    tooth = next(t for t in rows[1] if t.number == 36)
    fills = {region.region: region.fill for region in tooth.regions}
    assert fills["center"] == CONDITION_COLORS[ConditionType.caries]
    assert fills["top"] == DEFAULT_FILL


def test_rendered_svg_contains_every_tooth():
    svg = render_chart_svg([_condition(11, Surface.whole, ConditionType.missing)], "adult")
    assert svg.startswith("<svg")
    assert svg.count("data-tooth=") == 32
    assert 'data-tooth="11"' in svg
    assert 'stroke="black"' in svg
