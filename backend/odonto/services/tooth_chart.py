"""FDI tooth tables and the five-region tooth diagram.

Each tooth is drawn as a square split into four trapezoids (top, right,
bottom, left) around a centre square. Which anatomical surface a region
stands for depends on the arch (upper/lower) and on the side of the midline.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Literal, Protocol

from odonto.models.odontogram import RANGE_CONDITIONS, ConditionType, Surface

UPPER_FDI = (18, 17, 16, 15, 14, 13, 12, 11, 21, 22, 23, 24, 25, 26, 27, 28)
LOWER_FDI = (48, 47, 46, 45, 44, 43, 42, 41, 31, 32, 33, 34, 35, 36, 37, 38)
UPPER_DECIDUOUS = (55, 54, 53, 52, 51, 61, 62, 63, 64, 65)
LOWER_DECIDUOUS = (85, 84, 83, 82, 81, 71, 72, 73, 74, 75)

ADULT_TEETH = frozenset(UPPER_FDI + LOWER_FDI)
DECIDUOUS_TEETH = frozenset(UPPER_DECIDUOUS + LOWER_DECIDUOUS)
ROWS = (UPPER_FDI, LOWER_FDI, UPPER_DECIDUOUS, LOWER_DECIDUOUS)

Dentition = Literal["adult", "deciduous", "mixed"]
Region = Literal["top", "right", "bottom", "left", "center"]

SIZE = 40
CENTER = SIZE // 2
OFFSET = 8
GAP = 6
LABEL_HEIGHT = 14

_C1 = (CENTER - OFFSET, CENTER - OFFSET)
_C2 = (CENTER + OFFSET, CENTER - OFFSET)
_C3 = (CENTER + OFFSET, CENTER + OFFSET)
_C4 = (CENTER - OFFSET, CENTER + OFFSET)


def _path(*points: tuple[int, int]) -> str:
    head, *rest = points
    return " ".join([f"M {head[0]} {head[1]}", *(f"L {x} {y}" for x, y in rest), "Z"])


REGION_PATHS: dict[Region, str] = {
    "top": _path((0, 0), (SIZE, 0), _C2, _C1),
    "right": _path((SIZE, 0), (SIZE, SIZE), _C3, _C2),
    "bottom": _path((0, SIZE), _C4, _C3, (SIZE, SIZE)),
    "left": _path((0, 0), _C1, _C4, (0, SIZE)),
    "center": _path(_C1, _C2, _C3, _C4),
}

DEFAULT_FILL = "#FFFFFF"
STROKE = "#9CA3AF"

CONDITION_COLORS: dict[ConditionType, str] = {
    ConditionType.caries: "#EF4444",
    ConditionType.restoration: "#3B82F6",
    ConditionType.crown: "#F59E0B",
    ConditionType.endodontics: "#8B5CF6",
    ConditionType.missing: "#6B7280",
    ConditionType.extraction_planned: "#111827",
    ConditionType.implant: "#10B981",
    ConditionType.fracture: "#F97316",
    ConditionType.sealant: "#06B6D4",
    ConditionType.prosthesis: "#F59E0B",
    ConditionType.orthodontics: "#10B981",
    ConditionType.bridge: "#3B82F6",
    ConditionType.healthy: DEFAULT_FILL,
}

RANGE_COLORS: dict[ConditionType, str] = {
    ConditionType.bridge: "#3B82F6",
    ConditionType.orthodontics: "#10B981",
    ConditionType.prosthesis: "#F59E0B",
}


class ConditionLike(Protocol):
    tooth_number: int
    surface: Surface
    condition_type: ConditionType
    range_end_tooth: int | None


def is_valid_tooth(number: int) -> bool:
    return number in ADULT_TEETH or number in DECIDUOUS_TEETH


def quadrant(number: int) -> int:
    return number // 10


def position(number: int) -> int:
    return number % 10


def is_upper(number: int) -> bool:
    return quadrant(number) in {1, 2, 5, 6}


def is_patient_right(number: int) -> bool:
    return quadrant(number) in {1, 4, 5, 8}


def center_surface(number: int) -> Surface:
    # Incisors and canines sit in positions 1-3 of every quadrant.
    return Surface.incisal if position(number) <= 3 else Surface.occlusal


def region_surfaces(number: int) -> dict[Region, Surface]:
    upper = is_upper(number)
    right = is_patient_right(number)
    return {
        "top": Surface.vestibular if upper else Surface.lingual,
        "right": Surface.mesial if right else Surface.distal,
        "bottom": Surface.lingual if upper else Surface.vestibular,
        "left": Surface.distal if right else Surface.mesial,
        "center": center_surface(number),
    }


def _matches(surface: Surface, condition_surface: Surface) -> bool:
    if condition_surface == surface:
        return True
    # Palatal is the lingual face of upper teeth.
    return surface == Surface.lingual and condition_surface == Surface.palatal


def region_fill(surface: Surface, conditions: Iterable[ConditionLike]) -> str:
    conditions = list(conditions)
    whole = next((c for c in conditions if c.surface == Surface.whole), None)
    if whole is not None:
        return CONDITION_COLORS.get(ConditionType(whole.condition_type), DEFAULT_FILL)
    for condition in conditions:
        if _matches(surface, condition.surface):
            return CONDITION_COLORS.get(ConditionType(condition.condition_type), DEFAULT_FILL)
    return DEFAULT_FILL


def overlays(conditions: Iterable[ConditionLike]) -> list[str]:
    kinds = {ConditionType(c.condition_type) for c in conditions}
    marks: list[str] = []
    if ConditionType.missing in kinds:
        marks.append("missing")
    if ConditionType.extraction_planned in kinds:
        marks.append("extraction_planned")
    if ConditionType.crown in kinds:
        marks.append("crown")
    if ConditionType.endodontics in kinds:
        marks.append("endodontics")
    if ConditionType.implant in kinds:
        marks.append("implant")
    return marks


@dataclass(frozen=True)
class RangeInfo:
    type: ConditionType
    position: Literal["start", "middle", "end", "single"]


def _row_of(number: int) -> tuple[int, ...] | None:
    for row in ROWS:
        if number in row:
            return row
    return None


def range_info(number: int, conditions: Iterable[ConditionLike]) -> RangeInfo | None:
    """Where ``number`` sits inside a bridge, orthodontic or prosthesis span.

    Spans follow the chart's display order within one arch row, so 13-23
    covers both central incisors. Spans whose ends are in different rows are
    only marked on the anchor tooth.
    """
    row = _row_of(number)
    for condition in conditions:
        kind = ConditionType(condition.condition_type)
        if kind not in RANGE_CONDITIONS or condition.range_end_tooth is None:
            continue
        anchor, other = condition.tooth_number, condition.range_end_tooth
        if row is None or anchor not in row or other not in row:
            if number == anchor:
                return RangeInfo(type=kind, position="single")
            continue
        lo, hi = sorted((row.index(anchor), row.index(other)))
        index = row.index(number)
        if not lo <= index <= hi:
            continue
        if lo == hi:
            return RangeInfo(type=kind, position="single")
        if index == lo:
            return RangeInfo(type=kind, position="start")
        if index == hi:
            return RangeInfo(type=kind, position="end")
        return RangeInfo(type=kind, position="middle")
    return None


@dataclass
class RegionLayout:
    region: Region
    surface: Surface
    path: str
    fill: str


@dataclass
class ToothLayout:
    number: int
    regions: list[RegionLayout] = field(default_factory=list)
    overlays: list[str] = field(default_factory=list)
    range: RangeInfo | None = None


def tooth_layout(number: int, conditions: Iterable[ConditionLike]) -> ToothLayout:
    conditions = list(conditions)
    own = [c for c in conditions if c.tooth_number == number]
    regions = [
        RegionLayout(region=region, surface=surface, path=REGION_PATHS[region], fill=region_fill(surface, own))
        for region, surface in region_surfaces(number).items()
    ]
    return ToothLayout(
        number=number,
        regions=regions,
        overlays=overlays(own),
        range=range_info(number, conditions),
    )


def chart_rows(dentition: Dentition = "adult") -> list[tuple[int, ...]]:
    if dentition == "adult":
        return [UPPER_FDI, LOWER_FDI]
    if dentition == "deciduous":
        return [UPPER_DECIDUOUS, LOWER_DECIDUOUS]
    return [UPPER_FDI, UPPER_DECIDUOUS, LOWER_DECIDUOUS, LOWER_FDI]


def chart_layout(conditions: Iterable[ConditionLike], dentition: Dentition = "adult") -> list[list[ToothLayout]]:
    conditions = list(conditions)
    return [[tooth_layout(number, conditions) for number in row] for row in chart_rows(dentition)]


def _overlay_svg(mark: str) -> list[str]:
    if mark in {"missing", "extraction_planned"}:
        color = "black" if mark == "missing" else "red"
        return [
            f'<line x1="0" y1="0" x2="{SIZE}" y2="{SIZE}" stroke="{color}" stroke-width="3"/>',
            f'<line x1="{SIZE}" y1="0" x2="0" y2="{SIZE}" stroke="{color}" stroke-width="3"/>',
        ]
    if mark == "crown":
        return [
            f'<circle cx="{CENTER}" cy="{CENTER}" r="{CENTER - 2}" fill="none" stroke="#F59E0B" stroke-width="3"/>'
        ]
    if mark == "endodontics":
        return [f'<rect x="{CENTER - 1}" y="{SIZE + 1}" width="2" height="6" fill="#8B5CF6"/>']
    if mark == "implant":
        return [f'<rect x="{CENTER - 3}" y="{SIZE + 1}" width="6" height="6" fill="#10B981"/>']
    return []


def _range_svg(info: RangeInfo) -> list[str]:
    color = RANGE_COLORS[info.type]
    parts: list[str] = []
    if info.position in {"start", "middle"}:
        parts.append(f'<line x1="{CENTER}" y1="{CENTER}" x2="{SIZE + GAP}" y2="{CENTER}" stroke="{color}" stroke-width="3"/>')
    if info.position in {"end", "middle"}:
        parts.append(f'<line x1="0" y1="{CENTER}" x2="{CENTER}" y2="{CENTER}" stroke="{color}" stroke-width="3"/>')
    if info.type == ConditionType.orthodontics:
        parts.append(f'<rect x="{CENTER - 4}" y="{CENTER - 4}" width="8" height="8" fill="{color}"/>')
    if info.type == ConditionType.bridge and info.position in {"start", "end"}:
        parts.append(f'<circle cx="{CENTER}" cy="{CENTER}" r="4" fill="{color}"/>')
    return parts


def render_tooth_svg(layout: ToothLayout, x: int, y: int) -> str:
    parts = [f'<g transform="translate({x},{y})" data-tooth="{layout.number}">']
    for region in layout.regions:
        parts.append(
            f'<path d="{region.path}" fill="{region.fill}" stroke="{STROKE}" stroke-width="1" '
            f'data-surface="{region.surface.value}"/>'
        )
    for mark in layout.overlays:
        parts.extend(_overlay_svg(mark))
    if layout.range is not None:
        parts.extend(_range_svg(layout.range))
    parts.append(
        f'<text x="{CENTER}" y="{SIZE + LABEL_HEIGHT}" font-size="10" text-anchor="middle">{layout.number}</text>'
    )
    parts.append("</g>")
    return "".join(parts)


def render_chart_svg(conditions: Iterable[ConditionLike], dentition: Dentition = "adult") -> str:
    rows = chart_layout(conditions, dentition)
    step = SIZE + GAP
    row_height = SIZE + LABEL_HEIGHT + GAP * 2
    width = max(len(row) for row in rows) * step
    height = len(rows) * row_height
    body: list[str] = []
    for row_index, row in enumerate(rows):
        # Deciduous rows are shorter; centre them under the adult arch.
        indent = (width - len(row) * step) // 2
        for column, layout in enumerate(row):
            body.append(render_tooth_svg(layout, indent + column * step, row_index * row_height))
    return (
        f'<svg xmlns="http://www.w3.org/2000/svg" width="{width}" height="{height}" '
        f'viewBox="0 0 {width} {height}">' + "".join(body) + "</svg>"
    )
