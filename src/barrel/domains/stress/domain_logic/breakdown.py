"""Barrel breakdown: how the filled part of the barrel divides by component.

The view layer draws the barrel from these slices; nothing here renders.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from barrel.domains.stress.domain_logic.stress_models import StressParts

# Bottom-to-top stacking order
SLICE_ORDER = ["genetics", "trauma", "daily", "acute"]

SLICE_LABELS = {
    "genetics": "Genetics",
    "trauma": "Trauma",
    "daily": "Day to day",
    "acute": "Acute",
    "headspace": "Headspace",
}


@dataclass(frozen=True)
class BarrelSlice:
    """One stacked slice of the barrel."""

    kind: str
    label: str
    percentage: int     # whole-percent label shown to the user
    height: float       # fraction of the barrel height, 0-1


def _percent(value: float) -> int:
    """Round half up to a whole percent."""
    return math.floor(value * 100 + 0.5)


def compose_breakdown(parts: StressParts, fill_level: float) -> list[BarrelSlice]:
    """Split ``fill_level`` across the components, then add headspace.

    Each component's height is its share of the summed parts times the
    fill level. The acute slice is omitted unless it is positive.
    """
    values = {kind: getattr(parts, kind) for kind in SLICE_ORDER}
    if values["acute"] <= 0:
        del values["acute"]
    # Heights are shares of the drawn slices only
    component_total = sum(values.values())

    slices: list[BarrelSlice] = []
    for kind, value in values.items():
        height = (value / component_total) * fill_level if component_total > 0 else 0.0
        slices.append(BarrelSlice(kind, SLICE_LABELS[kind], _percent(value), height))

    headspace = 1 - fill_level
    slices.append(BarrelSlice("headspace", SLICE_LABELS["headspace"], _percent(headspace), headspace))
    return slices
