"""Unit tests for the barrel breakdown."""

from __future__ import annotations

import pytest

from barrel.domains.stress.domain_logic.breakdown import compose_breakdown
from barrel.domains.stress.domain_logic.stress_models import StressParts


def _parts(genetics=0.2, trauma=0.1, daily=0.1, acute=0.0):
    return StressParts(genetics, trauma, daily, acute, genetics + trauma + daily + acute)


class TestComposeBreakdown:
    def test_heights_split_fill_level_by_share(self):
        slices = {s.kind: s for s in compose_breakdown(_parts(), 0.5)}
        assert slices["genetics"].height == pytest.approx(0.25)
        assert slices["trauma"].height == pytest.approx(0.125)
        assert slices["daily"].height == pytest.approx(0.125)
        assert slices["headspace"].height == pytest.approx(0.5)

    def test_percentages_are_whole_part_values(self):
        slices = {s.kind: s for s in compose_breakdown(_parts(), 0.5)}
        assert slices["genetics"].percentage == 20
        assert slices["trauma"].percentage == 10
        assert slices["headspace"].percentage == 50

    def test_acute_hidden_without_positive_contribution(self):
        kinds = [s.kind for s in compose_breakdown(_parts(acute=-0.05), 0.3)]
        assert kinds == ["genetics", "trauma", "daily", "headspace"]

    def test_acute_shown_and_stacked_last(self):
        kinds = [s.kind for s in compose_breakdown(_parts(acute=0.15), 0.7)]
        assert kinds == ["genetics", "trauma", "daily", "acute", "headspace"]

    def test_heights_fill_the_barrel(self):
        slices = compose_breakdown(_parts(acute=0.15), 0.7)
        assert sum(s.height for s in slices) == pytest.approx(1.0)

    def test_negative_acute_does_not_overflow_the_barrel(self):
        slices = {s.kind: s for s in compose_breakdown(_parts(acute=-0.08), 0.5)}
        assert sum(s.height for s in slices.values()) == pytest.approx(1.0)
        assert slices["genetics"].height == pytest.approx(0.25)

    def test_full_barrel_has_no_headspace(self):
        headspace = compose_breakdown(_parts(), 1.0)[-1]
        assert headspace.kind == "headspace"
        assert headspace.height == 0.0
        assert headspace.label == "Headspace"
