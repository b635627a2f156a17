"""Tests for DockState."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from shellbridge.domain.dock import DockState


class TestDockState:
    def test_starts_cleared(self) -> None:
        state = DockState()
        assert state.progress is None
        assert state.badge is None
        assert state.progress_percent == 0
        assert state.badge_text == ""

    @pytest.mark.parametrize(
        ("progress", "percent"),
        [(0.0, 0), (0.004, 0), (0.005, 1), (0.42, 42), (0.999, 100), (1.0, 100)],
    )
    def test_progress_percent_rounds_half_up(self, progress: float, percent: int) -> None:
        assert DockState(progress=progress).progress_percent == percent

    def test_badge_text(self) -> None:
        assert DockState(badge="3").badge_text == "3"

    def test_assignment_validated(self) -> None:
        state = DockState()
        with pytest.raises(ValidationError):
            state.progress = 1.5

    def test_fields_independent(self) -> None:
        state = DockState(progress=0.3, badge="x")
        state.badge = None
        assert state.progress == 0.3
