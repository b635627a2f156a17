"""DockState: the process-lifetime dock progress/badge state.

Created once with both fields unset and mutated in place by the dock
synchronizer.  The presentation values are derived on every read.
"""

from __future__ import annotations

import math

from pydantic import BaseModel, Field


class DockState(BaseModel):
    """Dock progress fraction and badge label.

    ``None`` on either field means "cleared"; the two fields are updated
    independently of each other.
    """

    model_config = {"validate_assignment": True}

    progress: float | None = Field(default=None, ge=0.0, le=1.0)
    badge: str | None = None

    @property
    def progress_percent(self) -> int:
        """Stored fraction as a whole percentage, rounding halves up; 0 when cleared."""
        if self.progress is None:
            return 0
        return math.floor(self.progress * 100 + 0.5)

    @property
    def badge_text(self) -> str:
        return self.badge or ""
