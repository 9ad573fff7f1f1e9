"""Short messages shown to the user in the status area."""

from __future__ import annotations

import time
from dataclasses import dataclass
from datetime import timedelta
from typing import Optional


@dataclass
class Message:
    """A one line markdown message, shown for a minimal duration."""

    markdown: str
    display_start: Optional[float] = None
    display_duration: timedelta = timedelta(seconds=5)

    @classmethod
    def short(cls, markdown: str) -> Message:
        """Build a short message, typically answering a user action."""
        return cls(str(markdown))

    def is_expired(self) -> bool:
        """Tell whether the message has been displayed for longer than its duration."""
        if self.display_start is None:
            return False
        elapsed = time.monotonic() - self.display_start
        return elapsed > self.display_duration.total_seconds()