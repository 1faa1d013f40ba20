"""
Presentation hooks - sound, animation and HUD notices.

The engine only emits cues; drawing, audio and text lookup belong to the
host. Notices carry a translation key plus params so localisation stays
outside the engine.
"""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass, field
from typing import Any, Deque, Dict, List, Protocol, Sequence, Tuple

from world.models import Tile

logger = logging.getLogger(__name__)


# HUD message kinds (game convention)
NOTICE_ACHIEVEMENT = 1
NOTICE_NEW_QUEST = 2
NOTICE_ERROR = 3


@dataclass
class Notice:
    """A HUD message to show the player."""
    key: str                              # e.g. "message.hired"
    params: Dict[str, Any] = field(default_factory=dict)
    kind: int = NOTICE_NEW_QUEST

    def render(self) -> str:
        """Fallback text when no translation is available."""
        if not self.params:
            return self.key
        args = ", ".join(f"{k}={v}" for k, v in self.params.items())
        return f"{self.key} ({args})"


class Presentation(Protocol):
    def play_sound(self, cue: str) -> None:
        ...

    def animate(self, worker: str, frames: Sequence[Tuple[int, int]]) -> None:
        ...

    def face(self, worker: str, direction: int) -> None:
        ...

    def shake(self, tile: Tile) -> None:
        ...

    def notify(self, notice: Notice) -> None:
        ...


class LoggingPresentation:
    """Default presentation: logs every cue and keeps recent notices for polling."""

    def __init__(self, max_notices: int = 50):
        self.notices: Deque[Notice] = deque(maxlen=max_notices)
        self.sounds: Deque[str] = deque(maxlen=max_notices)

    def play_sound(self, cue: str) -> None:
        self.sounds.append(cue)
        logger.debug(f"🔊 {cue}")

    def animate(self, worker: str, frames: Sequence[Tuple[int, int]]) -> None:
        logger.debug(f"{worker}: animation {[frame for frame, _ in frames]}")

    def face(self, worker: str, direction: int) -> None:
        logger.debug(f"{worker}: facing {direction}")

    def shake(self, tile: Tile) -> None:
        logger.debug(f"Tree shake at {tile}")

    def notify(self, notice: Notice) -> None:
        self.notices.append(notice)
        logger.info(f"💬 {notice.render()}")

    def drain_notices(self) -> List[Notice]:
        """Pop all pending notices (for a UI poller)."""
        pending = list(self.notices)
        self.notices.clear()
        return pending
