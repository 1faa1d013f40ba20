"""Stamina Governor - finite worker endurance and the rest/work toggle."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from constants import ACTION_COST, RECOVERY_PER_STEP, REST_THRESHOLD

logger = logging.getLogger(__name__)


@dataclass
class Stamina:
    """Per-worker endurance. current is kept within [0, maximum]."""
    maximum: float
    current: Optional[float] = None
    resting: bool = False

    def __post_init__(self) -> None:
        if self.maximum < 0:
            raise ValueError(f"max stamina must be non-negative, got {self.maximum}")
        if self.current is None:
            self.current = self.maximum
        self.current = min(self.maximum, max(0.0, self.current))

    @property
    def fraction(self) -> float:
        if self.maximum <= 0:
            return 0.0
        return self.current / self.maximum


class StaminaGovernor:
    """
    Decides, once per step, whether a worker rests or works.

    - Resting: recover, and leave rest only once back at max
    - At or below rest_threshold * max: start resting, skip work
    - Otherwise the worker may work; completed actions are charged afterwards
    """

    def __init__(
        self,
        rest_threshold: float = REST_THRESHOLD,
        recovery_per_step: float = RECOVERY_PER_STEP,
        action_cost: float = ACTION_COST,
    ):
        self.rest_threshold = rest_threshold
        self.recovery_per_step = recovery_per_step
        self.action_cost = action_cost

    def should_rest(self, stamina: Stamina) -> bool:
        return stamina.current <= self.rest_threshold * stamina.maximum

    def begin_step(self, stamina: Stamina, name: str = "") -> bool:
        """
        Run the rest/work decision for one step.

        Returns True if the worker may work this step.
        """
        if stamina.resting:
            self.recover(stamina)
            if stamina.current >= stamina.maximum:
                stamina.resting = False
                logger.info(f"💪 {name} is rested ({stamina.current:g}/{stamina.maximum:g})")
            return False

        if self.should_rest(stamina):
            stamina.resting = True
            logger.info(f"😴 {name} is exhausted ({stamina.current:g}/{stamina.maximum:g}), resting")
            return False

        return True

    def recover(self, stamina: Stamina) -> None:
        stamina.current = min(stamina.maximum, stamina.current + self.recovery_per_step)

    def charge(self, stamina: Stamina) -> None:
        """Charge one completed action."""
        stamina.current = max(0.0, stamina.current - self.action_cost)
