"""Configuration loaded from settings.yaml."""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Optional

import yaml

from constants import (
    ACTION_COST,
    BASE_HIRING_COST,
    DAY_START_TIME,
    DISCOUNT_PER_HEART,
    END_OF_DAY_TIME,
    MAX_DISCOUNT,
    NO_WORK_NOTICE_TICKS,
    RECOVERY_PER_STEP,
    REST_THRESHOLD,
    TASK_COSTS,
    TICKS_PER_STEP,
    TICKS_PER_TIME_STEP,
)


@dataclass
class Config:
    """Host-supplied settings, read once at startup."""

    # Sound
    enable_sound_effects: bool = True

    # Costs
    base_hiring_cost: int = BASE_HIRING_COST
    task_costs: Dict[str, int] = field(default_factory=lambda: dict(TASK_COSTS))
    discount_per_heart: float = DISCOUNT_PER_HEART
    max_discount: float = MAX_DISCOUNT

    # Stamina
    rest_threshold: float = REST_THRESHOLD
    recovery_per_step: float = RECOVERY_PER_STEP
    action_cost: float = ACTION_COST

    # Schedule
    ticks_per_step: int = TICKS_PER_STEP
    day_start: int = DAY_START_TIME
    ticks_per_time_step: int = TICKS_PER_TIME_STEP
    end_of_day: int = END_OF_DAY_TIME
    no_work_notice_ticks: int = NO_WORK_NOTICE_TICKS

    # Faults
    dismiss_all_on_fault: bool = False

    # Logging
    log_level: str = "INFO"
    log_file: Optional[Path] = None

    def task_cost(self, key: str) -> int:
        return int(self.task_costs.get(key, 0))

    @classmethod
    def from_yaml(cls, path: str = "./config/settings.yaml") -> "Config":
        """Load config from YAML file."""
        config = cls()

        try:
            with open(path, 'r') as f:
                data = yaml.safe_load(f) or {}

            # Sound
            if 'sound' in data:
                config.enable_sound_effects = bool(
                    data['sound'].get('enabled', config.enable_sound_effects)
                )

            # Costs
            if 'costs' in data:
                costs = data['costs']
                config.base_hiring_cost = int(costs.get('base_hiring', config.base_hiring_cost))
                for key in TASK_COSTS:
                    if key in costs:
                        config.task_costs[key] = int(costs[key])
                config.discount_per_heart = float(
                    costs.get('discount_per_heart', config.discount_per_heart)
                )
                config.max_discount = float(costs.get('max_discount', config.max_discount))

            # Stamina
            if 'stamina' in data:
                stamina = data['stamina']
                config.rest_threshold = float(stamina.get('rest_threshold', config.rest_threshold))
                config.recovery_per_step = float(
                    stamina.get('recovery_per_tick', config.recovery_per_step)
                )
                config.action_cost = float(stamina.get('action_cost', config.action_cost))

            # Schedule
            if 'schedule' in data:
                schedule = data['schedule']
                config.ticks_per_step = int(schedule.get('ticks_per_step', config.ticks_per_step))
                config.day_start = int(schedule.get('day_start', config.day_start))
                config.ticks_per_time_step = int(
                    schedule.get('ticks_per_time_step', config.ticks_per_time_step)
                )
                config.end_of_day = int(schedule.get('end_of_day', config.end_of_day))
                config.no_work_notice_ticks = int(
                    schedule.get('no_work_notice_ticks', config.no_work_notice_ticks)
                )

            # Faults
            if 'faults' in data:
                config.dismiss_all_on_fault = bool(
                    data['faults'].get('dismiss_all', config.dismiss_all_on_fault)
                )

            # Logging
            if 'logging' in data:
                config.log_level = data['logging'].get('level', config.log_level)
                log_file = data['logging'].get('file')
                if log_file:
                    config.log_file = Path(log_file)

        except FileNotFoundError:
            logging.warning(f"Config file not found: {path}, using defaults")
        except Exception as e:
            logging.error(f"Error loading config: {e}, using defaults")
            return cls()

        return config
