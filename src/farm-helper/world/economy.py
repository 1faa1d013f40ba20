"""Player/economy collaborator: the player who hires and pays workers."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Protocol

from .models import Tile


class Economy(Protocol):
    """What hiring needs to know about the requesting player."""

    money: int

    def debit(self, amount: int) -> None:
        ...

    def friendship_hearts(self, candidate: str) -> int:
        ...

    @property
    def max_stamina(self) -> float:
        ...

    @property
    def tile(self) -> Tile:
        ...

    @property
    def on_managed_grid(self) -> bool:
        ...


@dataclass
class Farmer:
    """Plain player record used by the headless host and tests."""
    name: str = "Farmer"
    money: int = 500
    stamina_capacity: float = 270.0
    position: Tile = (64, 15)
    location: str = "Farm"
    hearts: Dict[str, int] = field(default_factory=dict)

    def debit(self, amount: int) -> None:
        if amount > self.money:
            raise ValueError(f"Cannot debit {amount}g from {self.money}g")
        self.money -= amount

    def friendship_hearts(self, candidate: str) -> int:
        return self.hearts.get(candidate, 0)

    @property
    def max_stamina(self) -> float:
        return self.stamina_capacity

    @property
    def tile(self) -> Tile:
        return self.position

    @property
    def on_managed_grid(self) -> bool:
        return self.location == "Farm"
