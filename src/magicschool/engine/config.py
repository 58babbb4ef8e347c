from __future__ import annotations

from dataclasses import dataclass

from .types import COLORED, ManaColor, Phase

# phases the rules refer to by name
REQUIRED_PHASES: tuple[Phase, ...] = ("draw", "main")


@dataclass(frozen=True)
class MatchConfig:
    starting_life: int = 20
    starting_hand_size: int = 7
    max_hand_size: int = 7
    max_battlefield_size: int = 12
    phase_order: tuple[Phase, ...] = ("draw", "main", "combat", "end")
    # order in which leftover colors pay for the generic component
    payment_order: tuple[ManaColor, ...] = COLORED

    def __post_init__(self) -> None:
        if not self.phase_order:
            raise ValueError("phase_order must not be empty")
        if len(set(self.phase_order)) != len(self.phase_order):
            raise ValueError(f"phase_order has duplicates: {self.phase_order}")
        missing = [p for p in REQUIRED_PHASES if p not in self.phase_order]
        if missing:
            raise ValueError(f"phase_order is missing {missing}")
        if sorted(self.payment_order) != sorted(COLORED):
            raise ValueError("payment_order must name every colored subject exactly once")

    @property
    def first_phase(self) -> Phase:
        return self.phase_order[0]

    @property
    def last_phase(self) -> Phase:
        return self.phase_order[-1]
