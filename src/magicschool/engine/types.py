from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal, Mapping

CardType = Literal["creature", "spell", "artifact", "land"]
ManaColor = Literal["math", "german", "english", "french", "latin", "differentiation", "learning"]
Phase = Literal["draw", "main", "combat", "end"]

EffectTrigger = Literal["onPlay", "onAttack", "onDefend", "onDeath", "continuous", "activated"]

MANA_COLORS: tuple[ManaColor, ...] = (
    "math",
    "german",
    "english",
    "french",
    "latin",
    "differentiation",
    "learning",
)
COLORED: tuple[ManaColor, ...] = MANA_COLORS[:-1]
GENERIC: ManaColor = "learning"

CARD_TYPES: tuple[CardType, ...] = ("creature", "spell", "artifact", "land")


class InvariantViolation(RuntimeError):
    """Raised when a value breaks a rule the public operations never break."""


@dataclass(frozen=True)
class ManaPool:
    math: int = 0
    german: int = 0
    english: int = 0
    french: int = 0
    latin: int = 0
    differentiation: int = 0
    learning: int = 0

    def __post_init__(self) -> None:
        for color in MANA_COLORS:
            if getattr(self, color) < 0:
                raise InvariantViolation(f"Mana pool has negative {color}: {getattr(self, color)}")

    def get(self, color: ManaColor) -> int:
        return int(getattr(self, color))

    def total(self) -> int:
        return sum(self.get(c) for c in MANA_COLORS)

    def as_dict(self) -> dict[str, int]:
        return {c: self.get(c) for c in MANA_COLORS}

    @staticmethod
    def empty() -> "ManaPool":
        return ManaPool()


@dataclass(frozen=True)
class ManaCost:
    """Price of a card. ``None`` means the color is not part of the cost."""

    math: int | None = None
    german: int | None = None
    english: int | None = None
    french: int | None = None
    latin: int | None = None
    differentiation: int | None = None
    learning: int | None = None

    def __post_init__(self) -> None:
        for color in MANA_COLORS:
            v = getattr(self, color)
            if v is not None and v < 0:
                raise InvariantViolation(f"Mana cost has negative {color}: {v}")

    def get(self, color: ManaColor) -> int:
        v = getattr(self, color)
        return 0 if v is None else int(v)

    def as_dict(self) -> dict[str, int]:
        # absent colors are left out, matching how authors write costs
        return {c: getattr(self, c) for c in MANA_COLORS if getattr(self, c) is not None}


@dataclass(frozen=True)
class CardEffect:
    id: str
    name: str
    description: str
    trigger: EffectTrigger
    # opaque to the engine; handed to whatever resolves effects
    parameters: Mapping[str, object] = field(default_factory=dict, hash=False)


@dataclass(frozen=True)
class Card:
    id: str
    name: str
    description: str
    type: CardType
    mana_cost: ManaCost = field(default_factory=ManaCost)
    attack: int | None = None
    defense: int | None = None
    effects: tuple[CardEffect, ...] = ()
    custom_type: str | None = None
    artwork_url: str | None = None
    created_by: str | None = None
    produces: ManaColor | None = None

    def __post_init__(self) -> None:
        if self.type not in CARD_TYPES:
            raise InvariantViolation(f"Unknown card type for {self.id}: {self.type}")
        if self.type != "creature" and (self.attack is not None or self.defense is not None):
            raise InvariantViolation(f"Only creatures can have attack/defense ({self.id})")
        if self.produces is not None and self.type != "land":
            raise InvariantViolation(f"Only lands can produce mana ({self.id})")

    @property
    def is_creature(self) -> bool:
        return self.type == "creature"


@dataclass(frozen=True)
class CardDraft:
    """A card still being authored: only what the balancing heuristic reads."""

    type: CardType | None = None
    attack: int | None = None
    defense: int | None = None
    effects: tuple[CardEffect, ...] = ()
