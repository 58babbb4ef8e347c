from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class PlayCardAction:
    player_id: str
    card_id: str


@dataclass(frozen=True)
class DrawCardAction:
    player_id: str


@dataclass(frozen=True)
class TapLandAction:
    player_id: str
    card_id: str


@dataclass(frozen=True)
class ChangeLifeAction:
    """Damage (negative delta) or healing applied by an effect resolver."""

    player_id: str
    delta: int


@dataclass(frozen=True)
class AdvancePhaseAction:
    # who asked; the engine computes the same transition regardless
    player_id: str | None = None


@dataclass(frozen=True)
class SurrenderAction:
    player_id: str


Action = (
    PlayCardAction
    | DrawCardAction
    | TapLandAction
    | ChangeLifeAction
    | AdvancePhaseAction
    | SurrenderAction
)
