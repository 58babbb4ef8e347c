from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Literal, Mapping

from .config import MatchConfig
from .types import Card, InvariantViolation, ManaPool, Phase

Zone = Literal["hand", "deck", "battlefield", "graveyard"]
ZONES: tuple[Zone, ...] = ("hand", "deck", "battlefield", "graveyard")

ActionType = Literal[
    "drawCard",
    "playCard",
    "tapLand",
    "changeLife",
    "passPhase",
    "surrender",
]


@dataclass(frozen=True)
class GameAction:
    """Audit record of the last accepted action, stamped by the caller."""

    type: ActionType
    player_id: str | None
    timestamp: datetime
    data: Mapping[str, object] = field(default_factory=dict, hash=False)


@dataclass(frozen=True)
class PlayerState:
    id: str
    username: str
    life: int
    mana: ManaPool = field(default_factory=ManaPool)
    hand: tuple[Card, ...] = ()
    deck: tuple[Card, ...] = ()
    battlefield: tuple[Card, ...] = ()
    graveyard: tuple[Card, ...] = ()
    tapped: frozenset[str] = frozenset()
    drew_this_turn: bool = False

    def find_in_hand(self, card_id: str) -> Card | None:
        for c in self.hand:
            if c.id == card_id:
                return c
        return None

    def find_on_battlefield(self, card_id: str) -> Card | None:
        for c in self.battlefield:
            if c.id == card_id:
                return c
        return None


@dataclass(frozen=True)
class GameState:
    id: str
    players: tuple[PlayerState, PlayerState]
    created_at: datetime
    config: MatchConfig = field(default_factory=MatchConfig)
    current_player: int = 0
    phase: Phase = "draw"
    turn: int = 1
    is_active: bool = True
    last_action: GameAction | None = None
    winner_id: str | None = None
    end_reason: str | None = None

    @property
    def active_player(self) -> PlayerState:
        return self.players[self.current_player]

    def opponent(self, index: int) -> int:
        return 1 - index

    def index_of(self, player_id: str) -> int | None:
        for i, p in enumerate(self.players):
            if p.id == player_id:
                return i
        return None

    def with_player(self, index: int, player: PlayerState) -> "GameState":
        players = list(self.players)
        players[index] = player
        return replace(self, players=(players[0], players[1]))


def check_invariants(state: GameState) -> None:
    """Raise InvariantViolation when zones or pools are inconsistent."""
    if len(state.players) != 2:
        raise InvariantViolation(f"A match has exactly two players, got {len(state.players)}")
    if state.current_player not in (0, 1):
        raise InvariantViolation(f"current_player out of range: {state.current_player}")
    if state.phase not in state.config.phase_order:
        raise InvariantViolation(f"Unknown phase: {state.phase}")

    seen: dict[str, str] = {}
    for p in state.players:
        if any(v < 0 for v in p.mana.as_dict().values()):
            raise InvariantViolation(f"Negative mana for player {p.id}")
        for zone in ZONES:
            for card in getattr(p, zone):
                where = f"{p.id}:{zone}"
                if card.id in seen:
                    raise InvariantViolation(
                        f"Card {card.id} is in two zones ({seen[card.id]} and {where})"
                    )
                seen[card.id] = where
        for card_id in p.tapped:
            if p.find_on_battlefield(card_id) is None:
                raise InvariantViolation(f"Tapped card {card_id} is not on {p.id}'s battlefield")
