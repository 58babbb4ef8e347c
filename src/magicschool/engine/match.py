from __future__ import annotations

import random
from dataclasses import replace
from datetime import datetime, timezone
from typing import Iterable, Sequence

from .actions import (
    Action,
    AdvancePhaseAction,
    ChangeLifeAction,
    DrawCardAction,
    PlayCardAction,
    SurrenderAction,
    TapLandAction,
)
from .config import MatchConfig
from .results import MATCH_INACTIVE, Event, StepResult, illegal
from .rules import change_life, draw_card, play_card, surrender, tap_land
from .state import GameState, PlayerState, check_invariants
from .types import Card, InvariantViolation, ManaPool
from .win import close_if_ended


def _new_player(player_id: str, cfg: MatchConfig, username: str = "") -> PlayerState:
    return PlayerState(id=player_id, username=username, life=cfg.starting_life, mana=ManaPool.empty())


def create_match(
    player1_id: str,
    player2_id: str,
    match_id: str,
    config: MatchConfig | None = None,
    created_at: datetime | None = None,
) -> GameState:
    """Build a fresh match: both players at starting life, nothing in any zone."""
    if player1_id == player2_id:
        raise ValueError("A match needs two distinct players.")
    cfg = config or MatchConfig()
    state = GameState(
        id=match_id,
        players=(_new_player(player1_id, cfg), _new_player(player2_id, cfg)),
        created_at=created_at or datetime.now(tz=timezone.utc),
        config=cfg,
        current_player=0,
        phase=cfg.first_phase,
        turn=1,
        is_active=True,
    )
    check_invariants(state)
    return state


def set_usernames(state: GameState, username0: str, username1: str) -> GameState:
    p0, p1 = state.players
    return replace(state, players=(replace(p0, username=username0), replace(p1, username=username1)))


def deal_opening_hands(
    state: GameState,
    deck0: Sequence[Card],
    deck1: Sequence[Card],
    seed: int,
) -> GameState:
    """Load and shuffle both libraries, then draw the starting hands.

    Shuffling uses ``random.Random(seed)`` so the same seed and decks always
    produce the same opening hands.
    """
    if state.turn != 1 or any(p.deck or p.hand for p in state.players):
        raise InvariantViolation("Opening hands can only be dealt once, before play starts.")

    rng = random.Random(seed)
    n = min(state.config.starting_hand_size, state.config.max_hand_size)
    players = []
    for ps, deck in zip(state.players, (deck0, deck1)):
        library = list(deck)
        rng.shuffle(library)
        players.append(replace(ps, hand=tuple(library[:n]), deck=tuple(library[n:])))

    new_state = replace(state, players=(players[0], players[1]))
    check_invariants(new_state)
    return new_state


def _reset_turn_resources(ps: PlayerState) -> PlayerState:
    return replace(ps, mana=ManaPool.empty(), tapped=frozenset(), drew_this_turn=False)


def advance_phase(state: GameState) -> StepResult:
    """Move to the next phase, or hand the turn over after the last one.

    Turn-scoped resources of the player whose turn begins are reset here and
    nowhere else.
    """
    if not state.is_active:
        return StepResult.rejected(state, MATCH_INACTIVE)

    order = state.config.phase_order
    idx = order.index(state.phase)
    events: list[Event] = []

    if state.phase == state.config.last_phase:
        nxt = state.opponent(state.current_player)
        new_state = replace(
            state, current_player=nxt, phase=state.config.first_phase, turn=state.turn + 1
        )
        new_state = new_state.with_player(nxt, _reset_turn_resources(new_state.players[nxt]))
        events.append({"type": "TURN_ENDED", "player": state.active_player.id, "turn": state.turn})
        events.append({"type": "TURN_STARTED", "player": new_state.active_player.id, "turn": new_state.turn})
    else:
        new_state = replace(state, phase=order[idx + 1])

    events.append({"type": "PHASE_CHANGED", "phase": new_state.phase, "turn": new_state.turn})
    check_invariants(new_state)
    return StepResult(ok=True, state=new_state, events=tuple(events))


def step(state: GameState, action: Action) -> StepResult:
    """Apply a single action and evaluate the win condition afterwards.

    The input state is left untouched; the new state is on the result.
    """
    if not state.is_active:
        return StepResult.rejected(state, MATCH_INACTIVE)

    if isinstance(action, PlayCardAction):
        result = play_card(state, action.player_id, action.card_id)
    elif isinstance(action, AdvancePhaseAction):
        result = advance_phase(state)
    elif isinstance(action, DrawCardAction):
        result = draw_card(state, action.player_id)
    elif isinstance(action, TapLandAction):
        result = tap_land(state, action.player_id, action.card_id)
    elif isinstance(action, ChangeLifeAction):
        result = change_life(state, action.player_id, action.delta)
    elif isinstance(action, SurrenderAction):
        result = surrender(state, action.player_id)
    else:
        return StepResult.rejected(state, illegal("unknown_action", "Unknown action."))

    if not result.ok:
        return result

    new_state, outcome = close_if_ended(result.state)
    events = result.events
    if outcome.ended:
        events = events + ({"type": "GAME_ENDED", "winner": outcome.winner_id, "reason": outcome.reason},)
    return replace(result, state=new_state, events=events)


def replay(
    player1_id: str,
    player2_id: str,
    match_id: str,
    deck0: Sequence[Card],
    deck1: Sequence[Card],
    seed: int,
    actions: Iterable[Action],
    created_at: datetime,
    config: MatchConfig | None = None,
) -> GameState:
    state = create_match(player1_id, player2_id, match_id, config=config, created_at=created_at)
    state = deal_opening_hands(state, deck0, deck1, seed)
    for a in actions:
        state = step(state, a).state
        if not state.is_active:
            break
    return state
