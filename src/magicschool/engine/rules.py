"""Action validation and application.

Every function here takes a ``GameState`` and returns a ``StepResult``.
Validation short-circuits on the first failed check, in a fixed order, so
the same bad request always produces the same rejection. Nothing is applied
unless every check passes, and the input state is never modified.
"""

from __future__ import annotations

from dataclasses import replace

from .mana import add_mana, can_afford, pay_cost
from .results import (
    BATTLEFIELD_FULL,
    CARD_NOT_IN_HAND,
    INSUFFICIENT_MANA,
    MATCH_INACTIVE,
    NOT_YOUR_TURN,
    WRONG_PHASE,
    Event,
    Rejection,
    StepResult,
    illegal,
)
from .state import GameState, check_invariants
from .types import GENERIC, Card, InvariantViolation, ManaColor


def _current_actor(state: GameState, player_id: str) -> Rejection | None:
    if not state.is_active:
        return MATCH_INACTIVE
    if state.active_player.id != player_id:
        return NOT_YOUR_TURN
    return None


def validate_card_play(state: GameState, player_id: str, card_id: str) -> Rejection | None:
    """Return the first reason ``player_id`` may not play ``card_id``, or None."""
    chk = _current_actor(state, player_id)
    if chk:
        return chk
    if state.phase != "main":
        return WRONG_PHASE

    ps = state.active_player
    card = ps.find_in_hand(card_id)
    if card is None:
        return CARD_NOT_IN_HAND
    if not can_afford(ps.mana, card.mana_cost):
        return INSUFFICIENT_MANA
    if card.is_creature and len(ps.battlefield) >= state.config.max_battlefield_size:
        return BATTLEFIELD_FULL
    return None


def _accept(state: GameState, events: list[Event]) -> StepResult:
    check_invariants(state)
    return StepResult(ok=True, state=state, events=tuple(events))


def play_card(state: GameState, player_id: str, card_id: str) -> StepResult:
    rejection = validate_card_play(state, player_id, card_id)
    if rejection:
        return StepResult.rejected(state, rejection)

    ps = state.active_player
    card = ps.find_in_hand(card_id)
    assert card is not None

    payment = pay_cost(ps.mana, card.mana_cost, state.config.payment_order)
    if not payment.ok:
        # can_afford already passed, so this means pay_cost and can_afford disagree
        raise InvariantViolation(f"Payment failed after validation for {card_id}")

    hand = tuple(c for c in ps.hand if c.id != card_id)
    events: list[Event] = [
        {
            "type": "CARD_PLAYED",
            "player": player_id,
            "card_id": card_id,
            "card_type": card.type,
            "mana_left": payment.pool.as_dict(),
        }
    ]
    if card.type == "spell":
        ps = replace(ps, hand=hand, mana=payment.pool, graveyard=ps.graveyard + (card,))
        # resolution of the spell body happens outside the engine
        events.append(
            {
                "type": "SPELL_CAST",
                "player": player_id,
                "card_id": card_id,
                "effects": [e.id for e in card.effects],
            }
        )
    else:
        ps = replace(ps, hand=hand, mana=payment.pool, battlefield=ps.battlefield + (card,))
        events.append({"type": "PERMANENT_ENTERED", "player": player_id, "card_id": card_id})

    return _accept(state.with_player(state.current_player, ps), events)


def draw_card(state: GameState, player_id: str) -> StepResult:
    chk = _current_actor(state, player_id)
    if chk:
        return StepResult.rejected(state, chk)
    if state.phase != "draw":
        return StepResult.rejected(state, illegal("wrong_phase", "Can only draw during draw phase."))

    ps = state.active_player
    if ps.drew_this_turn:
        return StepResult.rejected(state, illegal("already_drew", "Already drew a card this turn."))
    if len(ps.hand) >= state.config.max_hand_size:
        return StepResult.rejected(state, illegal("hand_full", "Hand is full."))
    if not ps.deck:
        return StepResult.rejected(state, illegal("deck_empty", "No cards left in deck."))

    card = ps.deck[0]
    ps = replace(ps, deck=ps.deck[1:], hand=ps.hand + (card,), drew_this_turn=True)
    events: list[Event] = [{"type": "CARD_DRAWN", "player": player_id, "card_id": card.id}]
    return _accept(state.with_player(state.current_player, ps), events)


def _land_producing(card: Card) -> ManaColor:
    return card.produces or GENERIC


def tap_land(state: GameState, player_id: str, card_id: str) -> StepResult:
    chk = _current_actor(state, player_id)
    if chk:
        return StepResult.rejected(state, chk)

    ps = state.active_player
    card = ps.find_on_battlefield(card_id)
    if card is None:
        return StepResult.rejected(
            state, illegal("card_not_on_battlefield", "Card not found on battlefield.")
        )
    if card.type != "land":
        return StepResult.rejected(state, illegal("not_a_land", "Only lands can be tapped for mana."))
    if card_id in ps.tapped:
        return StepResult.rejected(state, illegal("already_tapped", "Land is already tapped."))

    color = _land_producing(card)
    ps = replace(ps, mana=add_mana(ps.mana, color), tapped=ps.tapped | {card_id})
    events: list[Event] = [
        {"type": "LAND_TAPPED", "player": player_id, "card_id": card_id, "color": color}
    ]
    return _accept(state.with_player(state.current_player, ps), events)


def change_life(state: GameState, player_id: str, delta: int) -> StepResult:
    if not state.is_active:
        return StepResult.rejected(state, MATCH_INACTIVE)
    idx = state.index_of(player_id)
    if idx is None:
        return StepResult.rejected(state, illegal("unknown_player", f"No player {player_id} in this match."))

    ps = state.players[idx]
    ps = replace(ps, life=ps.life + delta)
    events: list[Event] = [
        {"type": "LIFE_CHANGED", "player": player_id, "delta": delta, "life": ps.life}
    ]
    return _accept(state.with_player(idx, ps), events)


def surrender(state: GameState, player_id: str) -> StepResult:
    if not state.is_active:
        return StepResult.rejected(state, MATCH_INACTIVE)
    idx = state.index_of(player_id)
    if idx is None:
        return StepResult.rejected(state, illegal("unknown_player", f"No player {player_id} in this match."))

    loser = state.players[idx]
    winner = state.players[state.opponent(idx)]
    new_state = replace(
        state,
        is_active=False,
        winner_id=winner.id,
        end_reason=f"{loser.username or loser.id} surrendered",
    )
    events: list[Event] = [{"type": "PLAYER_SURRENDERED", "player": player_id}]
    return _accept(new_state, events)
