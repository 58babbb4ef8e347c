from __future__ import annotations

from dataclasses import dataclass, replace

from .state import GameState


@dataclass(frozen=True)
class GameEndResult:
    ended: bool
    winner_id: str | None = None
    reason: str | None = None


def check_game_end(state: GameState) -> GameEndResult:
    """Report whether the match has reached a terminal condition.

    Players are scanned in seat order and the first one at or below 0 life
    loses. When both are at or below 0 at once, seat 0 is therefore the
    loser and seat 1 the winner.
    """
    if not state.is_active and state.winner_id is not None:
        return GameEndResult(ended=True, winner_id=state.winner_id, reason=state.end_reason)

    p0, p1 = state.players
    if p0.life <= 0 and p1.life <= 0:
        return GameEndResult(
            ended=True,
            winner_id=p1.id,
            reason="Both players were reduced to 0 life",
        )
    for i, p in enumerate(state.players):
        if p.life <= 0:
            winner = state.players[state.opponent(i)]
            name = p.username or p.id
            return GameEndResult(ended=True, winner_id=winner.id, reason=f"{name} was reduced to 0 life")
    return GameEndResult(ended=False)


def close_if_ended(state: GameState) -> tuple[GameState, GameEndResult]:
    result = check_game_end(state)
    if result.ended and state.is_active:
        state = replace(state, is_active=False, winner_id=result.winner_id, end_reason=result.reason)
    return state, result
