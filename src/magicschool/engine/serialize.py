from __future__ import annotations

from .actions import (
    Action,
    AdvancePhaseAction,
    ChangeLifeAction,
    DrawCardAction,
    PlayCardAction,
    SurrenderAction,
    TapLandAction,
)
from .results import Rejection, StepResult
from .state import GameAction, GameState, PlayerState
from .types import Card, CardEffect


def action_to_dict(a: Action) -> dict[str, object]:
    if isinstance(a, PlayCardAction):
        return {"type": "playCard", "player": a.player_id, "card_id": a.card_id}
    if isinstance(a, DrawCardAction):
        return {"type": "drawCard", "player": a.player_id}
    if isinstance(a, TapLandAction):
        return {"type": "tapLand", "player": a.player_id, "card_id": a.card_id}
    if isinstance(a, ChangeLifeAction):
        return {"type": "changeLife", "player": a.player_id, "delta": a.delta}
    if isinstance(a, AdvancePhaseAction):
        return {"type": "passPhase", "player": a.player_id}
    if isinstance(a, SurrenderAction):
        return {"type": "surrender", "player": a.player_id}
    # should be unreachable
    return {"type": "unknown"}


def _effect_to_dict(e: CardEffect) -> dict[str, object]:
    return {
        "id": e.id,
        "name": e.name,
        "description": e.description,
        "trigger": e.trigger,
        "parameters": dict(e.parameters),
    }


def card_to_dict(c: Card) -> dict[str, object]:
    out: dict[str, object] = {
        "id": c.id,
        "name": c.name,
        "description": c.description,
        "type": c.type,
        "mana_cost": c.mana_cost.as_dict(),
        "effects": [_effect_to_dict(e) for e in c.effects],
    }
    optional = {
        "attack": c.attack,
        "defense": c.defense,
        "custom_type": c.custom_type,
        "artwork_url": c.artwork_url,
        "created_by": c.created_by,
        "produces": c.produces,
    }
    out.update({k: v for k, v in optional.items() if v is not None})
    return out


def _player_to_dict(p: PlayerState) -> dict[str, object]:
    return {
        "id": p.id,
        "username": p.username,
        "life": p.life,
        "mana": p.mana.as_dict(),
        "hand": [card_to_dict(c) for c in p.hand],
        "deck": [card_to_dict(c) for c in p.deck],
        "battlefield": [card_to_dict(c) for c in p.battlefield],
        "graveyard": [card_to_dict(c) for c in p.graveyard],
        "tapped": sorted(p.tapped),
        "drew_this_turn": p.drew_this_turn,
    }


def _game_action_to_dict(a: GameAction | None) -> dict[str, object] | None:
    if a is None:
        return None
    return {
        "type": a.type,
        "player": a.player_id,
        "timestamp": a.timestamp.isoformat(),
        "data": dict(a.data),
    }


def snapshot(state: GameState) -> dict[str, object]:
    """Return a JSON-serializable canonical snapshot of the current match state."""
    return {
        "id": state.id,
        "current_player": state.current_player,
        "phase": state.phase,
        "turn": state.turn,
        "is_active": state.is_active,
        "created_at": state.created_at.isoformat(),
        "winner": state.winner_id,
        "end_reason": state.end_reason,
        "players": [_player_to_dict(p) for p in state.players],
        "last_action": _game_action_to_dict(state.last_action),
    }


def rejection_to_dict(r: Rejection) -> dict[str, object]:
    return {"kind": r.kind, "code": r.code, "reason": r.reason}


def result_to_dict(res: StepResult) -> dict[str, object]:
    return {
        "ok": res.ok,
        "rejection": rejection_to_dict(res.rejection) if res.rejection else None,
        "events": list(res.events),
        "state": snapshot(res.state),
    }
