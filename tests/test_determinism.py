from __future__ import annotations

from datetime import datetime, timezone

from magicschool.engine.actions import (
    Action,
    AdvancePhaseAction,
    DrawCardAction,
    PlayCardAction,
    TapLandAction,
)
from magicschool.engine.match import create_match, deal_opening_hands, replay, step
from magicschool.engine.rules import validate_card_play
from magicschool.engine.serialize import snapshot
from magicschool.engine.state import GameState
from magicschool.paths import get_paths
from magicschool.services.content import CardDatabase, ContentService, build_deck

NOW = datetime(2026, 1, 1, tzinfo=timezone.utc)


def _load_cards() -> CardDatabase:
    paths = get_paths()
    content = ContentService(paths.data_dir, paths.schema_dir)
    return content.load_cards_db()


def _choose_action(state: GameState) -> Action:
    ps = state.active_player
    pid = ps.id

    if state.phase == "draw":
        if ps.deck and not ps.drew_this_turn and len(ps.hand) < state.config.max_hand_size:
            return DrawCardAction(player_id=pid)
        return AdvancePhaseAction(player_id=pid)

    if state.phase == "main":
        for c in ps.battlefield:
            if c.type == "land" and c.id not in ps.tapped:
                return TapLandAction(player_id=pid, card_id=c.id)
        for c in ps.hand:
            if validate_card_play(state, pid, c.id) is None:
                return PlayCardAction(player_id=pid, card_id=c.id)

    return AdvancePhaseAction(player_id=pid)


def test_engine_determinism_replay() -> None:
    cards = _load_cards()

    deck0 = build_deck(cards, [("math-room", 8), ("pythagoras", 4), ("exam-day", 4), ("calculator", 4)], "p0")
    deck1 = build_deck(cards, [("language-lab", 6), ("library", 4), ("goethe", 4), ("school-nurse", 4)], "p1")

    seed = 424242
    state = create_match("alice", "bob", "m1", created_at=NOW)
    state = deal_opening_hands(state, deck0, deck1, seed)

    actions: list[Action] = []
    for _ in range(150):
        if not state.is_active:
            break
        a = _choose_action(state)
        res = step(state, a)
        assert res.ok, res.error
        actions.append(a)
        state = res.state

    assert state.turn > 4
    replayed = replay("alice", "bob", "m1", deck0, deck1, seed, actions, created_at=NOW)
    assert snapshot(replayed) == snapshot(state)
    assert replayed == state


def test_same_seed_same_opening_hands() -> None:
    cards = _load_cards()
    deck0 = build_deck(cards, [("pythagoras", 10), ("math-room", 10)], "p0")
    deck1 = build_deck(cards, [("goethe", 10), ("language-lab", 10)], "p1")

    a = deal_opening_hands(create_match("alice", "bob", "m1", created_at=NOW), deck0, deck1, seed=9)
    b = deal_opening_hands(create_match("alice", "bob", "m1", created_at=NOW), deck0, deck1, seed=9)
    assert snapshot(a) == snapshot(b)
