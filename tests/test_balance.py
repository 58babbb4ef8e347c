from __future__ import annotations

from magicschool.engine.balance import suggest_mana_cost
from magicschool.engine.mana import total_mana_cost
from magicschool.engine.types import Card, CardDraft, CardEffect, ManaCost


def _effect(i: int) -> CardEffect:
    return CardEffect(id=f"e{i}", name=f"Effect {i}", description="", trigger="onPlay")


def test_creature_cost_from_stats_and_effects() -> None:
    draft = CardDraft(type="creature", attack=5, defense=7, effects=(_effect(1), _effect(2)))
    # 1 base + 5//2 + 7//3 + 2 effects
    assert suggest_mana_cost(draft) == ManaCost(learning=1 + 2 + 2 + 2)


def test_spell_and_artifact_base_cost() -> None:
    assert suggest_mana_cost(CardDraft(type="spell")) == ManaCost(learning=2)
    assert suggest_mana_cost(CardDraft(type="artifact", effects=(_effect(1),))) == ManaCost(learning=3)


def test_minimum_cost_of_one() -> None:
    assert suggest_mana_cost(CardDraft(type="creature", attack=0, defense=1)) == ManaCost(learning=1)
    assert suggest_mana_cost(CardDraft()) == ManaCost(learning=1)


def test_land_is_always_free() -> None:
    cost = suggest_mana_cost(CardDraft(type="land", effects=(_effect(1), _effect(2))))
    assert total_mana_cost(cost) == 0


def test_suggestion_is_deterministic_and_accepts_cards() -> None:
    card = Card(id="c", name="C", description="", type="creature", attack=4, defense=3, effects=(_effect(1),))
    first = suggest_mana_cost(card)
    assert all(suggest_mana_cost(card) == first for _ in range(5))
    assert first == ManaCost(learning=1 + 2 + 1 + 1)
