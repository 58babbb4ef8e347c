from __future__ import annotations

from .types import Card, CardDraft, CardType, ManaCost

BASE_COST: dict[CardType, int] = {
    "creature": 1,
    "spell": 2,
    "artifact": 2,
}


def suggest_mana_cost(draft: CardDraft | Card) -> ManaCost:
    """Suggest a cost for a card being authored.

    Advisory only: nothing checks that a card's real cost matches. The whole
    suggestion is generic (``learning``) mana.
    """
    if draft.type == "land":
        return ManaCost(learning=0)

    total = BASE_COST.get(draft.type, 0) if draft.type is not None else 0
    if draft.attack:
        total += draft.attack // 2
    if draft.defense:
        total += draft.defense // 3
    total += len(draft.effects)

    return ManaCost(learning=max(1, total))
