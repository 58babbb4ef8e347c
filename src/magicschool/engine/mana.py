"""Cost engine: affordability and payment against a mana pool.

Colored requirements are locked to their color. The generic ``learning``
requirement is paid from whatever is left over, walking the colors in a
fixed order so the leftover mana after a payment is predictable.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Sequence

from .results import INSUFFICIENT_MANA, PaymentResult
from .types import COLORED, GENERIC, MANA_COLORS, InvariantViolation, ManaColor, ManaCost, ManaPool


def total_mana_cost(cost: ManaCost) -> int:
    return sum(cost.get(c) for c in MANA_COLORS)


def can_afford(pool: ManaPool, cost: ManaCost) -> bool:
    for color in COLORED:
        if pool.get(color) < cost.get(color):
            return False
    colored_required = sum(cost.get(c) for c in COLORED)
    return pool.total() - colored_required >= cost.get(GENERIC)


def pay_cost(
    pool: ManaPool,
    cost: ManaCost,
    payment_order: Sequence[ManaColor] = COLORED,
) -> PaymentResult:
    """Deduct ``cost`` from ``pool``, returning the new pool.

    The input pool is never modified. When the cost cannot be afforded the
    result carries an ``insufficient_mana`` rejection and the pool it was given.
    """
    if not can_afford(pool, cost):
        return PaymentResult(ok=False, pool=pool, rejection=INSUFFICIENT_MANA)

    remaining = {c: pool.get(c) - cost.get(c) for c in COLORED}
    remaining[GENERIC] = pool.get(GENERIC)

    generic_due = cost.get(GENERIC)
    # the pool's own learning counter goes last
    for color in (*payment_order, GENERIC):
        if generic_due <= 0:
            break
        spend = min(remaining[color], generic_due)
        remaining[color] -= spend
        generic_due -= spend

    if generic_due > 0:
        raise InvariantViolation(f"Generic cost left unpaid after affordability check: {generic_due}")

    # ManaPool refuses negative counters, so a bad payment fails loudly here
    paid = ManaPool(**remaining)
    if pool.total() - paid.total() != total_mana_cost(cost):
        raise InvariantViolation("Payment did not consume exactly the card's total cost")
    return PaymentResult(ok=True, pool=paid)


def add_mana(pool: ManaPool, color: ManaColor, amount: int = 1) -> ManaPool:
    if amount < 0:
        raise InvariantViolation(f"Cannot add negative mana: {amount}")
    return replace(pool, **{color: pool.get(color) + amount})
