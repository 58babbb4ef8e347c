from __future__ import annotations

import pytest

from magicschool.engine.mana import add_mana, can_afford, pay_cost, total_mana_cost
from magicschool.engine.types import COLORED, InvariantViolation, ManaCost, ManaPool


def test_total_mana_cost_treats_absent_as_zero() -> None:
    assert total_mana_cost(ManaCost()) == 0
    assert total_mana_cost(ManaCost(math=1, learning=2)) == 3
    assert total_mana_cost(ManaCost(math=1, german=1, english=1, french=1, latin=1, differentiation=1, learning=1)) == 7


def test_colored_requirements_are_color_locked() -> None:
    pool = ManaPool(german=5)
    assert not can_afford(pool, ManaCost(math=1))
    assert can_afford(pool, ManaCost(german=2, learning=3))
    assert not can_afford(pool, ManaCost(german=2, learning=4))


def test_generic_can_be_paid_from_any_leftover_including_learning() -> None:
    assert can_afford(ManaPool(latin=1, learning=1), ManaCost(learning=2))
    assert not can_afford(ManaPool(latin=1), ManaCost(latin=1, learning=1))


def test_concrete_math_payment_scenario() -> None:
    pool = ManaPool(math=2)
    cost = ManaCost(math=1, learning=1)
    assert can_afford(pool, cost)
    res = pay_cost(pool, cost)
    assert res.ok
    assert res.pool == ManaPool()


def test_unaffordable_payment_is_rejected_without_touching_pool() -> None:
    pool = ManaPool(math=1, german=1)
    res = pay_cost(pool, ManaCost(math=1, learning=2))
    assert not res.ok
    assert res.rejection is not None
    assert res.rejection.kind == "insufficient_resources"
    assert res.rejection.code == "insufficient_mana"
    assert res.pool is pool
    assert pool == ManaPool(math=1, german=1)


def test_generic_consumption_follows_fixed_order() -> None:
    pool = ManaPool(math=1, german=1, english=1, french=1, latin=1, differentiation=1, learning=1)
    res = pay_cost(pool, ManaCost(learning=3))
    assert res.ok
    assert res.pool == ManaPool(english=0, french=1, latin=1, differentiation=1, learning=1)


def test_pool_learning_is_spent_last() -> None:
    res = pay_cost(ManaPool(latin=1, learning=2), ManaCost(learning=2))
    assert res.ok
    assert res.pool == ManaPool(learning=1)


def test_custom_payment_order() -> None:
    order = tuple(reversed(COLORED))
    res = pay_cost(ManaPool(math=1, differentiation=1), ManaCost(learning=1), order)
    assert res.ok
    assert res.pool == ManaPool(math=1)


@pytest.mark.parametrize(
    "pool,cost",
    [
        (ManaPool(math=3, french=2), ManaCost(math=1, learning=3)),
        (ManaPool(german=1, learning=4), ManaCost(german=1, learning=4)),
        (ManaPool(english=2, latin=2, differentiation=2), ManaCost(latin=2, differentiation=1, learning=2)),
        (ManaPool(math=1), ManaCost()),
    ],
)
def test_payment_consumes_exactly_total_cost(pool: ManaPool, cost: ManaCost) -> None:
    assert can_afford(pool, cost)
    res = pay_cost(pool, cost)
    assert res.ok
    assert pool.total() - res.pool.total() == total_mana_cost(cost)
    assert all(v >= 0 for v in res.pool.as_dict().values())


def test_negative_counters_are_invariant_violations() -> None:
    with pytest.raises(InvariantViolation):
        ManaPool(math=-1)
    with pytest.raises(InvariantViolation):
        ManaCost(learning=-2)
    with pytest.raises(InvariantViolation):
        add_mana(ManaPool(), "math", -1)


def test_add_mana() -> None:
    pool = add_mana(ManaPool(math=1), "math", 2)
    assert pool == ManaPool(math=3)
