from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Literal

from .types import ManaPool

if TYPE_CHECKING:
    from .state import GameState

RejectionKind = Literal["illegal_action", "insufficient_resources", "inactive_match"]

Event = dict[str, object]


@dataclass(frozen=True)
class Rejection:
    """Why an action was refused. Rejections never change the state."""

    kind: RejectionKind
    code: str
    reason: str


def illegal(code: str, reason: str) -> Rejection:
    return Rejection(kind="illegal_action", code=code, reason=reason)


NOT_YOUR_TURN = illegal("not_your_turn", "It's not your turn.")
WRONG_PHASE = illegal("wrong_phase", "Can only play cards during main phase.")
CARD_NOT_IN_HAND = illegal("card_not_in_hand", "Card not found in hand.")
BATTLEFIELD_FULL = illegal("battlefield_full", "Battlefield is full.")
INSUFFICIENT_MANA = Rejection(
    kind="insufficient_resources",
    code="insufficient_mana",
    reason="Not enough mana to play this card.",
)
MATCH_INACTIVE = Rejection(kind="inactive_match", code="match_inactive", reason="Match is over.")


@dataclass(frozen=True)
class PaymentResult:
    ok: bool
    pool: ManaPool
    rejection: Rejection | None = None


@dataclass(frozen=True)
class StepResult:
    ok: bool
    state: "GameState"
    rejection: Rejection | None = None
    events: tuple[Event, ...] = field(default=())

    @property
    def error(self) -> str | None:
        return None if self.rejection is None else self.rejection.reason

    @staticmethod
    def rejected(state: "GameState", rejection: Rejection) -> "StepResult":
        return StepResult(ok=False, state=state, rejection=rejection)
