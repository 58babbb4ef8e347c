from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Callable, Protocol, Sequence

from magicschool.engine.actions import (
    Action,
    AdvancePhaseAction,
    ChangeLifeAction,
    DrawCardAction,
    PlayCardAction,
    SurrenderAction,
    TapLandAction,
)
from magicschool.engine.config import MatchConfig
from magicschool.engine.match import create_match, deal_opening_hands, set_usernames, step
from magicschool.engine.results import NOT_YOUR_TURN, StepResult
from magicschool.engine.serialize import action_to_dict
from magicschool.engine.state import ActionType, GameAction, GameState
from magicschool.engine.types import Card, InvariantViolation
from magicschool.services.telemetry import TelemetryService

log = logging.getLogger(__name__)


class SessionError(RuntimeError):
    pass


class MatchRepository(Protocol):
    def load(self, match_id: str) -> GameState | None: ...

    def save(self, state: GameState) -> None: ...

    def delete(self, match_id: str) -> None: ...

    def ids(self) -> Sequence[str]: ...


@dataclass
class InMemoryMatchRepository:
    """Default repository: states live in a dict for the life of the process."""

    states: dict[str, GameState] = field(default_factory=dict)

    def load(self, match_id: str) -> GameState | None:
        return self.states.get(match_id)

    def save(self, state: GameState) -> None:
        self.states[state.id] = state

    def delete(self, match_id: str) -> None:
        self.states.pop(match_id, None)

    def ids(self) -> Sequence[str]:
        return sorted(self.states)


def _action_type(action: Action) -> ActionType:
    if isinstance(action, PlayCardAction):
        return "playCard"
    if isinstance(action, DrawCardAction):
        return "drawCard"
    if isinstance(action, TapLandAction):
        return "tapLand"
    if isinstance(action, ChangeLifeAction):
        return "changeLife"
    if isinstance(action, SurrenderAction):
        return "surrender"
    return "passPhase"


def _utcnow() -> datetime:
    return datetime.now(tz=timezone.utc)


class MatchSessionService:
    """Single writer per match.

    Actions for one match id are applied one at a time under that match's
    lock, so two requests can never both validate against the same state.
    Different matches proceed independently.
    """

    def __init__(
        self,
        repository: MatchRepository | None = None,
        telemetry: TelemetryService | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._repo = repository if repository is not None else InMemoryMatchRepository()
        self._telemetry = telemetry
        self._clock = clock
        self._locks: dict[str, threading.Lock] = {}
        self._locks_guard = threading.Lock()

    def _lock_for(self, match_id: str, *, create: bool = False) -> threading.Lock:
        with self._locks_guard:
            lock = self._locks.get(match_id)
            if lock is None:
                if not create and self._repo.load(match_id) is None:
                    raise SessionError(f"Unknown match: {match_id}")
                lock = threading.Lock()
                self._locks[match_id] = lock
            return lock

    def _drop_lock(self, match_id: str) -> None:
        with self._locks_guard:
            self._locks.pop(match_id, None)

    def open_match(
        self,
        match_id: str,
        player1_id: str,
        player2_id: str,
        deck0: Sequence[Card],
        deck1: Sequence[Card],
        seed: int,
        config: MatchConfig | None = None,
        usernames: tuple[str, str] | None = None,
    ) -> GameState:
        with self._lock_for(match_id, create=True):
            if self._repo.load(match_id) is not None:
                raise SessionError(f"Match already exists: {match_id}")
            try:
                state = create_match(player1_id, player2_id, match_id, config=config, created_at=self._clock())
                if usernames is not None:
                    state = set_usernames(state, usernames[0], usernames[1])
                state = deal_opening_hands(state, deck0, deck1, seed)
            except (ValueError, InvariantViolation):
                self._drop_lock(match_id)
                raise
            self._repo.save(state)
        log.info("match %s opened: %s vs %s (seed=%s)", match_id, player1_id, player2_id, seed)
        self._journal(match_id, [{"type": "MATCH_OPENED", "players": [player1_id, player2_id], "seed": seed}])
        return state

    def get(self, match_id: str) -> GameState:
        state = self._repo.load(match_id)
        if state is None:
            raise SessionError(f"Unknown match: {match_id}")
        return state

    def submit(self, match_id: str, action: Action) -> StepResult:
        with self._lock_for(match_id):
            state = self.get(match_id)

            # the engine does not gate phase advancement; only the current player may ask for it here
            if (
                state.is_active
                and isinstance(action, AdvancePhaseAction)
                and action.player_id != state.active_player.id
            ):
                result = StepResult.rejected(state, NOT_YOUR_TURN)
            else:
                result = step(state, action)

            if not result.ok:
                assert result.rejection is not None
                log.debug("match %s rejected %s: %s", match_id, action, result.rejection.code)
                self._journal(
                    match_id,
                    [{"type": "ACTION_REJECTED", "action": action_to_dict(action), "code": result.rejection.code}],
                )
                return result

            stamped = replace(
                result.state,
                last_action=GameAction(
                    type=_action_type(action),
                    player_id=getattr(action, "player_id", None),
                    timestamp=self._clock(),
                    data=action_to_dict(action),
                ),
            )
            self._repo.save(stamped)
            self._journal(match_id, list(result.events))

        if not stamped.is_active:
            log.info("match %s ended, winner=%s (%s)", match_id, stamped.winner_id, stamped.end_reason)
        return replace(result, state=stamped)

    def close(self, match_id: str) -> GameState:
        with self._lock_for(match_id):
            state = self.get(match_id)
            self._repo.delete(match_id)
        self._drop_lock(match_id)
        log.info("match %s closed", match_id)
        return state

    def _journal(self, match_id: str, events: list[dict[str, object]]) -> None:
        if self._telemetry is None:
            return
        self._telemetry.log_many(
            (str(e.get("type", "EVENT")), {"match": match_id, **e}) for e in events
        )
