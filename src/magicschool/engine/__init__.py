"""Deterministic, headless match engine for MagicSchool.

IMPORTANT: This package performs no I/O. Every operation takes a state value
and returns a new one.
"""

from .actions import (
    AdvancePhaseAction,
    ChangeLifeAction,
    DrawCardAction,
    PlayCardAction,
    SurrenderAction,
    TapLandAction,
)
from .balance import suggest_mana_cost
from .config import MatchConfig
from .mana import can_afford, pay_cost, total_mana_cost
from .match import advance_phase, create_match, deal_opening_hands, replay, step
from .results import PaymentResult, Rejection, StepResult
from .rules import play_card, validate_card_play
from .state import GameState, PlayerState
from .types import Card, CardDraft, CardEffect, CardType, InvariantViolation, ManaCost, ManaPool
from .win import GameEndResult, check_game_end

__all__ = [
    "AdvancePhaseAction",
    "Card",
    "CardDraft",
    "CardEffect",
    "CardType",
    "ChangeLifeAction",
    "DrawCardAction",
    "GameEndResult",
    "GameState",
    "InvariantViolation",
    "ManaCost",
    "ManaPool",
    "MatchConfig",
    "PaymentResult",
    "PlayCardAction",
    "PlayerState",
    "Rejection",
    "StepResult",
    "SurrenderAction",
    "TapLandAction",
    "advance_phase",
    "can_afford",
    "check_game_end",
    "create_match",
    "deal_opening_hands",
    "pay_cost",
    "play_card",
    "replay",
    "step",
    "suggest_mana_cost",
    "total_mana_cost",
    "validate_card_play",
]
