from __future__ import annotations

import json
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Mapping, Sequence

from jsonschema import Draft202012Validator

from magicschool.engine.config import MatchConfig
from magicschool.engine.types import (
    MANA_COLORS,
    Card,
    CardEffect,
    CardType,
    EffectTrigger,
    InvariantViolation,
    ManaCost,
)


class ContentError(RuntimeError):
    pass


def _load_json(path: Path) -> object:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError as e:
        raise ContentError(f"Missing content file: {path}") from e
    except json.JSONDecodeError as e:
        raise ContentError(f"Invalid JSON in {path}: {e}") from e


def validate_json(instance: object, schema: object, *, context: str) -> None:
    validator = Draft202012Validator(schema)
    errors = sorted(validator.iter_errors(instance), key=lambda e: list(e.path))
    if errors:
        lines = [f"Schema validation failed for {context}:"]
        for err in errors[:10]:
            loc = "/".join(str(p) for p in err.absolute_path)
            lines.append(f"- {loc}: {err.message}")
        raise ContentError("\n".join(lines))


def _require_str(obj: Mapping[str, object], key: str) -> str:
    v = obj.get(key)
    if not isinstance(v, str):
        raise ContentError(f"Expected string for {key}")
    return v


def _require_int(obj: Mapping[str, object], key: str) -> int:
    v = obj.get(key)
    if not isinstance(v, int):
        raise ContentError(f"Expected int for {key}")
    return v


def _optional_str(obj: Mapping[str, object], key: str) -> str | None:
    v = obj.get(key)
    if v is None:
        return None
    if not isinstance(v, str):
        raise ContentError(f"Expected string for {key}")
    return v


def _optional_int(obj: Mapping[str, object], key: str) -> int | None:
    v = obj.get(key)
    if v is None:
        return None
    if not isinstance(v, int):
        raise ContentError(f"Expected int for {key}")
    return v


def _parse_mana_cost(raw: object) -> ManaCost:
    if not isinstance(raw, dict):
        raise ContentError("mana_cost must be an object")
    amounts: dict[str, int] = {}
    for color in MANA_COLORS:
        v = raw.get(color)
        if v is None:
            continue
        if not isinstance(v, int):
            raise ContentError(f"Expected int for mana_cost.{color}")
        amounts[color] = v
    return ManaCost(**amounts)


def _parse_effect(raw: Mapping[str, object]) -> CardEffect:
    params = raw.get("parameters", {})
    if not isinstance(params, dict):
        raise ContentError("Effect parameters must be an object")
    return CardEffect(
        id=_require_str(raw, "id"),
        name=_require_str(raw, "name"),
        description=_require_str(raw, "description"),
        trigger=_require_str(raw, "trigger"),  # type: ignore[arg-type]
        parameters=dict(params),
    )


# which triggers make sense on which card type, for the card editor
_TRIGGERS_FOR_TYPE: dict[CardType, tuple[EffectTrigger, ...]] = {
    "creature": ("continuous", "onAttack", "onDefend", "onDeath", "activated"),
    "spell": ("onPlay",),
    "artifact": ("continuous", "activated"),
    "land": ("activated",),
}


@dataclass(frozen=True)
class EffectCatalog:
    """The library of effects card authors pick from."""

    effects: dict[str, CardEffect]

    def get(self, effect_id: str) -> CardEffect:
        try:
            return self.effects[effect_id]
        except KeyError as e:
            raise ContentError(f"Unknown effect: {effect_id}") from e

    def by_trigger(self, trigger: EffectTrigger) -> list[CardEffect]:
        return [e for e in self.effects.values() if e.trigger == trigger]

    def for_card_type(self, card_type: CardType) -> list[CardEffect]:
        allowed = _TRIGGERS_FOR_TYPE[card_type]
        out = [e for e in self.effects.values() if e.trigger in allowed]
        if card_type == "land":
            out = [e for e in out if "manaAmount" in e.parameters]
        return out


@dataclass(frozen=True)
class CardDatabase:
    """Immutable card definitions, keyed by id."""

    cards: dict[str, Card]

    def get(self, card_id: str) -> Card:
        return self.cards[card_id]


def parse_card(item: Mapping[str, object], effects: EffectCatalog) -> Card:
    effect_ids = item.get("effect_ids", [])
    if not isinstance(effect_ids, list):
        raise ContentError("effect_ids must be a list")
    try:
        return Card(
            id=_require_str(item, "id"),
            name=_require_str(item, "name"),
            description=_require_str(item, "description"),
            type=_require_str(item, "type"),  # type: ignore[arg-type]
            mana_cost=_parse_mana_cost(item.get("mana_cost", {})),
            attack=_optional_int(item, "attack"),
            defense=_optional_int(item, "defense"),
            effects=tuple(effects.get(str(eid)) for eid in effect_ids),
            custom_type=_optional_str(item, "custom_type"),
            artwork_url=_optional_str(item, "artwork_url"),
            created_by=_optional_str(item, "created_by"),
            produces=_optional_str(item, "produces"),  # type: ignore[arg-type]
        )
    except InvariantViolation as e:
        raise ContentError(f"Invalid card {item.get('id')!r}: {e}") from e


def _parse_config(raw: Mapping[str, object]) -> MatchConfig:
    phase_order = raw.get("phase_order")
    payment_order = raw.get("payment_order")
    if not isinstance(phase_order, list) or not isinstance(payment_order, list):
        raise ContentError("phase_order and payment_order must be lists")
    try:
        return MatchConfig(
            starting_life=_require_int(raw, "starting_life"),
            starting_hand_size=_require_int(raw, "starting_hand_size"),
            max_hand_size=_require_int(raw, "max_hand_size"),
            max_battlefield_size=_require_int(raw, "max_battlefield_size"),
            phase_order=tuple(phase_order),
            payment_order=tuple(payment_order),
        )
    except ValueError as e:
        raise ContentError(f"Invalid rule variant: {e}") from e


class ContentService:
    def __init__(self, data_dir: Path, schema_dir: Path) -> None:
        self._data_dir = data_dir
        self._schema_dir = schema_dir

    def _load_validated(self, name: str) -> dict[str, object]:
        path = self._data_dir / f"{name}.json"
        raw = _load_json(path)
        schema = _load_json(self._schema_dir / f"{name}.schema.json")
        validate_json(raw, schema, context=str(path))
        if not isinstance(raw, dict):
            raise ContentError(f"{name}.json must be an object")
        return raw

    def load_effects(self) -> EffectCatalog:
        raw = self._load_validated("effects")
        raw_effects = raw.get("effects")
        if not isinstance(raw_effects, list):
            raise ContentError("effects.json.effects must be a list")
        out: dict[str, CardEffect] = {}
        for item in raw_effects:
            if not isinstance(item, dict):
                continue
            eff = _parse_effect(item)
            if eff.id in out:
                raise ContentError(f"Duplicate effect id: {eff.id}")
            out[eff.id] = eff
        return EffectCatalog(effects=out)

    def load_cards_db(self, effects: EffectCatalog | None = None) -> CardDatabase:
        catalog = effects or self.load_effects()
        raw = self._load_validated("cards")
        raw_cards = raw.get("cards")
        if not isinstance(raw_cards, list):
            raise ContentError("cards.json.cards must be a list")

        cards: dict[str, Card] = {}
        for item in raw_cards:
            if not isinstance(item, dict):
                continue
            card = parse_card(item, catalog)
            if card.id in cards:
                raise ContentError(f"Duplicate card id: {card.id}")
            cards[card.id] = card
        return CardDatabase(cards=cards)

    def load_rules(self) -> dict[str, MatchConfig]:
        raw = self._load_validated("rules")
        variants = raw.get("variants")
        if not isinstance(variants, dict):
            raise ContentError("rules.json.variants must be an object")
        return {name: _parse_config(cfg) for name, cfg in variants.items() if isinstance(cfg, dict)}

    def load_rule_variant(self, name: str) -> MatchConfig:
        variants = self.load_rules()
        if name not in variants:
            raise ContentError(f"Unknown rule variant: {name}")
        return variants[name]

    def validate_all(self) -> None:
        # Load is validation (schema + parse)
        catalog = self.load_effects()
        _ = self.load_cards_db(catalog)
        _ = self.load_rules()


def build_deck(db: CardDatabase, entries: Sequence[tuple[str, int]], owner: str) -> list[Card]:
    """Expand ``(card_id, count)`` entries into card instances with unique ids.

    Instance ids take the form ``<owner>:<card_id>:<n>`` so that two copies of
    a card can sit in different zones of the same match.
    """
    deck: list[Card] = []
    for card_id, count in entries:
        base = db.get(card_id)
        for n in range(count):
            deck.append(replace(base, id=f"{owner}:{card_id}:{n}"))
    return deck
