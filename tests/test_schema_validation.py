from __future__ import annotations

import json
import shutil
from pathlib import Path

import pytest

from magicschool.paths import get_paths
from magicschool.services.content import ContentError, ContentService, build_deck


def _content() -> ContentService:
    paths = get_paths()
    return ContentService(paths.data_dir, paths.schema_dir)


def _copy_data(tmp_path: Path) -> Path:
    paths = get_paths()
    data = tmp_path / "data"
    shutil.copytree(paths.data_dir, data)
    return data


def test_content_schemas_validate() -> None:
    _content().validate_all()


def test_cards_resolve_effects_from_library() -> None:
    db = _content().load_cards_db()
    shakespeare = db.get("shakespeare")
    assert shakespeare.type == "creature"
    assert [e.id for e in shakespeare.effects] == ["flying"]
    assert shakespeare.effects[0].trigger == "continuous"
    assert db.get("math-room").produces == "math"
    assert db.get("exam-day").attack is None


def test_effect_catalog_filters() -> None:
    catalog = _content().load_effects()
    assert all(e.trigger == "onPlay" for e in catalog.by_trigger("onPlay"))
    assert [e.id for e in catalog.for_card_type("land")] == ["add-mana-any-1"]
    assert all(e.trigger == "onPlay" for e in catalog.for_card_type("spell"))
    with pytest.raises(ContentError):
        catalog.get("time-travel")


def test_rule_variants_load() -> None:
    rules = _content().load_rules()
    assert rules["standard"].starting_life == 20
    assert rules["commander"].starting_life == 40
    quick = _content().load_rule_variant("quick")
    assert quick.phase_order == ("draw", "main", "end")
    assert quick.payment_order[0] == "differentiation"
    with pytest.raises(ContentError):
        _content().load_rule_variant("nope")


def test_non_creature_with_attack_fails_schema(tmp_path: Path) -> None:
    data = _copy_data(tmp_path)
    raw = json.loads((data / "cards.json").read_text(encoding="utf-8"))
    raw["cards"].append(
        {
            "id": "bad-spell",
            "name": "Bad Spell",
            "description": "",
            "type": "spell",
            "mana_cost": {"math": 1},
            "attack": 3,
            "effect_ids": [],
        }
    )
    (data / "cards.json").write_text(json.dumps(raw), encoding="utf-8")
    svc = ContentService(data, data / "schemas")
    with pytest.raises(ContentError, match="Schema validation failed"):
        svc.load_cards_db()


def test_unknown_effect_reference(tmp_path: Path) -> None:
    data = _copy_data(tmp_path)
    raw = json.loads((data / "cards.json").read_text(encoding="utf-8"))
    raw["cards"][0]["effect_ids"] = ["does-not-exist"]
    (data / "cards.json").write_text(json.dumps(raw), encoding="utf-8")
    with pytest.raises(ContentError, match="Unknown effect"):
        ContentService(data, data / "schemas").load_cards_db()


def test_missing_and_invalid_files(tmp_path: Path) -> None:
    data = _copy_data(tmp_path)
    (data / "rules.json").unlink()
    svc = ContentService(data, data / "schemas")
    with pytest.raises(ContentError, match="Missing content file"):
        svc.load_rules()

    (data / "effects.json").write_text("{not json", encoding="utf-8")
    with pytest.raises(ContentError, match="Invalid JSON"):
        svc.load_effects()


def test_build_deck_gives_unique_instance_ids() -> None:
    db = _content().load_cards_db()
    deck = build_deck(db, [("moliere", 3), ("library", 2)], "alice")
    assert [c.id for c in deck] == [
        "alice:moliere:0",
        "alice:moliere:1",
        "alice:moliere:2",
        "alice:library:0",
        "alice:library:1",
    ]
    assert {c.name for c in deck} == {"Moliere", "Library"}


def test_rule_variant_without_draw_phase_fails_schema(tmp_path: Path) -> None:
    data = _copy_data(tmp_path)
    raw = json.loads((data / "rules.json").read_text(encoding="utf-8"))
    raw["variants"]["quick"]["phase_order"] = ["main", "end"]
    (data / "rules.json").write_text(json.dumps(raw), encoding="utf-8")
    with pytest.raises(ContentError, match="Schema validation failed"):
        ContentService(data, data / "schemas").load_rules()
