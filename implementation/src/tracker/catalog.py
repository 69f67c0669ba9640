"""Collectable catalog loading: JSON content -> immutable dataclasses.

The bundled catalog lives next to this module (collectables.json).
SILK_TRACKER_CATALOG overrides the default path.

JSON shape:
    {"categories": [
        {"name": ..., "necessity": "primary" | "supporting", "tooltip": ...,
         "formula": {"divisor": 4, "offset": 0},     # primary only
         "items": [
            {"name": ..., "whichAct": 0-3, "prereqs": [...], "location": ...,
             "parsingInfo": {"type": "sceneData", "internalId": ["Crawl_02", "Heart Piece"]}}
         ]}
    ]}
"""
from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Mapping

from tracker.errors import ConfigurationError
from tracker.types import (
    Catalog,
    CategoryItem,
    CollectableCategory,
    CollectableInfo,
    CrestInfo,
    FlagInfo,
    Necessity,
    ParsingInfo,
    QuestInfo,
    SceneDataInfo,
    ScoringRule,
    TempIntFlagInfo,
    ToolInfo,
    UpgradableToolInfo,
)

CATALOG_ENV_VAR = "SILK_TRACKER_CATALOG"

VALID_ACTS = (0, 1, 2, 3)

# Older catalogs used "main" / "essential".
_NECESSITY_ALIASES = {
    "primary": Necessity.PRIMARY,
    "main": Necessity.PRIMARY,
    "supporting": Necessity.SUPPORTING,
    "essential": Necessity.SUPPORTING,
}


def default_catalog_path() -> Path:
    override = os.environ.get(CATALOG_ENV_VAR)
    if override:
        return Path(override).resolve()
    return Path(__file__).resolve().parent / "collectables.json"


def _require(entry: Mapping[str, Any], key: str, where: str) -> Any:
    if key not in entry:
        raise ConfigurationError(f"{where}: missing '{key}'")
    return entry[key]


def _mapping(value: Any, where: str) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise ConfigurationError(f"{where}: expected an object, got {value!r}")
    return value


def _list(value: Any, where: str) -> list:
    if not isinstance(value, list):
        raise ConfigurationError(f"{where}: expected a list, got {value!r}")
    return value


def _name(value: Any, where: str) -> str:
    if not isinstance(value, str) or not value:
        raise ConfigurationError(f"{where}: expected a non-empty name, got {value!r}")
    return value


def _name_list(value: Any, where: str) -> tuple[str, ...]:
    if isinstance(value, str):
        return (value,)
    if isinstance(value, (list, tuple)) and value and all(isinstance(v, str) for v in value):
        return tuple(value)
    raise ConfigurationError(f"{where}: expected a name or a list of names, got {value!r}")


def parsing_info_from_dict(entry: Mapping[str, Any]) -> ParsingInfo:
    """Build a ParsingInfo from its catalog form. Unknown tags raise ConfigurationError."""
    entry = _mapping(entry, "parsingInfo")
    tag = entry.get("type")
    where = f"parsingInfo[{tag!r}]"
    internal_id = _require(entry, "internalId", where)

    if tag == FlagInfo.tag:
        return FlagInfo(_name(internal_id, where))
    if tag == TempIntFlagInfo.tag:
        threshold = _require(entry, "threshold", where)
        if isinstance(threshold, bool) or not isinstance(threshold, int):
            raise ConfigurationError(f"{where}: threshold must be an integer, got {threshold!r}")
        return TempIntFlagInfo(_name(internal_id, where), threshold)
    if tag == QuestInfo.tag:
        return QuestInfo(_name(internal_id, where))
    if tag == SceneDataInfo.tag:
        if not isinstance(internal_id, (list, tuple)) or len(internal_id) != 2:
            raise ConfigurationError(f"{where}: expected [sceneName, id], got {internal_id!r}")
        scene_name, flag_id = internal_id
        return SceneDataInfo(_name(scene_name, where), _name(flag_id, where))
    if tag == ToolInfo.tag:
        return ToolInfo(_name(internal_id, where))
    if tag == UpgradableToolInfo.tag:
        return UpgradableToolInfo(_name_list(internal_id, where))
    if tag == CrestInfo.tag:
        return CrestInfo(_name(internal_id, where))
    if tag == CollectableInfo.tag:
        return CollectableInfo(_name(internal_id, where))

    raise ConfigurationError(f"Unknown ParsingInfo type: {tag!r}")


def item_from_dict(entry: Mapping[str, Any]) -> CategoryItem:
    entry = _mapping(entry, "item")
    name = _name(_require(entry, "name", "item"), "item")
    where = f"item {name!r}"
    act = entry.get("whichAct", 0)
    prereqs = entry.get("prereqs", [])
    if not isinstance(prereqs, list) or not all(isinstance(p, str) for p in prereqs):
        raise ConfigurationError(f"{where}: prereqs must be a list of strings, got {prereqs!r}")
    location = entry.get("location", "")
    if not isinstance(location, str):
        raise ConfigurationError(f"{where}: location must be a string, got {location!r}")
    if act not in VALID_ACTS or isinstance(act, bool):
        raise ConfigurationError(f"{where}: whichAct must be one of {VALID_ACTS}, got {act!r}")
    return CategoryItem(
        name=name,
        act=act,
        prerequisites=tuple(prereqs),
        location=location,
        parsing_info=parsing_info_from_dict(_require(entry, "parsingInfo", where)),
    )


def category_from_dict(entry: Mapping[str, Any]) -> CollectableCategory:
    entry = _mapping(entry, "category")
    name = _name(_require(entry, "name", "category"), "category")
    where = f"category {name!r}"

    raw_necessity = _require(entry, "necessity", where)
    necessity = _NECESSITY_ALIASES.get(raw_necessity) if isinstance(raw_necessity, str) else None
    if necessity is None:
        raise ConfigurationError(f"{where}: unknown necessity {raw_necessity!r}")

    tooltip = entry.get("tooltip", "")
    if not isinstance(tooltip, str):
        raise ConfigurationError(f"{where}: tooltip must be a string, got {tooltip!r}")

    scoring = None
    formula = entry.get("formula")
    if formula is not None:
        if not isinstance(formula, Mapping):
            raise ConfigurationError(f"{where}: formula must be an object, got {formula!r}")
        divisor = formula.get("divisor", 1)
        if isinstance(divisor, bool) or not isinstance(divisor, int) or divisor < 1:
            raise ConfigurationError(f"{where}: formula divisor must be a positive integer")
        offset = formula.get("offset", 0)
        if isinstance(offset, bool) or not isinstance(offset, int):
            raise ConfigurationError(f"{where}: formula offset must be an integer")
        scoring = ScoringRule(divisor=divisor, offset=offset)
    if necessity is Necessity.PRIMARY and scoring is None:
        raise ConfigurationError(f"{where}: primary categories need a formula")

    return CollectableCategory(
        name=name,
        necessity=necessity,
        tooltip=tooltip,
        items=tuple(item_from_dict(item) for item in _list(entry.get("items", []), f"{where} items")),
        scoring_function=scoring,
    )


def catalog_from_dict(raw: Mapping[str, Any]) -> Catalog:
    categories = _list(_mapping(raw, "catalog").get("categories", []), "catalog categories")
    return Catalog(tuple(category_from_dict(c) for c in categories))


def load_catalog(path: Path | None = None) -> Catalog:
    """Load a catalog file. Unreadable or malformed catalogs raise ConfigurationError."""
    if path is None:
        path = default_catalog_path()
    path = Path(path)
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        raise ConfigurationError(f"Could not load catalog {path}: {e}") from e
    if not isinstance(raw, dict):
        raise ConfigurationError(f"Catalog {path} must be a JSON object")
    return catalog_from_dict(raw)
