"""Normalize LLM-produced drill JSON into a validated DrillSchema.

Two phases:

Phase A (check_drill_structure): hard gate. Objects that are not
drill-shaped at all (no name, no pitch, no players, no sequence) are
rejected with ``None``.

Phase B (coerce_drill_fields): total repair. Every soft field is coerced
to a safe value: numeric strings are parsed, bad numbers fall back to the
constants below, enum tokens go through alias tables, missing ids are
assigned from position. Nothing in this phase rejects.
"""

import logging
import math
import re
from enum import Enum
from typing import Any, TypeVar

from pydantic import ValidationError

from src.schemas.drill import (
    ConeColor,
    DrillCategory,
    DrillSchema,
    DrillSport,
    DrillType,
    Easing,
    GoalType,
    PitchShape,
    RotationType,
    SetPieceType,
    TeamColor,
)

logger = logging.getLogger(__name__)

E = TypeVar("E", bound=Enum)

# --- Fallback constants ---

DEFAULT_PITCH_WIDTH = 30.0
DEFAULT_PITCH_HEIGHT = 20.0
DEFAULT_COORDINATE = 50.0
DEFAULT_STEP_DURATION_MS = 1500.0
DEFAULT_CYCLES = 2

DEFAULT_GOAL_Y = 0.0
DEFAULT_GOAL_WIDTH = 12.0
DEFAULT_GOAL_ROTATION = 0.0

DEFAULT_ZONE_X = 0.0
DEFAULT_ZONE_Y = 0.0
DEFAULT_ZONE_SIZE = 50.0
DEFAULT_ZONE_OPACITY = 0.3
DEFAULT_ZONE_COLOR = "white"

DEFAULT_TEAM_COLOR = TeamColor.BLUE
DEFAULT_CONE_COLOR = ConeColor.YELLOW
DEFAULT_ACTION_TYPE = "move"

# --- Alias tables (keys are lower-cased, trimmed) ---

TEAM_COLOR_ALIASES: dict[str, TeamColor] = {
    "black": TeamColor.BLACK,
    "blue": TeamColor.BLUE,
    "red": TeamColor.RED,
    "yellow": TeamColor.YELLOW,
    "white": TeamColor.WHITE,
    "green": TeamColor.GREEN,
    # Colors the models reach for that have no bib
    "orange": TeamColor.RED,
    "purple": TeamColor.BLUE,
    "cyan": TeamColor.BLUE,
    "pink": TeamColor.RED,
    "grey": TeamColor.BLACK,
    "gray": TeamColor.BLACK,
    # Role labels used in place of a color
    "team a": TeamColor.BLUE,
    "team b": TeamColor.RED,
    "team_a": TeamColor.BLUE,
    "team_b": TeamColor.RED,
    "attackers": TeamColor.BLUE,
    "defenders": TeamColor.RED,
    "attacking": TeamColor.BLUE,
    "defending": TeamColor.RED,
    "offense": TeamColor.BLUE,
    "defense": TeamColor.RED,
    "a": TeamColor.BLUE,
    "b": TeamColor.RED,
}

CONE_COLOR_ALIASES: dict[str, ConeColor] = {
    "green": ConeColor.GREEN,
    "yellow": ConeColor.YELLOW,
    "orange": ConeColor.ORANGE,
    "red": ConeColor.RED,
    "blue": ConeColor.BLUE,
    "white": ConeColor.WHITE,
    "black": ConeColor.RED,
    "purple": ConeColor.BLUE,
    "cyan": ConeColor.BLUE,
    "pink": ConeColor.RED,
    "grey": ConeColor.WHITE,
    "gray": ConeColor.WHITE,
}

ACTION_TYPE_ALIASES: dict[str, str] = {
    "run": "run",
    "sprint": "run",
    "jog": "run",
    "overlap": "run",
    "dribble": "dribble",
    "carry": "dribble",
    "pass": "pass",
    "cross": "pass",
    "kick": "pass",
    "shoot": "shoot",
    "shot": "shoot",
    "move": "move",
    "shuffle": "move",
    "jockey": "move",
    "wait": "wait",
    "pause": "wait",
    "hold": "wait",
}

_EASING_KEYS: dict[str, Easing] = {
    "linear": Easing.LINEAR,
    "easein": Easing.EASE_IN,
    "easeout": Easing.EASE_OUT,
    "easeinout": Easing.EASE_IN_OUT,
}

_TRUE_STRINGS = ("true", "yes", "1")


def canonical_team_color(value: Any) -> TeamColor:
    """Map any team token onto the bib enumeration (fallback blue)."""
    if not isinstance(value, str):
        return DEFAULT_TEAM_COLOR
    return TEAM_COLOR_ALIASES.get(value.strip().lower(), DEFAULT_TEAM_COLOR)


def canonical_cone_color(value: Any) -> ConeColor:
    """Map any cone color token onto the cone enumeration (fallback yellow)."""
    if not isinstance(value, str):
        return DEFAULT_CONE_COLOR
    return CONE_COLOR_ALIASES.get(value.strip().lower(), DEFAULT_CONE_COLOR)


# --- Scalar coercion helpers ---


def _finite(value: Any, fallback: float) -> float:
    """Return ``value`` as a finite float, parsing numeric strings."""
    number = _optional_finite(value)
    return fallback if number is None else number


def _optional_finite(value: Any) -> float | None:
    if isinstance(value, bool) or not isinstance(value, (int, float, str)):
        return None
    try:
        number = float(value.strip() if isinstance(value, str) else value)
    except (ValueError, OverflowError):
        return None
    return number if math.isfinite(number) else None


def _text(value: Any) -> str | None:
    return value if isinstance(value, str) else None


def _identifier(value: Any, fallback: str) -> str:
    if isinstance(value, str) and value.strip():
        return value
    return fallback


def _flag(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.strip().lower() in _TRUE_STRINGS
    return False


def _optional_flag(value: Any) -> bool | None:
    return None if value is None else _flag(value)


def _choice(enum_cls: type[E], value: Any, default: E | None, separator: str = "-") -> E | None:
    """Look up an enum member leniently ("Half Pitch" -> half-pitch)."""
    if not isinstance(value, str):
        return default
    key = re.sub(r"[\s_-]+", separator, value.strip().lower())
    try:
        return enum_cls(key)
    except ValueError:
        return default


def _easing(value: Any) -> Easing | None:
    if not isinstance(value, str):
        return None
    return _EASING_KEYS.get(re.sub(r"[\s_-]+", "", value.strip().lower()))


def _slugify(name: str) -> str:
    slug = re.sub(r"[^a-z0-9]+", "-", name.lower()).strip("-")
    return slug or "drill"


def _entries(value: Any) -> list[dict]:
    """List of objects; non-object entries become ``{}`` so positions hold."""
    if not isinstance(value, list):
        return []
    return [item if isinstance(item, dict) else {} for item in value]


def _point(value: Any) -> dict | None:
    if not isinstance(value, dict):
        return None
    return {
        "x": _finite(value.get("x"), DEFAULT_COORDINATE),
        "y": _finite(value.get("y"), DEFAULT_COORDINATE),
    }


def _target(value: Any) -> dict | str | None:
    if isinstance(value, str) and value.strip():
        return value
    return _point(value)


# --- Phase A: structural gate ---


def check_drill_structure(value: Any) -> dict | None:
    """Return ``value`` if it is drill-shaped, else ``None``.

    Drill-shaped means: a JSON object with a string ``name`` (or
    ``title``), an object ``pitch``, and non-empty ``players`` and
    ``sequence`` lists.
    """
    if not isinstance(value, dict):
        logger.debug("Rejected candidate: not a JSON object")
        return None
    if not isinstance(value.get("name"), str) and not isinstance(value.get("title"), str):
        logger.debug("Rejected candidate: no string name or title")
        return None
    if not isinstance(value.get("pitch"), dict):
        logger.debug("Rejected candidate: pitch missing or not an object")
        return None
    for key in ("players", "sequence"):
        items = value.get(key)
        if not isinstance(items, list) or not items:
            logger.debug(f"Rejected candidate: {key} missing or empty")
            return None
    return value


# --- Phase B: soft coercion ---


def _coerce_pitch(raw: dict) -> dict:
    return {
        "shape": _choice(PitchShape, raw.get("shape"), PitchShape.RECTANGLE),
        "width": _finite(raw.get("width"), DEFAULT_PITCH_WIDTH),
        "height": _finite(raw.get("height"), DEFAULT_PITCH_HEIGHT),
    }


def _coerce_player(raw: dict, index: int) -> dict:
    return {
        "id": _identifier(raw.get("id"), f"p{index + 1}"),
        "x": _finite(raw.get("x"), DEFAULT_COORDINATE),
        "y": _finite(raw.get("y"), DEFAULT_COORDINATE),
        "team": canonical_team_color(raw.get("team")),
        "hasBall": _flag(raw.get("hasBall")),
        "label": _text(raw.get("label")),
        "role": _text(raw.get("role")),
    }


def _coerce_ball(raw: dict, index: int) -> dict:
    return {
        "id": _identifier(raw.get("id"), f"b{index + 1}"),
        "x": _finite(raw.get("x"), DEFAULT_COORDINATE),
        "y": _finite(raw.get("y"), DEFAULT_COORDINATE),
        "heldBy": _text(raw.get("heldBy")),
    }


def _coerce_cone(raw: dict, index: int) -> dict:
    return {
        "id": _identifier(raw.get("id"), f"c{index + 1}"),
        "x": _finite(raw.get("x"), DEFAULT_COORDINATE),
        "y": _finite(raw.get("y"), DEFAULT_COORDINATE),
        "color": canonical_cone_color(raw.get("color")),
        "label": _text(raw.get("label")),
    }


def _coerce_goal(raw: dict, index: int) -> dict:
    return {
        "id": _identifier(raw.get("id"), f"g{index + 1}"),
        "x": _finite(raw.get("x"), DEFAULT_COORDINATE),
        "y": _finite(raw.get("y"), DEFAULT_GOAL_Y),
        "width": _finite(raw.get("width"), DEFAULT_GOAL_WIDTH),
        "rotation": _finite(raw.get("rotation"), DEFAULT_GOAL_ROTATION),
        "type": _choice(GoalType, raw.get("type"), GoalType.MINI),
    }


def _coerce_zone(raw: dict, index: int) -> dict:
    color = raw.get("color")
    return {
        "id": _identifier(raw.get("id"), f"z{index + 1}"),
        "x": _finite(raw.get("x"), DEFAULT_ZONE_X),
        "y": _finite(raw.get("y"), DEFAULT_ZONE_Y),
        "width": _finite(raw.get("width"), DEFAULT_ZONE_SIZE),
        "height": _finite(raw.get("height"), DEFAULT_ZONE_SIZE),
        "color": color if isinstance(color, str) and color.strip() else DEFAULT_ZONE_COLOR,
        "opacity": _finite(raw.get("opacity"), DEFAULT_ZONE_OPACITY),
        "label": _text(raw.get("label")),
    }


def _coerce_state_change(raw: dict) -> dict | None:
    player_id = raw.get("playerId")
    if not isinstance(player_id, str):
        return None
    changes = raw.get("changes")
    if not isinstance(changes, dict):
        changes = {}

    coerced: dict[str, Any] = {}
    if "team" in changes:
        coerced["team"] = canonical_team_color(changes["team"])
    if "hasBall" in changes:
        coerced["hasBall"] = _flag(changes["hasBall"])
    for axis in ("x", "y"):
        number = _optional_finite(changes.get(axis))
        if number is not None:
            coerced[axis] = number
    return {"playerId": player_id, "changes": coerced}


def _coerce_action(raw: dict) -> dict | None:
    """Coerce one action; actions with no subject cannot animate and are dropped."""
    subject = raw.get("subject")
    if isinstance(subject, int) and not isinstance(subject, bool):
        subject = str(subject)
    if not isinstance(subject, str) or not subject.strip():
        return None

    raw_type = raw.get("type")
    action_type = DEFAULT_ACTION_TYPE
    if isinstance(raw_type, str):
        action_type = ACTION_TYPE_ALIASES.get(raw_type.strip().lower(), DEFAULT_ACTION_TYPE)

    state_changes = [
        change
        for change in (_coerce_state_change(c) for c in _entries(raw.get("stateChanges")))
        if change is not None
    ]
    action = {
        "type": action_type,
        "subject": subject,
        "from": _point(raw.get("from")),
        "to": _target(raw.get("to")),
        "startAt": _optional_finite(raw.get("startAt")),
        "duration": _optional_finite(raw.get("duration")),
        "easing": _easing(raw.get("easing")),
        "stateChanges": state_changes,
    }
    if action_type == "pass":
        action["transferBall"] = _optional_flag(raw.get("transferBall"))
    return action


def _coerce_step(raw: dict, index: int) -> dict:
    step_id = _identifier(raw.get("id"), f"step{index + 1}")
    actions = []
    for raw_action in _entries(raw.get("actions")):
        action = _coerce_action(raw_action)
        if action is None:
            logger.debug(f"Dropped action without subject in step '{step_id}'")
            continue
        actions.append(action)
    return {
        "id": step_id,
        "duration": _finite(raw.get("duration"), DEFAULT_STEP_DURATION_MS),
        "actions": actions,
        "description": _text(raw.get("description")),
    }


def _coerce_rotation(value: Any) -> dict | None:
    if not isinstance(value, dict):
        return None
    return {
        "type": _choice(RotationType, value.get("type"), RotationType.NONE),
        "description": _text(value.get("description")) or "",
    }


def coerce_drill_fields(raw: dict) -> dict:
    """Repair every soft field of a drill that passed the structural gate.

    Returns a new camelCase dict ready for ``DrillSchema.model_validate``;
    the input is not modified.
    """
    name = raw["name"] if isinstance(raw.get("name"), str) else raw["title"]

    drill_type = _choice(DrillType, raw.get("type"), DrillType.DRILL)
    category = _choice(DrillCategory, raw.get("category"), None)
    if drill_type is DrillType.SET_PIECE and category is None:
        category = DrillCategory.SET_PIECE

    cycles = _finite(raw.get("cycles"), DEFAULT_CYCLES)

    return {
        "id": _identifier(raw.get("id"), _slugify(name)),
        "name": name,
        "description": _text(raw.get("description")) or "",
        "sport": _choice(DrillSport, raw.get("sport"), DrillSport.FOOTBALL, separator="_"),
        "category": category,
        "ageGroup": _text(raw.get("ageGroup")),
        "type": drill_type,
        "setPieceType": _choice(SetPieceType, raw.get("setPieceType"), None),
        "pitch": _coerce_pitch(raw["pitch"]),
        "cones": [_coerce_cone(c, i) for i, c in enumerate(_entries(raw.get("cones")))],
        "goals": [_coerce_goal(g, i) for i, g in enumerate(_entries(raw.get("goals")))],
        "zones": [_coerce_zone(z, i) for i, z in enumerate(_entries(raw.get("zones")))],
        "players": [_coerce_player(p, i) for i, p in enumerate(_entries(raw["players"]))],
        "balls": [_coerce_ball(b, i) for i, b in enumerate(_entries(raw.get("balls")))],
        "sequence": [_coerce_step(s, i) for i, s in enumerate(_entries(raw["sequence"]))],
        "cycles": int(cycles),
        "rotation": _coerce_rotation(raw.get("rotation")),
    }


def normalize_drill_schema(value: Any) -> DrillSchema | None:
    """Turn a parsed JSON value into a DrillSchema, or ``None`` if not a drill.

    Args:
        value: Any value returned by ``json.loads``.

    Returns:
        A validated DrillSchema, or None when the structural gate rejects it.
    """
    raw = check_drill_structure(value)
    if raw is None:
        return None

    fields = coerce_drill_fields(raw)
    try:
        return DrillSchema.model_validate(fields)
    except ValidationError as e:
        logger.warning(f"Coerced drill '{fields['name']}' failed validation: {e}")
        return None
