"""Pydantic models for animated drill diagrams embedded in coach chat replies."""

from enum import Enum
from typing import Annotated, Callable, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


# --- Enums ---


class DrillSport(str, Enum):
    """Sports a drill diagram can be drawn for."""

    FOOTBALL = "football"
    BASKETBALL = "basketball"
    RUGBY = "rugby"
    HOCKEY = "hockey"
    AMERICAN_FOOTBALL = "american_football"
    TENNIS = "tennis"
    VOLLEYBALL = "volleyball"
    CRICKET = "cricket"


class DrillCategory(str, Enum):
    TECHNICAL = "technical"
    TACTICAL = "tactical"
    PHYSICAL = "physical"
    PSYCHOLOGICAL = "psychological"
    SMALL_SIDED_GAME = "small-sided-game"
    SET_PIECE = "set-piece"


class DrillType(str, Enum):
    DRILL = "drill"
    SET_PIECE = "set-piece"


class SetPieceType(str, Enum):
    """Set-piece vocabulary spanning every supported sport."""

    # Football
    CORNER = "corner"
    FREE_KICK = "free-kick"
    THROW_IN = "throw-in"
    GOAL_KICK = "goal-kick"
    PENALTY = "penalty"
    # Basketball
    TIP_OFF = "tip-off"
    INBOUND = "inbound"
    FREE_THROW = "free-throw"
    # Rugby
    SCRUM = "scrum"
    LINEOUT = "lineout"
    PENALTY_KICK = "penalty-kick"
    CONVERSION = "conversion"
    DROP_GOAL = "drop-goal"
    # Hockey
    PENALTY_CORNER = "penalty-corner"
    FREE_HIT = "free-hit"
    PENALTY_STROKE = "penalty-stroke"
    # American football
    KICKOFF = "kickoff"
    FIELD_GOAL = "field-goal"
    EXTRA_POINT = "extra-point"
    PUNT = "punt"
    # Tennis
    SERVE = "serve"
    RETURN = "return"
    # Volleyball
    SERVE_RECEIVE = "serve-receive"
    ROTATION = "rotation"
    # Cricket
    POWERPLAY = "powerplay"
    DEATH_OVERS = "death-overs"


class PitchShape(str, Enum):
    SQUARE = "square"
    RECTANGLE = "rectangle"
    CIRCLE = "circle"
    HALF_PITCH = "half-pitch"
    FULL_PITCH = "full-pitch"


class TeamColor(str, Enum):
    """Bib colors a player marker can be drawn in."""

    BLACK = "black"
    BLUE = "blue"
    RED = "red"
    YELLOW = "yellow"
    WHITE = "white"
    GREEN = "green"


class ConeColor(str, Enum):
    GREEN = "green"
    YELLOW = "yellow"
    ORANGE = "orange"
    RED = "red"
    BLUE = "blue"
    WHITE = "white"


class GoalType(str, Enum):
    MINI = "mini"
    FULL = "full"
    POPUP = "popup"


class Easing(str, Enum):
    LINEAR = "linear"
    EASE_IN = "easeIn"
    EASE_OUT = "easeOut"
    EASE_IN_OUT = "easeInOut"


class RotationType(str, Enum):
    CLOCKWISE = "clockwise"
    ANTICLOCKWISE = "anticlockwise"
    NONE = "none"


# --- Renderer lookup tables ---

TEAM_COLOR_HEX: dict[TeamColor, str] = {
    TeamColor.BLACK: "#1f2937",
    TeamColor.BLUE: "#3b82f6",
    TeamColor.RED: "#ef4444",
    TeamColor.YELLOW: "#eab308",
    TeamColor.WHITE: "#ffffff",
    TeamColor.GREEN: "#22c55e",
}

CONE_COLOR_HEX: dict[ConeColor, str] = {
    ConeColor.GREEN: "#22c55e",
    ConeColor.YELLOW: "#eab308",
    ConeColor.ORANGE: "#f97316",
    ConeColor.RED: "#ef4444",
    ConeColor.BLUE: "#3b82f6",
    ConeColor.WHITE: "#ffffff",
}

EASING_FUNCTIONS: dict[Easing, Callable[[float], float]] = {
    Easing.LINEAR: lambda t: t,
    Easing.EASE_IN: lambda t: t * t,
    Easing.EASE_OUT: lambda t: t * (2 - t),
    Easing.EASE_IN_OUT: lambda t: 2 * t * t if t < 0.5 else -1 + (4 - 2 * t) * t,
}


def ease(easing: Optional[Easing], t: float) -> float:
    """Apply an easing curve to progress ``t`` (0-1).

    Actions without an explicit easing animate with ``easeInOut``.
    """
    t = min(max(t, 0.0), 1.0)
    return EASING_FUNCTIONS[easing or Easing.EASE_IN_OUT](t)


# --- Models ---


class DrillModel(BaseModel):
    """Base model: camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )


class Point(DrillModel):
    x: float = Field(..., description="X coordinate (0-100, percentage of pitch)")
    y: float = Field(..., description="Y coordinate (0-100, percentage of pitch)")


class Pitch(DrillModel):
    """Playing area shape and real-world size."""

    shape: PitchShape = Field(PitchShape.RECTANGLE, description="Area outline")
    width: float = Field(30, description="Width in metres (display only)")
    height: float = Field(20, description="Height in metres (display only)")


class Cone(DrillModel):
    id: str
    x: float
    y: float
    color: ConeColor = ConeColor.YELLOW
    label: Optional[str] = None


class Goal(DrillModel):
    id: str
    x: float
    y: float
    width: float = Field(12, description="Goal width as percentage of pitch")
    rotation: float = Field(0, description="Degrees, 0 = facing down")
    type: GoalType = GoalType.MINI


class Zone(DrillModel):
    id: str
    x: float
    y: float
    width: float
    height: float
    color: str = Field("white", description="Hex or named color")
    opacity: float = Field(0.3, description="Fill opacity (0-1)")
    label: Optional[str] = None


class Player(DrillModel):
    """A player marker at its starting position."""

    id: str
    x: float
    y: float
    team: TeamColor
    has_ball: bool = False
    label: Optional[str] = None
    role: Optional[str] = None


class Ball(DrillModel):
    id: str
    x: float
    y: float
    held_by: Optional[str] = Field(None, description="Id of the player holding it")


class PlayerChanges(DrillModel):
    team: Optional[TeamColor] = None
    has_ball: Optional[bool] = None
    x: Optional[float] = None
    y: Optional[float] = None


class StateChange(DrillModel):
    player_id: str
    changes: PlayerChanges = Field(default_factory=PlayerChanges)


class _ActionBase(DrillModel):
    subject: str = Field(..., description="Player id or ball id that moves")
    from_: Optional[Point] = Field(None, alias="from")
    to: Optional[Union[Point, str]] = Field(
        None, description="Coordinates, or a player/position id"
    )
    start_at: Optional[float] = Field(None, description="ms from start of step")
    duration: Optional[float] = Field(
        None, description="ms; fills the remaining step time when unset"
    )
    easing: Optional[Easing] = None
    state_changes: list[StateChange] = Field(default_factory=list)


class RunAction(_ActionBase):
    type: Literal["run"] = "run"


class DribbleAction(_ActionBase):
    type: Literal["dribble"] = "dribble"


class PassAction(_ActionBase):
    type: Literal["pass"] = "pass"
    transfer_ball: Optional[bool] = Field(
        None, description="Receiver ends up with the ball"
    )


class ShootAction(_ActionBase):
    type: Literal["shoot"] = "shoot"


class MoveAction(_ActionBase):
    type: Literal["move"] = "move"


class WaitAction(_ActionBase):
    type: Literal["wait"] = "wait"


DrillAction = Annotated[
    Union[RunAction, DribbleAction, PassAction, ShootAction, MoveAction, WaitAction],
    Field(discriminator="type"),
]


class AnimationStep(DrillModel):
    """A timed unit of the animation; its actions play in parallel."""

    id: str
    duration: float = Field(1500, description="Step length in ms")
    actions: list[DrillAction] = Field(default_factory=list)
    description: Optional[str] = None


class Rotation(DrillModel):
    type: RotationType = RotationType.NONE
    description: str = ""


class DrillSchema(DrillModel):
    """Canonical, renderer-ready description of one animated drill."""

    id: str
    name: str
    description: str = ""
    sport: DrillSport = DrillSport.FOOTBALL
    category: Optional[DrillCategory] = None
    age_group: Optional[str] = None
    type: DrillType = DrillType.DRILL
    set_piece_type: Optional[SetPieceType] = None

    pitch: Pitch = Field(default_factory=Pitch)
    cones: list[Cone] = Field(default_factory=list)
    goals: list[Goal] = Field(default_factory=list)
    zones: list[Zone] = Field(default_factory=list)

    players: list[Player] = Field(..., min_length=1)
    balls: list[Ball] = Field(default_factory=list)
    sequence: list[AnimationStep] = Field(..., min_length=1)

    cycles: int = Field(2, description="Times the sequence loops")
    rotation: Optional[Rotation] = None

    @property
    def step_count(self) -> int:
        return len(self.sequence)

    @property
    def cycle_duration_ms(self) -> float:
        """Length of one pass through the sequence."""
        return sum(step.duration for step in self.sequence)

    @property
    def total_duration_ms(self) -> float:
        return self.cycle_duration_ms * max(self.cycles, 0)
