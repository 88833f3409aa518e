from .drill import (
    DrillSchema,
    DrillSport,
    DrillCategory,
    DrillType,
    SetPieceType,
    Pitch,
    PitchShape,
    Cone,
    ConeColor,
    Goal,
    GoalType,
    Zone,
    Player,
    TeamColor,
    Ball,
    AnimationStep,
    DrillAction,
    Easing,
    Rotation,
    TEAM_COLOR_HEX,
    CONE_COLOR_HEX,
    EASING_FUNCTIONS,
    ease,
)
