"""Tunable simulation constants."""

from pydantic import BaseModel, ConfigDict, Field


class SimulationSettings(BaseModel):
    """Probability and confidence constants used by the tick rule.

    The defaults reproduce the console race. The graphical variants ran with
    smaller fall coefficients (0.02, 0.01, 0.001) and a per-step confidence
    boost, so every constant is exposed rather than hard-coded.
    """

    model_config = ConfigDict(frozen=True)

    fall_coefficient: float = Field(
        default=0.1,
        ge=0.0,
        le=1.0,
        description="Fall probability per tick is fall_coefficient * confidence**2",
    )
    fall_confidence_penalty: float = Field(
        default=0.1,
        ge=0.0,
        le=1.0,
        description="Confidence lost when a horse falls",
    )
    advance_confidence_boost: float = Field(
        default=0.0,
        ge=0.0,
        le=1.0,
        description="Confidence gained on every successful step",
    )
    confidence_nudge: float = Field(
        default=0.0,
        ge=0.0,
        le=1.0,
        description="Confidence gained every nudge_interval units, scaled by terrain",
    )
    nudge_interval: int = Field(
        default=10,
        gt=0,
        description="Distance between confidence nudges",
    )
    hazard_confidence_floor: float = Field(
        default=0.01,
        ge=0.0,
        le=1.0,
        description="Terrain hazards never push confidence below this",
    )
    terrain_hazards: bool = Field(default=True, description="Enable slip/trip events")
    max_ticks: int | None = Field(
        default=None,
        gt=0,
        description="Stop the race after this many ticks (None = unbounded)",
    )
