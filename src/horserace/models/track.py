"""Track configuration and terrain profiles."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

MIN_LANES = 2
MAX_LANES = 6


class Terrain(str, Enum):
    """Track surface types."""

    NORMAL = "normal"
    MUDDY = "muddy"
    ICY = "icy"


class HazardType(str, Enum):
    """Terrain hazards that can stop a horse for a few ticks."""

    NONE = "none"
    TRIP = "trip"
    SLIP = "slip"


class TerrainProfile(BaseModel):
    """Represents how a surface affects the horses running on it."""

    model_config = ConfigDict(frozen=True)

    terrain: Terrain = Field(..., description="Surface type")
    speed_factor: float = Field(
        default=1.0,
        gt=0.0,
        le=1.0,
        description="Scales the periodic confidence nudge (lower = heavier going)",
    )
    hazard: HazardType = Field(default=HazardType.NONE, description="Hazard this surface produces")
    hazard_probability: float = Field(
        default=0.0,
        ge=0.0,
        le=1.0,
        description="Per-tick probability of the hazard for a standing horse",
    )
    hazard_penalty: float = Field(
        default=0.0,
        ge=0.0,
        le=1.0,
        description="Confidence lost when the hazard strikes",
    )
    frozen_ticks: int = Field(
        default=0,
        ge=0,
        description="Ticks the horse sits out after the hazard",
    )
    hazard_message: str = Field(default="", description="Event text, formatted with the horse name")

    @property
    def has_hazard(self) -> bool:
        return self.hazard != HazardType.NONE and self.hazard_probability > 0


# Pre-configured surfaces
TERRAIN_PROFILES = {
    Terrain.NORMAL: TerrainProfile(terrain=Terrain.NORMAL),
    Terrain.MUDDY: TerrainProfile(
        terrain=Terrain.MUDDY,
        speed_factor=0.5,
        hazard=HazardType.TRIP,
        hazard_probability=0.005,
        hazard_penalty=0.15,
        frozen_ticks=5,
        hazard_message="{name} tripped in the mud!",
    ),
    Terrain.ICY: TerrainProfile(
        terrain=Terrain.ICY,
        speed_factor=0.25,
        hazard=HazardType.SLIP,
        hazard_probability=0.005,
        hazard_penalty=0.2,
        frozen_ticks=5,
        hazard_message="{name} slipped on the ice!",
    ),
}


class RaceConfig(BaseModel):
    """Fixed parameters of a race, validated at construction."""

    model_config = ConfigDict(frozen=True)

    track_length: int = Field(..., gt=0, description="Finish distance in track units")
    lane_count: int = Field(
        ...,
        ge=MIN_LANES,
        le=MAX_LANES,
        description="Number of lanes (2-6)",
    )
    terrain: Terrain = Field(default=Terrain.NORMAL, description="Track surface")

    @property
    def terrain_profile(self) -> TerrainProfile:
        return TERRAIN_PROFILES[self.terrain]
