"""Horse model with confidence-driven race state."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


def clamp_confidence(value: float) -> float:
    """Clamp a confidence value into [0, 1]."""
    return min(1.0, max(0.0, float(value)))


class Horse(BaseModel):
    """Represents a horse in a race lane."""

    model_config = ConfigDict(validate_assignment=True)

    name: str = Field(..., min_length=1, description="Horse name")
    symbol: str = Field(
        default="",
        max_length=1,
        description="Display glyph (defaults to the upper-cased first letter of name)",
    )

    # Advance probability per tick, also scales fall probability (squared)
    confidence: float = Field(
        default=0.5,
        description="Confidence level, clamped to 0.0-1.0",
    )

    # Race state (mutable during simulation)
    distance_travelled: int = Field(default=0, ge=0, description="Units travelled this attempt")
    fallen: bool = Field(default=False, description="Fell during this attempt")

    @field_validator("confidence", mode="before")
    @classmethod
    def _clamp(cls, value: Any) -> float:
        return clamp_confidence(value)

    @model_validator(mode="after")
    def _default_symbol(self) -> "Horse":
        if not self.symbol:
            # Bypass validate_assignment to avoid re-entering this validator
            self.__dict__["symbol"] = self.name[0].upper()
        return self

    def move_forward(self) -> None:
        """Advance one unit along the track."""
        self.distance_travelled += 1

    def fall(self, penalty: float = 0.1) -> None:
        """Mark the horse as fallen and knock its confidence down."""
        self.fallen = True
        self.decrease_confidence(penalty)

    def increase_confidence(self, amount: float) -> None:
        self.confidence = self.confidence + amount

    def decrease_confidence(self, amount: float) -> None:
        self.confidence = self.confidence - amount

    def go_back_to_start(self) -> None:
        """Return to the starting line. Confidence carries over."""
        self.distance_travelled = 0
        self.fallen = False
