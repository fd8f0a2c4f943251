from pydantic import BaseModel, Field

# Used when the view history carries no usable composition scores.
DEFAULT_QUALITY_THRESHOLD = 7.0


class UserPreferences(BaseModel):
    """Preference profile inferred from a user's view history.

    The favourite maps hold how many viewed photos carried each value.
    """

    favorite_emotions: dict[str, int] = Field(default_factory=dict)
    favorite_play_types: dict[str, int] = Field(default_factory=dict)
    favorite_compositions: dict[str, int] = Field(default_factory=dict)
    avg_quality_threshold: float = DEFAULT_QUALITY_THRESHOLD
