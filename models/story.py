from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field, field_validator

from models.photo import Photo, as_utc

StoryType = Literal[
    "game-winning-rally",
    "player-highlight",
    "season-journey",
    "comeback-story",
    "technical-excellence",
    "emotion-spectrum",
]


class EmotionPoint(BaseModel):
    timestamp: datetime
    emotion: str
    intensity: float


class ArcMetadata(BaseModel):
    avg_quality: float
    peak_moments: int = Field(ge=0)
    duration: str  # e.g. "1 min video"


class NarrativeArc(BaseModel):
    """A curated, ordered photo sequence telling one kind of story."""

    type: StoryType
    photos: list[Photo] = Field(default_factory=list)
    title: str
    description: str
    emotional_curve: list[EmotionPoint] = Field(default_factory=list)
    metadata: ArcMetadata


class StoryContext(BaseModel):
    """Everything a story detector may need besides the photos.

    Game stories read the team and game window, player and season stories
    read the id/name pairs. Unused fields are ignored.
    """

    team_name: str = ""
    opponent_name: str = ""
    game_id: str | None = None
    start_time: datetime | None = None
    end_time: datetime | None = None
    final_score: str | None = None
    event_name: str = ""
    player_id: str | None = None
    player_name: str = ""
    season_id: str | None = None
    season_name: str = ""

    @field_validator("start_time", "end_time", mode="after")
    @classmethod
    def ensure_utc(cls, v: datetime | None) -> datetime | None:
        return as_utc(v)
