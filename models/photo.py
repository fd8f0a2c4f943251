from datetime import datetime, timezone
from typing import Literal

from pydantic import BaseModel, Field, ValidationInfo, field_validator

Emotion = Literal["triumph", "focus", "intensity", "determination", "excitement", "serenity"]
Composition = Literal[
    "rule-of-thirds", "leading-lines", "symmetry", "motion-blur",
    "close-up", "wide-angle", "dramatic-angle",
]
TimeOfDay = Literal["morning", "afternoon", "golden-hour", "evening", "night", "midday"]
PlayType = Literal["attack", "block", "dig", "set", "serve", "pass", "celebration", "timeout"]
ActionIntensity = Literal["low", "medium", "high", "peak"]
UseCase = Literal["social-media", "website-hero", "athlete-portfolio", "print", "editorial"]

# Stands in for an absent play type when testing set membership, so that
# a filter listing "" selects photos without a play type.
NO_PLAY_TYPE = ""


def as_utc(v: datetime | None) -> datetime | None:
    # Runs after parsing, so both ISO strings and datetime objects land here.
    if isinstance(v, datetime) and v.tzinfo is None:
        return v.replace(tzinfo=timezone.utc)
    return v


class PhotoMetadata(BaseModel):
    """AI-derived enrichment attached to a photo by the ingestion pipeline.

    Quality scores are nominally 0-10 but are not range-checked: upstream
    enrichment is trusted, and out-of-range values only skew scoring.
    A missing score reads as 0 everywhere it is used.
    """

    sharpness: float | None = None
    exposure_accuracy: float | None = None
    composition_score: float | None = None
    emotional_impact: float | None = None

    portfolio_worthy: bool = False
    print_ready: bool = False
    social_media_optimized: bool = False

    emotion: Emotion | None = None
    composition: Composition | None = None
    time_of_day: TimeOfDay | None = None
    play_type: PlayType | None = None
    action_intensity: ActionIntensity | None = None

    use_cases: list[UseCase] = Field(default_factory=list)

    ai_provider: str = ""
    ai_cost: float = 0.0
    enriched_at: datetime | None = None

    # Catalog rows come from nullable columns; null means "not set".
    @field_validator(
        "portfolio_worthy",
        "print_ready",
        "social_media_optimized",
        "use_cases",
        "ai_provider",
        "ai_cost",
        mode="before",
    )
    @classmethod
    def none_as_default(cls, v: object, info: ValidationInfo) -> object:
        if v is None:
            return cls.model_fields[info.field_name].get_default(call_default_factory=True)
        return v

    @field_validator("enriched_at", mode="after")
    @classmethod
    def ensure_utc(cls, v: datetime | None) -> datetime | None:
        return as_utc(v)

    @property
    def average_quality_score(self) -> float:
        """Mean of the four quality scores. Always divides by 4."""
        return (
            (self.sharpness or 0)
            + (self.exposure_accuracy or 0)
            + (self.composition_score or 0)
            + (self.emotional_impact or 0)
        ) / 4

    @property
    def play_type_key(self) -> str:
        return self.play_type or NO_PLAY_TYPE


class Photo(BaseModel):
    """A single gallery image as handed over by the photo source.

    `metadata` is None for photos the enrichment pipeline has not processed
    yet. Such photos are excluded by every metadata filter, never treated as
    zero-valued.

    All datetimes are stored as UTC-aware. Naive datetimes are treated as UTC.
    """

    id: str
    image_key: str
    image_url: str
    title: str = ""
    caption: str = ""
    keywords: list[str] = Field(default_factory=list)
    created_at: datetime
    metadata: PhotoMetadata | None = None

    @field_validator("created_at", mode="after")
    @classmethod
    def ensure_utc(cls, v: datetime) -> datetime:
        return as_utc(v)

    @field_validator("title", "caption", mode="before")
    @classmethod
    def none_as_empty(cls, v: str | None) -> str:
        return v or ""

    @property
    def is_enriched(self) -> bool:
        return self.metadata is not None


class PhotoCatalog(BaseModel):
    photos: list[Photo] = Field(default_factory=list)

    def by_id(self, photo_id: str) -> Photo | None:
        return next((p for p in self.photos if p.id == photo_id), None)

    def by_ids(self, photo_ids: list[str]) -> list[Photo]:
        """Resolve ids in the given order, silently skipping unknown ones."""
        index = {p.id: p for p in self.photos}
        return [index[pid] for pid in photo_ids if pid in index]
