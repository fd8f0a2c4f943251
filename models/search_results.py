from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field, computed_field

from models.photo import Photo

SearchType = Literal["quality", "play_type", "emotion", "composition", "keyword"]


class SearchMetadata(BaseModel):
    query: str
    result_count: int = Field(ge=0)
    search_type: SearchType
    search_time_ms: float = Field(ge=0.0)
    timestamp: datetime


class SearchAnalytics(BaseModel):
    """Search results plus reporting data.

    `search_type` comes from a coarse classification of the query text and
    may disagree with the pattern that actually selected the results.
    """

    results: list[Photo] = Field(default_factory=list)
    search_type: SearchType
    search_time_ms: float = Field(ge=0.0)
    metadata: SearchMetadata

    @computed_field  # type: ignore[misc]
    @property
    def result_ids(self) -> list[str]:
        return [p.id for p in self.results]
