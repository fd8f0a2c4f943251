"""Filter criteria and named filter presets.

Criteria are sparse: every field is optional, populated fields are ANDed
together, and values inside a list field are ORed. Enumerated values are
kept as plain strings so an unknown value simply never matches.
"""
from pathlib import Path

from pydantic import BaseModel, Field


class FilterCriteria(BaseModel):
    # Quality
    portfolio_worthy: bool | None = None
    min_quality_score: float | None = None
    print_ready: bool | None = None
    social_media_optimized: bool | None = None

    # Composition & emotion
    emotions: list[str] = Field(default_factory=list)
    compositions: list[str] = Field(default_factory=list)
    time_of_day: list[str] = Field(default_factory=list)

    # Volleyball
    play_types: list[str] = Field(default_factory=list)
    action_intensities: list[str] = Field(default_factory=list)

    use_cases: list[str] = Field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        """True when no field would constrain a photo."""
        return not (
            self.portfolio_worthy
            or self.print_ready
            or self.social_media_optimized
            or self.min_quality_score
            or self.emotions
            or self.compositions
            or self.time_of_day
            or self.play_types
            or self.action_intensities
            or self.use_cases
        )


def _default_presets() -> dict[str, FilterCriteria]:
    return {
        "portfolio": FilterCriteria(portfolio_worthy=True, min_quality_score=8.0),
    }


class FilterPresets(BaseModel):
    """Named FilterCriteria, typically loaded from presets.yaml.

    Example file::

        presets:
          portfolio:
            portfolio_worthy: true
            min_quality_score: 8
          golden_hour_attacks:
            time_of_day: [golden-hour]
            play_types: [attack]
    """

    presets: dict[str, FilterCriteria] = Field(default_factory=_default_presets)

    @classmethod
    def load(cls, path: Path) -> "FilterPresets":
        """Load from a YAML file.

        Raises FileNotFoundError if path does not exist.
        """
        import yaml  # lazy, only needed at load time
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
        return cls.model_validate(data)

    @classmethod
    def load_or_default(cls, path: Path) -> "FilterPresets":
        """Load from path if it exists, otherwise return the built-in presets."""
        if path.exists():
            return cls.load(path)
        return cls()

    def get(self, name: str) -> FilterCriteria:
        try:
            return self.presets[name]
        except KeyError:
            raise KeyError(f"unknown filter preset: {name!r}") from None

    @property
    def names(self) -> list[str]:
        return sorted(self.presets)
