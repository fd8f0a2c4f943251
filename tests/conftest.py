from datetime import datetime, timezone
from pathlib import Path

import pytest

from models.photo import Photo, PhotoCatalog, PhotoMetadata
from settings import Settings

FIXTURES_DIR = Path(__file__).parent / "fixtures"
SAMPLE_CATALOG_DIR = FIXTURES_DIR / "sample_catalog"


def make_meta(**overrides) -> PhotoMetadata:
    """Enriched metadata with neutral defaults; override what the test cares about."""
    defaults = dict(
        sharpness=7.0,
        exposure_accuracy=7.0,
        composition_score=7.0,
        emotional_impact=7.0,
        portfolio_worthy=False,
        print_ready=False,
        social_media_optimized=False,
        emotion="focus",
        composition="close-up",
        time_of_day="afternoon",
        play_type="pass",
        action_intensity="medium",
        use_cases=[],
        ai_provider="gemini",
        ai_cost=0.001,
    )
    return PhotoMetadata(**{**defaults, **overrides})


def make_photo(
    photo_id: str = "photo_001",
    metadata: PhotoMetadata | None = None,
    created_at: datetime | None = None,
    **fields,
) -> Photo:
    return Photo(
        id=photo_id,
        image_key=fields.pop("image_key", f"key_{photo_id}"),
        image_url=fields.pop("image_url", f"https://photos.example.com/{photo_id}.jpg"),
        created_at=created_at or datetime(2025, 10, 4, 12, 0, tzinfo=timezone.utc),
        metadata=metadata,
        **fields,
    )


@pytest.fixture
def sample_catalog_dir() -> Path:
    """Directory holding photos.json and presets.yaml used by CLI tests."""
    return SAMPLE_CATALOG_DIR


@pytest.fixture
def sample_catalog(sample_catalog_dir: Path) -> PhotoCatalog:
    return PhotoCatalog.model_validate_json(
        (sample_catalog_dir / "photos.json").read_text(encoding="utf-8")
    )


@pytest.fixture
def settings(sample_catalog_dir: Path) -> Settings:
    """Settings pointing at the sample catalog."""
    return Settings(data_dir=sample_catalog_dir)


@pytest.fixture
def end_to_end_photos() -> list[Photo]:
    """P1 enriched and portfolio-worthy, P2 enriched but not, P3 unenriched."""
    p1 = make_photo("P1", make_meta(emotion="triumph", portfolio_worthy=True, composition_score=9.0))
    p2 = make_photo("P2", make_meta(emotion="focus", portfolio_worthy=False, composition_score=6.0))
    p3 = make_photo("P3", None)
    return [p1, p2, p3]
