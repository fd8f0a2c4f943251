"""Filter Evaluator: narrow a photo collection by declarative criteria.

Every photo passes through the same fixed sequence of checks and is dropped
on the first failing one:

  1. unenriched photos (no metadata) are always excluded
  2. requested quality flags (portfolio / print / social)
  3. minimum average quality score
  4. emotion, composition, time of day, play type, action intensity
  5. use cases (any requested tag is enough)

Categories are ANDed; values within one category are ORed.
"""
import logging
from collections.abc import Iterable

from models.filters import FilterCriteria
from models.photo import Photo

logger = logging.getLogger(__name__)


def filter_photos(photos: Iterable[Photo], criteria: FilterCriteria) -> list[Photo]:
    """Return the photos matching `criteria`, in input order."""
    photos = list(photos)
    matched = [p for p in photos if matches_criteria(p, criteria)]
    logger.debug("Filter kept %d of %d photos", len(matched), len(photos))
    return matched


def matches_criteria(photo: Photo, criteria: FilterCriteria) -> bool:
    meta = photo.metadata
    if meta is None:
        return False

    # Flags only constrain when explicitly requested as True
    if criteria.portfolio_worthy and not meta.portfolio_worthy:
        return False
    if criteria.print_ready and not meta.print_ready:
        return False
    if criteria.social_media_optimized and not meta.social_media_optimized:
        return False

    if criteria.min_quality_score and meta.average_quality_score < criteria.min_quality_score:
        return False

    if criteria.emotions and meta.emotion not in criteria.emotions:
        return False
    if criteria.compositions and meta.composition not in criteria.compositions:
        return False
    if criteria.time_of_day and meta.time_of_day not in criteria.time_of_day:
        return False
    if criteria.play_types and meta.play_type_key not in criteria.play_types:
        return False
    if criteria.action_intensities and meta.action_intensity not in criteria.action_intensities:
        return False

    if criteria.use_cases and not any(uc in meta.use_cases for uc in criteria.use_cases):
        return False

    return True


def average_quality_score(photo: Photo) -> float | None:
    """Average of the four quality scores, or None for unenriched photos."""
    if photo.metadata is None:
        return None
    return photo.metadata.average_quality_score
