"""Recommendation Scorer: similar photos, personalised picks, trending lists.

All functions are pure: they read the given photos, never modify them, and
return freshly built lists. Sorting is always stable, so photos with equal
scores keep their input order.

Similarity weights (max 105):

  emotion match          +30
  play type match        +25
  composition match      +15
  action intensity match +15
  time of day match      +10
  composition closeness  +max(0, 10 - |Δ composition_score|)

A value absent on both photos counts as a match, as two equal values do.
"""
import functools
import logging
from collections import Counter
from collections.abc import Iterable

from models.photo import Photo
from models.preferences import DEFAULT_QUALITY_THRESHOLD, UserPreferences

logger = logging.getLogger(__name__)

_EMOTION_WEIGHT = 30
_PLAY_TYPE_WEIGHT = 25
_COMPOSITION_WEIGHT = 15
_INTENSITY_WEIGHT = 15
_TIME_OF_DAY_WEIGHT = 10
_CLOSENESS_MAX = 10

_PREF_EMOTION_WEIGHT = 20
_PREF_PLAY_TYPE_WEIGHT = 15
_PREF_COMPOSITION_WEIGHT = 10
_PREF_QUALITY_BONUS = 25
_PREF_PORTFOLIO_BONUS = 20

# Trending photos whose combined score differs by less than this are
# ordered by recency instead.
_TRENDING_TIE_WINDOW = 1.0


# ---------------------------------------------------------------------------
# Similarity
# ---------------------------------------------------------------------------

def calculate_similarity_score(a: Photo, b: Photo) -> float:
    if a.metadata is None or b.metadata is None:
        return 0

    ma, mb = a.metadata, b.metadata
    score: float = 0
    if ma.emotion == mb.emotion:
        score += _EMOTION_WEIGHT
    if ma.play_type == mb.play_type:
        score += _PLAY_TYPE_WEIGHT
    if ma.composition == mb.composition:
        score += _COMPOSITION_WEIGHT
    if ma.action_intensity == mb.action_intensity:
        score += _INTENSITY_WEIGHT
    if ma.time_of_day == mb.time_of_day:
        score += _TIME_OF_DAY_WEIGHT

    quality_diff = abs((ma.composition_score or 0) - (mb.composition_score or 0))
    score += max(0, _CLOSENESS_MAX - quality_diff)
    return score


def find_similar_photos(target: Photo, photos: Iterable[Photo], limit: int = 6) -> list[Photo]:
    """Photos most similar to `target`, excluding any photo with its id."""
    candidates = [p for p in photos if p.id != target.id]
    ranked = sorted(
        candidates,
        key=lambda p: calculate_similarity_score(target, p),
        reverse=True,
    )
    return ranked[:limit]


# ---------------------------------------------------------------------------
# Personalised recommendations
# ---------------------------------------------------------------------------

def analyze_preferences(view_history: Iterable[Photo]) -> UserPreferences:
    """Build a preference profile from previously viewed photos.

    Unenriched photos and absent play types are skipped. The quality
    threshold is the mean of the non-zero composition scores seen, or
    DEFAULT_QUALITY_THRESHOLD when there are none.
    """
    emotions: Counter[str] = Counter()
    play_types: Counter[str] = Counter()
    compositions: Counter[str] = Counter()
    quality_scores: list[float] = []

    for photo in view_history:
        meta = photo.metadata
        if meta is None:
            continue
        if meta.emotion:
            emotions[meta.emotion] += 1
        if meta.play_type:
            play_types[meta.play_type] += 1
        if meta.composition:
            compositions[meta.composition] += 1
        if meta.composition_score:
            quality_scores.append(meta.composition_score)

    threshold = (
        sum(quality_scores) / len(quality_scores) if quality_scores else DEFAULT_QUALITY_THRESHOLD
    )
    return UserPreferences(
        favorite_emotions=dict(emotions),
        favorite_play_types=dict(play_types),
        favorite_compositions=dict(compositions),
        avg_quality_threshold=threshold,
    )


def calculate_preference_match(photo: Photo, prefs: UserPreferences) -> float:
    meta = photo.metadata
    if meta is None:
        return 0

    score: float = 0
    if meta.emotion:
        score += prefs.favorite_emotions.get(meta.emotion, 0) * _PREF_EMOTION_WEIGHT
    if meta.play_type:
        score += prefs.favorite_play_types.get(meta.play_type, 0) * _PREF_PLAY_TYPE_WEIGHT
    if meta.composition:
        score += prefs.favorite_compositions.get(meta.composition, 0) * _PREF_COMPOSITION_WEIGHT

    if (meta.composition_score or 0) >= prefs.avg_quality_threshold:
        score += _PREF_QUALITY_BONUS
    if meta.portfolio_worthy:
        score += _PREF_PORTFOLIO_BONUS
    return score


def get_recommendations(
    view_history: Iterable[Photo],
    photos: Iterable[Photo],
    limit: int = 10,
) -> list[Photo]:
    """Portfolio-worthy photos not yet viewed, ranked by preference match."""
    view_history = list(view_history)
    prefs = analyze_preferences(view_history)
    logger.debug(
        "Preferences: emotions=%s play_types=%s compositions=%s threshold=%.2f",
        prefs.favorite_emotions,
        prefs.favorite_play_types,
        prefs.favorite_compositions,
        prefs.avg_quality_threshold,
    )

    seen = {p.id for p in view_history}
    candidates = [
        p for p in photos
        if p.id not in seen and p.metadata is not None and p.metadata.portfolio_worthy
    ]
    ranked = sorted(
        candidates,
        key=lambda p: calculate_preference_match(p, prefs),
        reverse=True,
    )
    return ranked[:limit]


# ---------------------------------------------------------------------------
# Curated lists
# ---------------------------------------------------------------------------

def get_trending_photos(photos: Iterable[Photo], limit: int = 12) -> list[Photo]:
    """Portfolio-worthy photos by impact + composition, near-ties by recency.

    The comparator is applied pairwise and is not transitive: A may precede
    B, B precede C, yet C precede A. Output therefore depends on the order
    in which the stable sort compares elements.
    """
    candidates = [p for p in photos if p.metadata is not None and p.metadata.portfolio_worthy]
    ranked = sorted(candidates, key=functools.cmp_to_key(_trending_order))
    return ranked[:limit]


def get_photos_by_emotion(photos: Iterable[Photo], emotion: str, limit: int = 8) -> list[Photo]:
    matching = [
        p for p in photos
        if p.metadata is not None and p.metadata.emotion == emotion and p.metadata.portfolio_worthy
    ]
    ranked = sorted(matching, key=lambda p: p.metadata.emotional_impact or 0, reverse=True)
    return ranked[:limit]


def get_photos_by_play_type(photos: Iterable[Photo], play_type: str, limit: int = 8) -> list[Photo]:
    matching = [
        p for p in photos
        if p.metadata is not None and p.metadata.play_type == play_type and p.metadata.portfolio_worthy
    ]
    ranked = sorted(matching, key=lambda p: p.metadata.composition_score or 0, reverse=True)
    return ranked[:limit]


def _combined_impact(photo: Photo) -> float:
    meta = photo.metadata
    return (meta.emotional_impact or 0) + (meta.composition_score or 0)


def _trending_order(a: Photo, b: Photo) -> float:
    a_score = _combined_impact(a)
    b_score = _combined_impact(b)
    if abs(a_score - b_score) < _TRENDING_TIE_WINDOW:
        return (b.created_at - a.created_at).total_seconds()
    return b_score - a_score
