"""Story curation: detect narrative arcs in a photo collection.

Each detector picks and orders photos for one kind of story and returns a
NarrativeArc, or None when the collection cannot support that story (too
few qualifying photos). Detectors never modify their input.

  game-winning-rally    peak-intensity triumph/intensity shots, final 5 min
  player-highlight      best portfolio shots by weighted quality
  season-journey        strongest shot from each run of weekly activity
  comeback-story        determination → intensity → triumph sequence
  technical-excellence  sharpness and composition both ≥ 9
  emotion-spectrum      best shot per emotion, at least four emotions

Estimated video duration assumes a fixed number of seconds per photo.
"""
import logging
import math
from collections.abc import Callable, Iterable
from datetime import timedelta

from models.photo import Photo, PhotoMetadata
from models.story import ArcMetadata, EmotionPoint, NarrativeArc, StoryContext, StoryType

logger = logging.getLogger(__name__)

_INTENSITY_SCORES = {"low": 2.5, "medium": 5.0, "high": 7.5, "peak": 10.0}

_RALLY_WINDOW = timedelta(minutes=5)
_RALLY_MIN_PHOTOS = 3
_COMEBACK_MIN_PHOTOS = 5
_COMEBACK_PATTERN = ("determination", "intensity", "triumph")
_EXCELLENCE_MIN_SCORE = 9
_EXCELLENCE_MIN_PHOTOS = 8
_EXCELLENCE_MAX_PHOTOS = 12
_SPECTRUM_MIN_EMOTIONS = 4
_SEASON_GAP = timedelta(weeks=1)


def detect_game_winning_rally(photos: Iterable[Photo], context: StoryContext) -> NarrativeArc | None:
    if context.end_time is None:
        logger.debug("Game-winning rally skipped: no game end time")
        return None

    window_start = context.end_time - _RALLY_WINDOW
    rally = [
        p for p in photos
        if window_start <= p.created_at <= context.end_time
        and p.metadata is not None
        and p.metadata.action_intensity == "peak"
        and p.metadata.emotion in ("triumph", "intensity")
    ]
    sequence = _chronological(rally)

    if len(sequence) < _RALLY_MIN_PHOTOS:
        logger.debug("Game-winning rally skipped: %d qualifying photos", len(sequence))
        return None

    score_note = f" ({context.final_score})" if context.final_score else ""
    return _build_arc(
        "game-winning-rally",
        sequence,
        title=f"{context.team_name} Game-Winning Rally",
        description=f"The final {len(sequence)} moments that secured victory{score_note}",
        seconds_per_photo=3,
    )


def detect_player_highlight_reel(
    photos: Iterable[Photo],
    player_id: str | None,
    player_name: str,
    limit: int = 10,
) -> NarrativeArc:
    # Photos are not tagged with athletes yet, so every portfolio shot is a candidate.
    logger.debug("Building highlight reel for player %s", player_id)
    candidates = [p for p in photos if p.metadata is not None and p.metadata.portfolio_worthy]
    highlights = sorted(candidates, key=_highlight_score, reverse=True)[:limit]

    return _build_arc(
        "player-highlight",
        highlights,
        title=f"{player_name}: Top {limit} Highlights",
        description=f"Portfolio-quality moments showcasing {player_name}'s best performances",
        seconds_per_photo=4,
    )


def detect_season_journey(
    photos: Iterable[Photo],
    season_id: str | None,
    season_name: str,
) -> NarrativeArc:
    logger.debug("Building season journey for season %s", season_id)
    key_moments = _chronological(
        _first_max(group, _emotional_impact) for group in _group_by_gap(photos, _SEASON_GAP)
    )

    return _build_arc(
        "season-journey",
        key_moments,
        title=f"{season_name}: The Journey",
        description=f"{len(key_moments)} pivotal moments that defined the season",
        seconds_per_photo=4,
    )


def detect_comeback_story(photos: Iterable[Photo], context: StoryContext) -> NarrativeArc | None:
    pattern = _match_emotional_pattern(_chronological(photos), _COMEBACK_PATTERN)

    if len(pattern) < _COMEBACK_MIN_PHOTOS:
        logger.debug("Comeback story skipped: %d photos follow the pattern", len(pattern))
        return None

    return _build_arc(
        "comeback-story",
        pattern,
        title=f"{context.team_name}: The Comeback",
        description=f"From adversity to victory in {len(pattern)} defining moments",
        seconds_per_photo=3.5,
    )


def detect_technical_excellence(photos: Iterable[Photo], context: StoryContext) -> NarrativeArc | None:
    excellent = [
        p for p in photos
        if p.metadata is not None
        and (p.metadata.sharpness or 0) >= _EXCELLENCE_MIN_SCORE
        and (p.metadata.composition_score or 0) >= _EXCELLENCE_MIN_SCORE
        and p.metadata.portfolio_worthy
    ]

    if len(excellent) < _EXCELLENCE_MIN_PHOTOS:
        logger.debug("Technical excellence skipped: %d qualifying photos", len(excellent))
        return None

    best = sorted(excellent, key=_average_quality, reverse=True)[:_EXCELLENCE_MAX_PHOTOS]
    return _build_arc(
        "technical-excellence",
        best,
        title=f"{context.team_name}: Technical Excellence",
        description=f"{len(best)} portfolio-quality shots from {context.event_name}",
        seconds_per_photo=4,
    )


def detect_emotion_spectrum(photos: Iterable[Photo], context: StoryContext) -> NarrativeArc | None:
    by_emotion: dict[str, list[Photo]] = {}
    for photo in photos:
        emotion = _emotion_label(photo)
        by_emotion.setdefault(emotion, []).append(photo)

    if len(by_emotion) < _SPECTRUM_MIN_EMOTIONS:
        logger.debug("Emotion spectrum skipped: only %d emotions", len(by_emotion))
        return None

    spectrum = _chronological(_first_max(group, _average_quality) for group in by_emotion.values())
    return _build_arc(
        "emotion-spectrum",
        spectrum,
        title=f"{context.team_name}: Full Spectrum",
        description=f"The emotional journey of the game in {len(spectrum)} moments",
        seconds_per_photo=3,
    )


def generate_story(
    story_type: StoryType,
    photos: Iterable[Photo],
    context: StoryContext,
    highlight_limit: int = 10,
) -> NarrativeArc | None:
    """Dispatch to the detector for `story_type`.

    Returns None when the photos cannot support the story.
    Raises ValueError for an unknown story type.
    """
    photos = list(photos)
    if story_type == "game-winning-rally":
        return detect_game_winning_rally(photos, context)
    if story_type == "player-highlight":
        return detect_player_highlight_reel(
            photos, context.player_id, context.player_name, limit=highlight_limit
        )
    if story_type == "season-journey":
        return detect_season_journey(photos, context.season_id, context.season_name)
    if story_type == "comeback-story":
        return detect_comeback_story(photos, context)
    if story_type == "technical-excellence":
        return detect_technical_excellence(photos, context)
    if story_type == "emotion-spectrum":
        return detect_emotion_spectrum(photos, context)
    raise ValueError(f"Invalid story type: {story_type}")


# ---------------------------------------------------------------------------
# Scoring helpers
# ---------------------------------------------------------------------------

def intensity_score(metadata: PhotoMetadata | None) -> float:
    if metadata is None:
        return 0.0
    return _INTENSITY_SCORES.get(metadata.action_intensity, 0.0)


def _emotion_label(photo: Photo) -> str:
    if photo.metadata is None or photo.metadata.emotion is None:
        return "unknown"
    return photo.metadata.emotion


def _average_quality(photo: Photo) -> float:
    return photo.metadata.average_quality_score if photo.metadata is not None else 0.0


def _emotional_impact(photo: Photo) -> float:
    return (photo.metadata.emotional_impact or 0) if photo.metadata is not None else 0.0


def _highlight_score(photo: Photo) -> float:
    meta = photo.metadata
    return (
        (meta.emotional_impact or 0) * 2
        + (meta.composition_score or 0) * 1.5
        + (meta.sharpness or 0)
    )


def _round_half_up(value: float, digits: int = 0) -> float:
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor


# ---------------------------------------------------------------------------
# Sequencing helpers
# ---------------------------------------------------------------------------

def _chronological(photos: Iterable[Photo]) -> list[Photo]:
    return sorted(photos, key=lambda p: p.created_at)


def _first_max(photos: list[Photo], key: Callable[[Photo], float]) -> Photo:
    """Highest-scoring photo; the earliest in the list wins ties."""
    best = photos[0]
    for photo in photos[1:]:
        if key(photo) > key(best):
            best = photo
    return best


def _group_by_gap(photos: Iterable[Photo], gap: timedelta) -> list[list[Photo]]:
    """Split chronologically ordered photos wherever consecutive ones are > gap apart."""
    groups: list[list[Photo]] = []
    previous = None
    for photo in _chronological(photos):
        if previous is None or photo.created_at - previous.created_at > gap:
            groups.append([photo])
        else:
            groups[-1].append(photo)
        previous = photo
    return groups


def _match_emotional_pattern(photos: list[Photo], pattern: tuple[str, ...]) -> list[Photo]:
    """Collect photos following the emotion pattern in order.

    Once the last step is reached every further photo with that emotion is
    collected too.
    """
    matched: list[Photo] = []
    step = 0
    for photo in photos:
        if photo.metadata is not None and photo.metadata.emotion == pattern[step]:
            matched.append(photo)
            step = min(step + 1, len(pattern) - 1)
    return matched


def _build_arc(
    story_type: StoryType,
    photos: list[Photo],
    title: str,
    description: str,
    seconds_per_photo: float,
) -> NarrativeArc:
    curve = [
        EmotionPoint(
            timestamp=p.created_at,
            emotion=_emotion_label(p),
            intensity=intensity_score(p.metadata),
        )
        for p in photos
    ]
    avg_quality = sum(_average_quality(p) for p in photos) / len(photos) if photos else 0.0
    peak_moments = sum(
        1 for p in photos if p.metadata is not None and p.metadata.action_intensity == "peak"
    )
    minutes = int(_round_half_up(len(photos) * seconds_per_photo / 60))

    arc = NarrativeArc(
        type=story_type,
        photos=photos,
        title=title,
        description=description,
        emotional_curve=curve,
        metadata=ArcMetadata(
            avg_quality=_round_half_up(avg_quality, 1),
            peak_moments=peak_moments,
            duration=f"{minutes} min video",
        ),
    )
    logger.debug("Built %s arc with %d photos", story_type, len(photos))
    return arc
