"""Search Matcher: free-text query → photo subset.

Pattern first, keyword fallback, first match wins:

  The query is tested against an ordered table of regular expressions, each
  paired with a metadata predicate. The first pattern that matches decides
  the result; later patterns are never consulted. Quality patterns are
  declared before action, emotion, composition, time and use-case patterns,
  so "portfolio quality action shot" resolves to the portfolio predicate.

  When nothing matches, each photo's title, caption, keywords and the main
  metadata labels are joined into one lowercase text blob and the query is
  matched as a plain substring. An empty query therefore matches everything.

Nothing here raises for any string query.
"""
import logging
import re
import time
from collections.abc import Callable, Iterable
from datetime import datetime, timezone

from models.photo import Photo
from models.search_results import SearchAnalytics, SearchMetadata, SearchType

logger = logging.getLogger(__name__)

Predicate = Callable[[Photo], bool]

_MAX_SUGGESTIONS = 8

_SUGGESTED_EMOTIONS = ("triumph", "focus", "intensity", "determination", "excitement")
_SUGGESTED_PLAY_TYPES = ("attack", "block", "dig", "serve", "set", "pass")
_SUGGESTED_COMPOSITIONS = ("rule-of-thirds", "motion-blur", "close-up", "wide-angle")


def _field_in(field: str, *values: str) -> Predicate:
    def predicate(photo: Photo) -> bool:
        return photo.metadata is not None and getattr(photo.metadata, field) in values
    return predicate


def _flag(field: str) -> Predicate:
    def predicate(photo: Photo) -> bool:
        return photo.metadata is not None and getattr(photo.metadata, field) is True
    return predicate


def _use_case(use_case: str) -> Predicate:
    def predicate(photo: Photo) -> bool:
        return photo.metadata is not None and use_case in photo.metadata.use_cases
    return predicate


def _triumph_or_celebration(photo: Photo) -> bool:
    meta = photo.metadata
    return meta is not None and (meta.emotion == "triumph" or meta.play_type == "celebration")


# (name, pattern, predicate), in priority order. Order is significant.
_PATTERNS: list[tuple[str, re.Pattern[str], Predicate]] = [
    # Quality
    ("portfolio_quality", re.compile(r"high quality|portfolio|best|top quality", re.I),
     _flag("portfolio_worthy")),
    ("print_ready", re.compile(r"print ready|print quality|printable", re.I),
     _flag("print_ready")),
    ("social_media", re.compile(r"social media|instagram|facebook|social sharing", re.I),
     _flag("social_media_optimized")),

    # Action
    ("high_action", re.compile(r"action|intense|dynamic|high energy|peak action", re.I),
     _field_in("action_intensity", "high", "peak")),
    ("attack", re.compile(r"spike|attack|kill|offense", re.I), _field_in("play_type", "attack")),
    ("block", re.compile(r"block|blocking|defense", re.I), _field_in("play_type", "block")),
    ("dig", re.compile(r"dig|digging|save|defensive", re.I), _field_in("play_type", "dig")),
    ("serve", re.compile(r"serve|serving|service", re.I), _field_in("play_type", "serve")),
    ("set", re.compile(r"set|setting|assist", re.I), _field_in("play_type", "set")),
    ("pass", re.compile(r"pass|passing|reception", re.I), _field_in("play_type", "pass")),

    # Emotion
    ("triumph", re.compile(r"celebration|victory|triumph|winning|success", re.I),
     _triumph_or_celebration),
    ("focus", re.compile(r"focus|concentration|intense|determination", re.I),
     _field_in("emotion", "focus", "determination")),
    ("intensity", re.compile(r"intensity|power|strength|aggressive", re.I),
     _field_in("emotion", "intensity")),
    ("excitement", re.compile(r"excitement|exciting|energy|dynamic", re.I),
     _field_in("emotion", "excitement")),

    # Composition
    ("golden_hour", re.compile(r"golden hour|sunset|dawn|magic hour", re.I),
     _field_in("time_of_day", "golden-hour")),
    ("motion_blur", re.compile(r"motion blur|action shot|fast movement|dynamic", re.I),
     _field_in("composition", "motion-blur")),
    ("rule_of_thirds", re.compile(r"rule of thirds|composition|balanced", re.I),
     _field_in("composition", "rule-of-thirds")),
    ("close_up", re.compile(r"close.?up|closeup|detail|macro", re.I),
     _field_in("composition", "close-up")),
    ("wide_angle", re.compile(r"wide.?angle|wide|landscape|panorama", re.I),
     _field_in("composition", "wide-angle")),

    # Time of day
    ("morning", re.compile(r"morning|dawn|early", re.I), _field_in("time_of_day", "morning")),
    ("afternoon", re.compile(r"afternoon|daytime|midday", re.I),
     _field_in("time_of_day", "afternoon", "midday")),
    ("evening", re.compile(r"evening|dusk|night", re.I),
     _field_in("time_of_day", "evening", "night")),

    # Use cases
    ("hero", re.compile(r"hero|banner|main|featured", re.I), _use_case("website-hero")),
    ("athlete_portfolio", re.compile(r"portfolio|professional|showcase", re.I),
     _use_case("athlete-portfolio")),
    ("editorial", re.compile(r"editorial|magazine|news|article", re.I), _use_case("editorial")),
]

# Reporting-only classification; coarser than _PATTERNS and checked in order.
_SEARCH_TYPES: list[tuple[SearchType, re.Pattern[str]]] = [
    ("quality", re.compile(r"high quality|portfolio|best|print ready|social media")),
    ("play_type", re.compile(r"attack|block|dig|serve|set|pass|celebration")),
    ("emotion", re.compile(r"triumph|focus|intensity|determination|excitement")),
    ("composition", re.compile(r"golden hour|motion blur|rule of thirds|close up|wide angle")),
]


def search(query: str, photos: Iterable[Photo]) -> list[Photo]:
    """Return the photos selected by `query`, in input order."""
    photos = list(photos)
    lower_query = query.lower()

    for name, pattern, predicate in _PATTERNS:
        if pattern.search(lower_query):
            logger.debug("Query %r matched pattern %s", query, name)
            return [p for p in photos if predicate(p)]

    logger.debug("Query %r matched no pattern, falling back to keyword scan", query)
    return [p for p in photos if lower_query in _search_text(p)]


def search_with_analytics(query: str, photos: Iterable[Photo]) -> SearchAnalytics:
    start = time.perf_counter()
    results = search(query, photos)
    elapsed_ms = (time.perf_counter() - start) * 1000

    search_type = classify_query(query)
    logger.info(
        "Search %r → %d results (%s, %.2f ms)", query, len(results), search_type, elapsed_ms
    )
    return SearchAnalytics(
        results=results,
        search_type=search_type,
        search_time_ms=elapsed_ms,
        metadata=SearchMetadata(
            query=query,
            result_count=len(results),
            search_type=search_type,
            search_time_ms=elapsed_ms,
            timestamp=datetime.now(timezone.utc),
        ),
    )


def classify_query(query: str) -> SearchType:
    """Coarse query category for reporting, independent of which pattern fired."""
    lower_query = query.lower()
    for search_type, pattern in _SEARCH_TYPES:
        if pattern.search(lower_query):
            return search_type
    return "keyword"


def get_search_suggestions(query: str, photos: Iterable[Photo]) -> list[str]:
    """Up to 8 distinct suggestions drawn from fixed vocabularies.

    `photos` is accepted for interface symmetry with search(); suggestions
    do not currently depend on the collection.
    """
    lower_query = query.lower()
    suggestions: dict[str, None] = {}  # insertion-ordered set

    for emotion in _SUGGESTED_EMOTIONS:
        if lower_query in emotion:
            suggestions[emotion] = None
    for play_type in _SUGGESTED_PLAY_TYPES:
        if lower_query in play_type:
            suggestions[play_type] = None
    for composition in _SUGGESTED_COMPOSITIONS:
        if lower_query in composition:
            suggestions[composition.replace("-", " ", 1)] = None

    if "quality" in lower_query or "best" in lower_query:
        suggestions["portfolio quality"] = None
        suggestions["print ready"] = None
    if "social" in lower_query:
        suggestions["social media"] = None
    if "action" in lower_query or "intense" in lower_query:
        suggestions["high action"] = None
        suggestions["peak intensity"] = None

    return list(suggestions)[:_MAX_SUGGESTIONS]


def _search_text(photo: Photo) -> str:
    parts: list[str | None] = [photo.title, photo.caption, *photo.keywords]
    if photo.metadata is not None:
        meta = photo.metadata
        parts += [meta.emotion, meta.play_type, meta.composition, meta.time_of_day]
    return " ".join(part for part in parts if part).lower()
