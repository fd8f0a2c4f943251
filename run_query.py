#!/usr/bin/env python3
"""Query a photo catalog from the command line.

The catalog is a JSON document ``{"photos": [...]}`` as exported by the
gallery sync. Results are printed to stdout as JSON; logs go to stderr.

Usage:
    python run_query.py filter --preset portfolio
    python run_query.py filter --criteria "emotions=triumph,focus&minQuality=7"
    python run_query.py search "golden hour" --analytics
    python run_query.py suggest se
    python run_query.py similar photo_001
    python run_query.py recommend --history photo_001,photo_004
    python run_query.py trending --limit 5
    python run_query.py emotion triumph
    python run_query.py play-type attack
    python run_query.py story technical-excellence --team "Eagles" --event "Finals"
    python run_query.py presets
"""
import argparse
import json
import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent))

from pydantic import ValidationError

from settings import Settings
from models.filters import FilterCriteria, FilterPresets
from models.photo import Photo, PhotoCatalog
from models.story import StoryContext
from query import filtering, recommendations, search, stories
from utils.query_params import criteria_from_query_string

logger = logging.getLogger("run_query")

_STORY_TYPES = (
    "game-winning-rally",
    "player-highlight",
    "season-journey",
    "comeback-story",
    "technical-excellence",
    "emotion-spectrum",
)


class CatalogLookupError(LookupError):
    """A photo id given on the command line is not in the catalog."""


def load_catalog(path: Path) -> PhotoCatalog:
    return PhotoCatalog.model_validate_json(path.read_text(encoding="utf-8"))


def _limit_arg(value: str) -> int:
    limit = int(value)
    if limit < 0:
        raise argparse.ArgumentTypeError("limit must not be negative")
    return limit


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Filter, search and rank gallery photos.")
    parser.add_argument("--catalog", type=Path, default=None,
                        help="Catalog JSON (default: <data_dir>/photos.json)")
    parser.add_argument("--presets", type=Path, default=None,
                        help="Filter presets YAML (default: <data_dir>/presets.yaml)")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("filter", help="Apply filter criteria")
    p.add_argument("--preset", help="Named preset to start from")
    p.add_argument("--criteria", default="",
                   help="URL-style criteria, e.g. 'playTypes=attack&printReady=true'")

    p = sub.add_parser("search", help="Free-text search")
    p.add_argument("query")
    p.add_argument("--analytics", action="store_true", help="Include timing and search type")

    p = sub.add_parser("suggest", help="Search suggestions for a partial query")
    p.add_argument("query")

    p = sub.add_parser("similar", help="Photos similar to one photo")
    p.add_argument("photo_id")
    p.add_argument("--limit", type=_limit_arg)

    p = sub.add_parser("recommend", help="Recommendations from a view history")
    p.add_argument("--history", default="", help="Comma-separated viewed photo ids")
    p.add_argument("--limit", type=_limit_arg)

    p = sub.add_parser("trending", help="Trending portfolio photos")
    p.add_argument("--limit", type=_limit_arg)

    p = sub.add_parser("emotion", help="Top portfolio photos for an emotion")
    p.add_argument("emotion")
    p.add_argument("--limit", type=_limit_arg)

    p = sub.add_parser("play-type", help="Top portfolio photos for a play type")
    p.add_argument("play_type")
    p.add_argument("--limit", type=_limit_arg)

    sub.add_parser("presets", help="List the available filter presets")

    p = sub.add_parser("story", help="Generate a narrative arc")
    p.add_argument("story_type", choices=_STORY_TYPES)
    p.add_argument("--team", default="", dest="team_name")
    p.add_argument("--opponent", default="", dest="opponent_name")
    p.add_argument("--game-end", default=None, dest="end_time",
                   help="ISO timestamp of the end of the game")
    p.add_argument("--final-score", default=None, dest="final_score")
    p.add_argument("--event", default="", dest="event_name")
    p.add_argument("--player-id", default=None, dest="player_id")
    p.add_argument("--player-name", default="", dest="player_name")
    p.add_argument("--season-id", default=None, dest="season_id")
    p.add_argument("--season-name", default="", dest="season_name")

    return parser


def run(args: argparse.Namespace, settings: Settings) -> object:
    """Execute one command and return a JSON-serialisable result."""
    if args.command == "presets":
        return _load_presets(args, settings).names

    catalog = load_catalog(args.catalog or settings.catalog_path)
    photos = catalog.photos
    logger.info(
        "Loaded %d photos (%d enriched)", len(photos), sum(1 for p in photos if p.is_enriched)
    )

    if args.command == "filter":
        criteria = _resolve_criteria(args, settings)
        return _ids(filtering.filter_photos(photos, criteria))

    if args.command == "search":
        if args.analytics:
            analytics = search.search_with_analytics(args.query, photos)
            return analytics.model_dump(mode="json", exclude={"results"})
        return _ids(search.search(args.query, photos))

    if args.command == "suggest":
        return search.get_search_suggestions(args.query, photos)

    if args.command == "similar":
        target = _require(catalog, args.photo_id)
        limit = _limit(args, settings.similar_limit)
        return _ids(recommendations.find_similar_photos(target, photos, limit=limit))

    if args.command == "recommend":
        history_ids = [pid for pid in args.history.split(",") if pid]
        history = catalog.by_ids(history_ids)
        if len(history) != len(history_ids):
            known = {p.id for p in history}
            missing = ", ".join(pid for pid in history_ids if pid not in known)
            raise CatalogLookupError(f"Photo not found in catalog: {missing}")
        limit = _limit(args, settings.recommendation_limit)
        return _ids(recommendations.get_recommendations(history, photos, limit=limit))

    if args.command == "trending":
        limit = _limit(args, settings.trending_limit)
        return _ids(recommendations.get_trending_photos(photos, limit=limit))

    if args.command == "emotion":
        limit = _limit(args, settings.category_limit)
        return _ids(recommendations.get_photos_by_emotion(photos, args.emotion, limit=limit))

    if args.command == "play-type":
        limit = _limit(args, settings.category_limit)
        return _ids(recommendations.get_photos_by_play_type(photos, args.play_type, limit=limit))

    if args.command == "story":
        context = StoryContext(
            team_name=args.team_name,
            opponent_name=args.opponent_name,
            end_time=args.end_time,
            final_score=args.final_score,
            event_name=args.event_name,
            player_id=args.player_id,
            player_name=args.player_name,
            season_id=args.season_id,
            season_name=args.season_name,
        )
        arc = stories.generate_story(
            args.story_type, photos, context, highlight_limit=settings.highlight_limit
        )
        if arc is None:
            logger.warning("Not enough photos to generate a %s story", args.story_type)
            return None
        story = arc.model_dump(mode="json", exclude={"photos"})
        story["photo_ids"] = _ids(arc.photos)
        return story

    raise ValueError(f"Unknown command: {args.command}")


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    settings = Settings()

    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s  %(levelname)-8s  %(name)s  %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stderr,
    )

    try:
        result = run(args, settings)
    except (FileNotFoundError, CatalogLookupError, KeyError, ValidationError) as exc:
        logger.error("%s", exc)
        return 1

    print(json.dumps(result, indent=2, ensure_ascii=False))
    return 0


def _resolve_criteria(args: argparse.Namespace, settings: Settings) -> FilterCriteria:
    """Preset fields first, then any fields given with --criteria override them."""
    criteria = FilterCriteria()
    if args.preset:
        criteria = _load_presets(args, settings).get(args.preset)
    if args.criteria:
        overrides = criteria_from_query_string(args.criteria)
        criteria = criteria.model_copy(update=overrides.model_dump(exclude_unset=True))
    return criteria


def _load_presets(args: argparse.Namespace, settings: Settings) -> FilterPresets:
    return FilterPresets.load_or_default(args.presets or settings.presets_path)


def _limit(args: argparse.Namespace, default: int) -> int:
    return args.limit if args.limit is not None else default


def _require(catalog: PhotoCatalog, photo_id: str) -> Photo:
    photo = catalog.by_id(photo_id)
    if photo is None:
        raise CatalogLookupError(f"Photo not found in catalog: {photo_id}")
    return photo


def _ids(photos: list[Photo]) -> list[str]:
    return [p.id for p in photos]


if __name__ == "__main__":
    sys.exit(main())
