"""Tests for the Search Matcher."""
from datetime import timezone

import pytest

from query.search import classify_query, get_search_suggestions, search, search_with_analytics
from conftest import make_meta, make_photo


def _ids(photos):
    return [p.id for p in photos]


@pytest.fixture
def photos():
    return [
        make_photo("portfolio_action", make_meta(portfolio_worthy=True, action_intensity="low",
                                                 emotion="focus", play_type="pass")),
        make_photo("peak_attack", make_meta(action_intensity="peak", play_type="attack",
                                            emotion="intensity")),
        make_photo("triumph", make_meta(emotion="triumph", play_type="serve",
                                        time_of_day="golden-hour")),
        make_photo("celebration", make_meta(emotion="excitement", play_type="celebration",
                                            composition="motion-blur")),
        make_photo("hero", make_meta(use_cases=["website-hero"], time_of_day="morning",
                                     composition="wide-angle", play_type="block"),
                   title="Sunrise Scrimmage", keywords=["Beach", "Tournament"]),
        make_photo("unenriched", None, title="Locker room", caption="Pregame speech"),
    ]


# ---------------------------------------------------------------------------
# Pattern matching
# ---------------------------------------------------------------------------

class TestPatterns:
    def test_quality_pattern_wins_over_later_patterns(self, photos):
        # "action" would match the action-intensity pattern, declared later
        assert _ids(search("portfolio quality action shot", photos)) == ["portfolio_action"]

    def test_case_insensitive(self, photos):
        assert _ids(search("PORTFOLIO", photos)) == ["portfolio_action"]

    def test_action_intensity(self, photos):
        assert _ids(search("high energy", photos)) == ["peak_attack"]

    def test_spike_maps_to_attack(self, photos):
        assert _ids(search("spike", photos)) == ["peak_attack"]

    def test_triumph_pattern_includes_celebration_play(self, photos):
        assert _ids(search("victory", photos)) == ["triumph", "celebration"]

    def test_golden_hour(self, photos):
        assert _ids(search("golden hour", photos)) == ["triumph"]

    def test_sunset_resolves_to_set_play_type(self, photos):
        # "sunset" contains "set", and the set pattern is declared before golden hour
        assert search("sunset", photos) == []

    def test_morning(self, photos):
        assert _ids(search("morning", photos)) == ["hero"]

    def test_use_case_hero(self, photos):
        assert _ids(search("banner", photos)) == ["hero"]

    def test_action_pattern_shadows_later_dynamic_patterns(self, photos):
        # "dynamic" also appears in the excitement and motion-blur patterns
        assert _ids(search("dynamic", photos)) == ["peak_attack"]

    def test_unenriched_never_matches_pattern(self, photos):
        for query in ("portfolio", "spike", "victory", "golden hour", "hero"):
            assert "unenriched" not in _ids(search(query, photos))


# ---------------------------------------------------------------------------
# Keyword fallback
# ---------------------------------------------------------------------------

class TestKeywordFallback:
    def test_matches_title(self, photos):
        assert _ids(search("scrimmage", photos)) == ["hero"]

    def test_matches_keywords_lowercased(self, photos):
        assert _ids(search("beach", photos)) == ["hero"]

    def test_matches_caption_of_unenriched_photo(self, photos):
        assert _ids(search("pregame", photos)) == ["unenriched"]

    def test_matches_metadata_labels(self, photos):
        assert _ids(search("motion-blur", photos)) == ["celebration"]

    def test_parts_joined_with_spaces(self, photos):
        assert _ids(search("scrimmage beach", photos)) == ["hero"]

    def test_no_match_returns_empty(self, photos):
        assert search("zzzz", photos) == []

    def test_empty_query_matches_everything(self, photos):
        assert _ids(search("", photos)) == _ids(photos)

    def test_empty_collection(self):
        assert search("portfolio", []) == []
        assert search("zzzz", []) == []


# ---------------------------------------------------------------------------
# Analytics
# ---------------------------------------------------------------------------

class TestAnalytics:
    def test_results_match_plain_search(self, photos):
        analytics = search_with_analytics("spike", photos)
        assert analytics.results == search("spike", photos)
        assert analytics.result_ids == ["peak_attack"]

    def test_metadata_block(self, photos):
        analytics = search_with_analytics("golden hour", photos)
        assert analytics.metadata.query == "golden hour"
        assert analytics.metadata.result_count == 1
        assert analytics.metadata.search_type == analytics.search_type == "composition"
        assert analytics.metadata.timestamp.tzinfo == timezone.utc
        assert analytics.search_time_ms >= 0

    def test_search_type_may_disagree_with_pattern(self, photos):
        # "spike" fires the attack pattern but is not in the coarse play-type vocabulary
        assert search_with_analytics("spike", photos).search_type == "keyword"

    @pytest.mark.parametrize("query, expected", [
        ("best shots", "quality"),
        ("Print Ready", "quality"),
        ("block", "play_type"),
        ("celebration", "play_type"),
        ("triumph", "emotion"),
        ("rule of thirds", "composition"),
        ("beach", "keyword"),
        ("", "keyword"),
    ])
    def test_classify_query(self, query, expected):
        assert classify_query(query) == expected


# ---------------------------------------------------------------------------
# Suggestions
# ---------------------------------------------------------------------------

class TestSuggestions:
    def test_capped_at_eight(self, photos):
        suggestions = get_search_suggestions("e", photos)
        assert len(suggestions) <= 8
        assert len(set(suggestions)) == len(suggestions)
        assert all("e" in s for s in suggestions)

    def test_order_emotions_then_play_types_then_compositions(self, photos):
        assert get_search_suggestions("se", photos) == ["serve", "set", "close up"]

    def test_only_first_hyphen_replaced(self, photos):
        assert get_search_suggestions("rule", photos) == ["rule of-thirds"]
        assert get_search_suggestions("thirds", photos) == ["rule of-thirds"]

    def test_single_hyphen_compositions(self, photos):
        assert get_search_suggestions("wide", photos) == ["wide angle"]
        assert get_search_suggestions("close", photos) == ["close up"]
        assert get_search_suggestions("blur", photos) == ["motion blur"]

    def test_quality_extras(self, photos):
        assert get_search_suggestions("best", photos) == ["portfolio quality", "print ready"]

    def test_social_extra(self, photos):
        assert get_search_suggestions("social", photos) == ["social media"]

    def test_action_extras(self, photos):
        assert get_search_suggestions("intense", photos) == ["high action", "peak intensity"]

    def test_case_insensitive(self, photos):
        assert get_search_suggestions("TRI", photos) == ["triumph"]

    def test_empty_query_lists_vocabulary_prefix(self, photos):
        assert get_search_suggestions("", photos) == [
            "triumph", "focus", "intensity", "determination", "excitement",
            "attack", "block", "dig",
        ]

    def test_no_match(self, photos):
        assert get_search_suggestions("xyz", photos) == []


# ---------------------------------------------------------------------------
# End to end
# ---------------------------------------------------------------------------

def test_end_to_end_victory_celebration(end_to_end_photos):
    assert _ids(search("victory celebration", end_to_end_photos)) == ["P1"]
