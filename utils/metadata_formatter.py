"""Human-readable display text from AI-enriched keyword strings.

Enrichment writes keywords as one delimited string mixing plain tags with
``category:value`` pairs, e.g. ``"volleyball, sport:volleyball, action:
explosive-spike, emotion:triumph"``. Plain tags become primary tags; pairs
populate CategoryTags. Verbose AI titles and captions are replaced by text
generated from those categories.
"""
import re

from pydantic import BaseModel, Field

_MAX_TITLE_LENGTH = 50
_MAX_CAPTION_LENGTH = 100
_MAX_PRIMARY_TAGS = 5

# Phrasing typical of machine-written titles; such titles are regenerated.
_VERBOSE_TITLE_MARKERS = ("executes", "performs")


class CategoryTags(BaseModel):
    sport: str | None = None
    action: str | None = None
    emotion: str | None = None
    composition: str | None = None
    time: str | None = None
    phase: str | None = None
    location: str | None = None
    equipment: str | None = None


class ParsedKeywords(BaseModel):
    categories: CategoryTags = Field(default_factory=CategoryTags)
    primary: list[str] = Field(default_factory=list)
    all: list[str] = Field(default_factory=list)


class FormattedMetadata(BaseModel):
    display_title: str
    display_caption: str
    primary_tags: list[str] = Field(default_factory=list)
    category_tags: CategoryTags = Field(default_factory=CategoryTags)
    all_keywords: list[str] = Field(default_factory=list)


class DisplayTag(BaseModel):
    label: str
    category: str | None = None


def parse_enriched_keywords(keywords: str | None) -> ParsedKeywords:
    if not keywords:
        return ParsedKeywords()

    entries = [k.strip() for k in re.split(r"[;,]", keywords)]
    entries = [k for k in entries if k]

    categories: dict[str, str] = {}
    primary: list[str] = []
    for entry in entries:
        if ":" in entry:
            category, value = (part.strip() for part in entry.split(":")[:2])
            if category and value and category in CategoryTags.model_fields:
                categories[category] = value
        else:
            primary.append(entry)

    return ParsedKeywords(categories=CategoryTags(**categories), primary=primary, all=entries)


def format_metadata(
    title: str | None = None,
    caption: str | None = None,
    keywords: str | None = None,
) -> FormattedMetadata:
    parsed = parse_enriched_keywords(keywords)
    return FormattedMetadata(
        display_title=_display_title(title, parsed),
        display_caption=_display_caption(caption, parsed),
        primary_tags=[capitalize(k) for k in parsed.primary[:_MAX_PRIMARY_TAGS]],
        category_tags=parsed.categories,
        all_keywords=parsed.all,
    )


def get_display_tags(
    title: str | None = None,
    caption: str | None = None,
    keywords: str | None = None,
    max_tags: int = 4,
) -> list[DisplayTag]:
    """Sport, then action, then primary keywords, up to `max_tags`."""
    formatted = format_metadata(title, caption, keywords)
    categories = formatted.category_tags
    tags: list[DisplayTag] = []

    if categories.sport and len(tags) < max_tags:
        tags.append(DisplayTag(label=capitalize(categories.sport), category="sport"))
    if categories.action and len(tags) < max_tags:
        tags.append(DisplayTag(label=format_action(categories.action), category="action"))

    for keyword in formatted.primary_tags:
        if len(tags) >= max_tags:
            break
        tags.append(DisplayTag(label=keyword))
    return tags


def generate_summary(keywords: str | None) -> str:
    categories = parse_enriched_keywords(keywords).categories
    parts: list[str] = []

    if categories.sport:
        parts.append(capitalize(categories.sport))
    if categories.action:
        parts.append(format_action(categories.action).lower())
    if categories.emotion:
        parts.append(f"with {categories.emotion} energy")
    if categories.phase:
        parts.append(f"during {categories.phase}")
    if categories.time and categories.time != "unknown":
        parts.append(f"in the {categories.time}")

    return " ".join(parts) if parts else "Creative action photography"


def get_searchable_keywords(keywords: str | None) -> list[str]:
    formatted = format_metadata(keywords=keywords)
    searchable: list[str] = []
    if formatted.category_tags.sport:
        searchable.append(capitalize(formatted.category_tags.sport))
    if formatted.category_tags.action:
        searchable.append(format_action(formatted.category_tags.action))
    searchable.extend(formatted.primary_tags[:3])
    return searchable


def get_category_badge(category: str, value: str) -> str:
    if category == "action":
        return format_action(value)
    if category == "emotion":
        return f"{capitalize(value)} Energy"
    return capitalize(value)


def capitalize(text: str) -> str:
    """Upper-case the first character only; the rest is left untouched."""
    return text[:1].upper() + text[1:]


def format_action(action: str) -> str:
    """'explosive-start' → 'Explosive Start'."""
    return " ".join(capitalize(part) for part in action.split("-"))


# ---------------------------------------------------------------------------
# Title / caption generation
# ---------------------------------------------------------------------------

def _display_title(ai_title: str | None, parsed: ParsedKeywords) -> str:
    if (
        ai_title
        and len(ai_title) < _MAX_TITLE_LENGTH
        and not any(marker in ai_title for marker in _VERBOSE_TITLE_MARKERS)
    ):
        return ai_title

    categories = parsed.categories
    parts: list[str] = []
    if parsed.primary:
        parts.append(capitalize(parsed.primary[0]))
    elif categories.sport:
        parts.append(capitalize(categories.sport))

    if categories.action:
        parts.append(format_action(categories.action))
    elif len(parsed.primary) > 1:
        parts.append(parsed.primary[1])

    return " - ".join(parts) if parts else "Creative Action Photo"


def _display_caption(ai_caption: str | None, parsed: ParsedKeywords) -> str:
    if (
        ai_caption
        and len(ai_caption) < _MAX_CAPTION_LENGTH
        and "executes" not in ai_caption.lower()
    ):
        return ai_caption

    categories = parsed.categories
    parts: list[str] = []
    if categories.sport and categories.action:
        parts.append(f"{capitalize(categories.sport)} {format_action(categories.action).lower()}")
    elif len(parsed.primary) > 1:
        parts.append(f"{capitalize(parsed.primary[0])} {parsed.primary[1]}")

    if categories.phase:
        parts.append(f"during {categories.phase}")
    elif categories.emotion:
        parts.append(f"with {categories.emotion} energy")

    if categories.time and categories.time != "unknown":
        parts.append(f"captured in {categories.time} light")

    if parts:
        return " ".join(parts)
    if parsed.primary:
        return f"Creative action: {parsed.primary[0]}"
    return ""
