"""
Search queries for each vibe.

Every vibe the classifier can return, including the fallback, must have a
non-empty query list. The table is checked once at import.
"""

from vibe import FALLBACK_VIBE, VIBES, display_name


class SearchTermsConfigError(ValueError):
    """Raised when a vibe has no search queries configured."""


# 'year:' filters keep results recent; broad terms let the catalog return its
# most popular hits for the term.
VIBE_SEARCH_QUERIES = {
    'Energetic': [
        "year:2024-2025 genre:pop",
        "year:2024-2025 genre:dance",
        "workout hits 2025",
        "club trends 2025",
    ],
    'Cozy': [
        "year:2020-2025 genre:acoustic",
        "year:2023-2025 genre:folk",
        "coffee shop hits",
        "chill hits 2025",
    ],
    'Moody': [
        "year:2023-2025 genre:indie",
        "sad songs 2025",
        "late night vibes",
        "moody pop hits",
    ],
    'Dreamy': [
        "year:2023-2025 genre:dream-pop",
        "ethereal hits",
        "psychedelic pop 2025",
        "bedroom pop 2025",
    ],
    'Intense': [
        "year:2023-2025 genre:rock",
        "year:2023-2025 genre:alternative",
        "gym phonk 2025",
        "high energy rock",
    ],
    'Chill': [
        "year:2024-2025 genre:r-n-b",
        "lofi hits 2025",
        "chill pop 2025",
        "relaxing hits",
    ],
    'Uplifting': [
        "year:2024-2025 genre:pop happy",
        "feel good hits 2025",
        "summer hits 2025",
        "morning motivation",
    ],
    'Melancholic': [
        "year:2020-2025 genre:piano",
        "heartbreak hits 2025",
        "ballads 2025",
        "stripped back",
    ],
    'Christmas': [
        "Christmas Hits",  # Classics over trends
        "Holiday Pop",
        "Christmas Classics",
        "Jazz Christmas",
    ],
    'Halloween': [
        "Halloween Party",
        "Spooky Hits",
        "Horror Soundtracks",
    ],
    'Neutral': [
        "Top 50 Global",
        "Viral Hits 2025",
        "year:2025 genre:pop",
    ],
}


def vocabulary() -> list[str]:
    """Display names of every vibe the classifier can return."""
    return [display_name(v) for v in VIBES] + [display_name(FALLBACK_VIBE)]


def check_search_terms(table: dict = None) -> None:
    """
    Verify every vibe has at least one non-blank query.

    Raises:
        SearchTermsConfigError: Naming every vibe with a missing or empty entry
    """
    if table is None:
        table = VIBE_SEARCH_QUERIES

    missing = [name for name in vocabulary()
               if not any(q.strip() for q in table.get(name, ()))]
    if missing:
        raise SearchTermsConfigError(f"No search queries configured for: {', '.join(missing)}")


def search_terms_for(vibe: str) -> list[str]:
    """
    Ordered search queries for a vibe, in any casing.

    Raises:
        KeyError: If vibe is not part of the vocabulary
    """
    return list(VIBE_SEARCH_QUERIES[display_name(vibe)])


check_search_terms()
