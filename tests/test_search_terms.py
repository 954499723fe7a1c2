import pytest

from search_terms import (
    VIBE_SEARCH_QUERIES,
    SearchTermsConfigError,
    check_search_terms,
    search_terms_for,
    vocabulary,
)
from vibe import VIBES


def test_vocabulary_covers_every_vibe_and_fallback():
    names = vocabulary()
    assert len(names) == len(VIBES) + 1
    assert 'Neutral' in names
    assert 'Christmas' in names


def test_every_vibe_has_queries():
    for name in vocabulary():
        queries = search_terms_for(name)
        assert queries
        assert all(q.strip() for q in queries)


def test_holiday_queries_lead_with_classics():
    assert search_terms_for('Christmas')[0] == "Christmas Hits"
    assert search_terms_for('Halloween') == ["Halloween Party", "Spooky Hits", "Horror Soundtracks"]


def test_lookup_ignores_case():
    assert search_terms_for('moody') == search_terms_for('Moody') == search_terms_for('MOODY')


def test_lookup_returns_a_copy():
    queries = search_terms_for('Cozy')
    queries.clear()
    assert search_terms_for('Cozy')


def test_unknown_vibe_raises():
    with pytest.raises(KeyError):
        search_terms_for('Spicy')


def test_check_passes_for_shipped_table():
    check_search_terms()


def test_check_names_every_gap():
    table = dict(VIBE_SEARCH_QUERIES)
    del table['Dreamy']
    table['Chill'] = ["   "]

    with pytest.raises(SearchTermsConfigError) as exc:
        check_search_terms(table)

    assert 'Dreamy' in str(exc.value)
    assert 'Chill' in str(exc.value)
    assert 'Moody' not in str(exc.value)
