"""Recent-search log tests."""

from webreader.history import RecentSearches
from webreader.models import SearchEntry


def test_record_prepends():
    log = RecentSearches()
    log.record("https://example.com/1", "One")
    log.record("https://example.com/2", "Two")
    assert list(log) == [
        SearchEntry("https://example.com/2", "Two"),
        SearchEntry("https://example.com/1", "One"),
    ]
    assert log[0].title == "Two"
    assert len(log) == 2


def test_remove_by_title_removes_first_match_only():
    log = RecentSearches()
    log.record("https://example.com/old", "Same")
    log.record("https://example.com/new", "Same")
    assert log.remove_by_title("Same") is True
    assert list(log) == [SearchEntry("https://example.com/old", "Same")]


def test_remove_unknown_title():
    log = RecentSearches()
    log.record("https://example.com/1", "One")
    assert log.remove_by_title("Missing") is False
    assert len(log) == 1
