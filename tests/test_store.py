"""Page store persistence tests."""

import json
import os

import pytest

from webreader.errors import PersistenceError
from webreader.models import Page
from webreader.store import PageStore


def test_load_missing_file_is_empty(store):
    assert store.load() == []


def test_round_trip(store):
    pages = [
        Page("Chapter 1", ("first", "second")),
        Page("Chapter 2", ()),
        Page("Ünïcode — title", ("naïve café",)),
    ]
    store.save(pages)
    assert store.load() == pages


def test_save_overwrites_whole_file(store):
    store.save([Page("A", ("x",)), Page("B", ("y",))])
    store.save([Page("B", ("y",))])
    assert store.load() == [Page("B", ("y",))]


def test_file_format_is_plain_json_list(store):
    store.save([Page("A", ("x", "y"))])
    with open(store.path, encoding="utf-8") as f:
        assert json.load(f) == [{"title": "A", "paragraphs": ["x", "y"]}]


def test_save_creates_parent_directories(tmp_path):
    store = PageStore(str(tmp_path / "nested" / "dir" / "pages.json"))
    store.save([Page("A")])
    assert store.load() == [Page("A")]


def test_save_leaves_no_temp_files(store):
    store.save([Page("A")])
    store.save([Page("B")])
    assert os.listdir(store.path.parent) == ["pages.json"]


@pytest.mark.parametrize("content", [
    "not json at all",
    '{"title": "A"}',
    '[{"paragraphs": ["x"]}]',
    '[{"title": 3, "paragraphs": []}]',
    '[{"title": "A", "paragraphs": [1, 2]}]',
])
def test_undecodable_file_loads_as_empty(store, content):
    store.path.write_text(content, encoding="utf-8")
    assert store.load() == []


def test_failed_write_raises_and_keeps_previous_file(store, monkeypatch):
    store.save([Page("A", ("x",))])

    def broken_replace(src, dst):
        raise OSError("disk full")

    monkeypatch.setattr(os, "replace", broken_replace)
    with pytest.raises(PersistenceError):
        store.save([Page("B")])
    monkeypatch.undo()

    assert store.load() == [Page("A", ("x",))]
    assert os.listdir(store.path.parent) == ["pages.json"]
