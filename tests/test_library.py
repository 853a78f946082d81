"""Tests for catalog sources: JSON catalog files, folder scans and the demo catalog."""

import json
import os

import pytest

from core.models import DEFAULT_ARTIST
from library.catalog_file import CatalogFileError, demo_items, load_catalog_file
from library.scan_library import item_id_for_path, iter_audio_paths, item_from_path, scan_items
from player.tone import synthesize_tone


def _write_json(path, data):
    path.write_text(json.dumps(data), encoding="utf-8")
    return str(path)


class TestCatalogFile:

    def test_loads_list_and_resolves_relative_paths(self, tmp_path):
        path = _write_json(tmp_path / "catalog.json", [
            {"id": "1", "title": "One", "artist": "A", "audioUrl": "songs/1.mp3", "color": "#12c274"},
            {"id": "2", "title": "Two", "source_ref": "https://example.com/2.mp3"},
            {"id": "3", "title": "Three"},
        ])
        items = load_catalog_file(path)

        assert [i.id for i in items] == ["1", "2", "3"]
        assert items[0].source_ref == os.path.join(str(tmp_path), "songs/1.mp3")
        assert items[0].accent_color == "#12c274"
        assert items[1].source_ref == "https://example.com/2.mp3"
        assert items[2].source_ref == ""
        assert items[2].artist == DEFAULT_ARTIST

    def test_accepts_tracks_object(self, tmp_path):
        path = _write_json(tmp_path / "c.json", {"tracks": [{"id": "x", "title": "X"}]})
        assert [i.id for i in load_catalog_file(path)] == ["x"]

    @pytest.mark.parametrize("data", [
        {"tracks": "nope"},
        [{"title": "no id"}],
        [{"id": "1"}, {"id": "1"}],
    ])
    def test_rejects_malformed(self, tmp_path, data):
        path = _write_json(tmp_path / "bad.json", data)
        with pytest.raises(CatalogFileError):
            load_catalog_file(path)

    def test_rejects_invalid_json(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("[{", encoding="utf-8")
        with pytest.raises(CatalogFileError):
            load_catalog_file(str(path))

    def test_missing_file_raises_oserror(self, tmp_path):
        with pytest.raises(OSError):
            load_catalog_file(str(tmp_path / "absent.json"))


class TestScanLibrary:

    def test_iter_audio_paths_filters_extensions(self, tmp_path):
        (tmp_path / "sub").mkdir()
        for name in ("b.mp3", "a.FLAC", "cover.jpg", "sub/c.wav", "notes.txt"):
            (tmp_path / name).write_bytes(b"")
        paths = iter_audio_paths([str(tmp_path), str(tmp_path / "missing")])
        names = sorted(os.path.basename(p) for p in paths)
        assert names == ["a.FLAC", "b.mp3", "c.wav"]

    def test_unreadable_file_falls_back_to_file_name(self, tmp_path):
        path = tmp_path / "broken song.mp3"
        path.write_bytes(b"definitely not audio")
        item = item_from_path(str(path))
        assert item.title == "broken song"
        assert item.artist == DEFAULT_ARTIST
        assert item.source_ref == str(path)

    def test_untagged_wav(self, tmp_path):
        path = tmp_path / "beep.wav"
        path.write_bytes(synthesize_tone())
        item = item_from_path(str(path))
        assert item.title == "beep"
        assert item.id == item_id_for_path(str(path))

    def test_scan_items_gives_stable_unique_ids(self, tmp_path):
        for name in ("1.wav", "2.wav"):
            (tmp_path / name).write_bytes(synthesize_tone())
        first = scan_items([str(tmp_path)])
        second = scan_items([str(tmp_path)])
        assert [i.id for i in first] == [i.id for i in second]
        assert len({i.id for i in first}) == 2


def test_demo_items_have_no_source():
    items = demo_items()
    assert len(items) == 12
    assert all(i.source_ref == "" for i in items)
    assert items[0].accent_color == "#12c274"
    assert items[-1].accent_color is None
    assert len({i.id for i in items}) == 12
