import os
import stat

import pytest

from pagekiln.cache import ContentCache
from pagekiln.errors import (
    CacheReadFailure,
    DirectoryCreationFailure,
    WriteFailure,
)
from pagekiln.hashing import available_algorithms, get_hasher


def test_get_missing_entry_returns_none(tmp_path):
    cache = ContentCache(tmp_path / "hashes")
    assert cache.get("/site/index.html") is None


def test_set_creates_directory_and_stores_content_hash(tmp_path):
    cache = ContentCache(tmp_path / "cache" / "hashes")
    stored = cache.set("/site/index.html", "<p>A</p>")

    assert stored == get_hasher("xxh3")("<p>A</p>")
    assert cache.get("/site/index.html") == stored
    entry = cache.entry_path("/site/index.html")
    assert entry.parent == tmp_path / "cache" / "hashes"
    assert entry.name == get_hasher("xxh3")("/site/index.html") + ".hash"


def test_key_and_value_fingerprints_are_distinct_roles(tmp_path):
    cache = ContentCache(tmp_path)
    cache.set("/a.html", "content")
    entry = cache.entry_path("/a.html")
    assert entry.stem == cache.fingerprint("/a.html")
    assert entry.read_text(encoding="utf-8") == cache.fingerprint("content")


def test_distinct_paths_use_distinct_entries(tmp_path):
    cache = ContentCache(tmp_path)
    cache.set("/p.html", "same")
    assert cache.entry_path("/p.html") != cache.entry_path("/q.html")
    assert cache.get("/q.html") is None
    assert not cache.is_fresh("/q.html", "same")
    assert cache.is_fresh("/p.html", "same")


def test_set_overwrites_previous_value(tmp_path):
    cache = ContentCache(tmp_path)
    cache.set("/p.html", "A")
    cache.set("/p.html", "B")
    assert cache.get("/p.html") == cache.fingerprint("B")
    assert len(cache.entries()) == 1


def test_set_leaves_no_temp_files(tmp_path):
    cache = ContentCache(tmp_path)
    cache.set("/p.html", "A")
    assert [p.name for p in tmp_path.iterdir()] == [cache.entry_path("/p.html").name]


def test_entry_that_is_a_directory_counts_as_absent(tmp_path):
    cache = ContentCache(tmp_path)
    cache.entry_path("/p.html").mkdir(parents=True)
    assert cache.get("/p.html") is None


def test_unreadable_entry_raises(tmp_path, monkeypatch):
    cache = ContentCache(tmp_path)
    cache.set("/p.html", "A")

    def fail_read(self, *args, **kwargs):
        raise PermissionError("denied")

    monkeypatch.setattr("pathlib.Path.read_text", fail_read)
    with pytest.raises(CacheReadFailure) as excinfo:
        cache.get("/p.html")
    assert excinfo.value.path == cache.entry_path("/p.html")
    assert isinstance(excinfo.value.original_error, PermissionError)


def test_undecodable_entry_raises(tmp_path):
    cache = ContentCache(tmp_path)
    entry = cache.entry_path("/p.html")
    entry.write_bytes(b"\xff\xfe\x00garbage")
    with pytest.raises(CacheReadFailure) as excinfo:
        cache.get("/p.html")
    assert excinfo.value.path == entry
    assert isinstance(excinfo.value.original_error, UnicodeDecodeError)


def test_interrupted_rename_keeps_previous_entry(tmp_path, monkeypatch):
    cache = ContentCache(tmp_path)
    cache.set("/p.html", "old")

    def crash(src, dst):
        raise OSError("power loss")

    monkeypatch.setattr(os, "replace", crash)
    with pytest.raises(WriteFailure):
        cache.set("/p.html", "new")
    monkeypatch.undo()

    assert cache.get("/p.html") == cache.fingerprint("old")
    # the staged temp file is cleaned up
    assert [p.name for p in tmp_path.iterdir()] == [cache.entry_path("/p.html").name]


def test_directory_creation_failure(tmp_path):
    blocker = tmp_path / "cache"
    blocker.write_text("not a directory", encoding="utf-8")
    cache = ContentCache(blocker / "hashes")
    with pytest.raises(DirectoryCreationFailure):
        cache.set("/p.html", "A")


@pytest.mark.skipif(os.name == "nt" or os.geteuid() == 0, reason="needs POSIX perms")
def test_unwritable_directory_raises_write_failure(tmp_path):
    directory = tmp_path / "hashes"
    directory.mkdir()
    directory.chmod(stat.S_IRUSR | stat.S_IXUSR)
    try:
        with pytest.raises(WriteFailure):
            ContentCache(directory).set("/p.html", "A")
    finally:
        directory.chmod(stat.S_IRWXU)


def test_clear_removes_entries_only(tmp_path):
    cache = ContentCache(tmp_path)
    cache.set("/a.html", "A")
    cache.set("/b.html", "B")
    (tmp_path / "notes.txt").write_text("keep", encoding="utf-8")

    assert cache.clear() == 2
    assert cache.entries() == []
    assert (tmp_path / "notes.txt").exists()


def test_entries_when_directory_missing(tmp_path):
    assert ContentCache(tmp_path / "nope").entries() == []


def test_custom_algorithm_and_suffix(tmp_path):
    cache = ContentCache(tmp_path, algorithm="sha256", suffix=".fp")
    cache.set("/a.html", "A")
    entry = cache.entry_path("/a.html")
    assert entry.suffix == ".fp"
    assert len(entry.stem) == 64
    assert cache.get("/a.html") == get_hasher("sha256")("A")


def test_callable_hasher(tmp_path):
    cache = ContentCache(tmp_path, algorithm=lambda text: f"len{len(text)}")
    cache.set("/a.html", "abc")
    assert cache.get("/a.html") == "len3"


def test_get_hasher_rejects_unknown_algorithm():
    with pytest.raises(ValueError):
        get_hasher("crc-nope")


def test_available_algorithms_include_defaults():
    names = available_algorithms()
    assert "xxh3" in names
    assert "sha256" in names
    assert not any(name.startswith("shake") for name in names)


def test_xxh3_digest_is_fixed_size():
    digest = get_hasher()("any content at all")
    assert len(digest) == 16
    assert get_hasher()("") != get_hasher()(" ")
