"""Current-index slot, reload and tag file location tests."""

import threading
import pytest

from tagcore import (TagIndex, clear_index, get_index, index_exists, locate_tags_file,
                     reload_index, set_tags_path)
from tagcore import index as index_module
from tagcore.fingerprint import TagFileTracker, fingerprint_bytes, fingerprint_file


class TestCurrentIndex:

    def test_not_initialized(self):
        assert not index_exists()
        with pytest.raises(RuntimeError, match="Index not initialized"):
            get_index()

    def test_set_and_get(self, go_tags_file):
        index = set_tags_path(str(go_tags_file))

        assert index_exists()
        assert get_index() is index
        assert len(index) == 6

    def test_set_from_directory(self, go_project):
        index = set_tags_path(str(go_project / "worker"))
        assert index.path == str((go_project / "tags").resolve())

    def test_failed_load_keeps_previous_index(self, go_tags_file, tmp_path):
        index = set_tags_path(str(go_tags_file))

        with pytest.raises(FileNotFoundError):
            set_tags_path(str(tmp_path / "missing" / "tags"))

        assert get_index() is index

    def test_clear(self, go_tags_file):
        set_tags_path(str(go_tags_file))
        clear_index()
        assert not index_exists()


class TestReload:

    def test_unchanged_keeps_instance(self, go_tags_file):
        index = set_tags_path(str(go_tags_file))
        reloaded, changed = reload_index()

        assert changed is False
        assert reloaded is index

    def test_changed_file_swaps_instance(self, write_tags):
        path = write_tags('Foo\tfoo.go\t1;"\n')
        old = set_tags_path(str(path))

        write_tags('Foo\tfoo.go\t1;"\nFoo\tbar.go\t9;"\n')
        new, changed = reload_index()

        assert changed is True
        assert new is not old
        assert get_index() is new
        assert len(new.lookup("Foo")) == 2
        # the old instance is untouched
        assert len(old.lookup("Foo")) == 1

    def test_force(self, go_tags_file):
        index = set_tags_path(str(go_tags_file))
        reloaded, changed = reload_index(force=True)

        assert changed is True
        assert reloaded is not index
        assert reloaded.records == index.records

    def test_reload_keeps_strict_option(self, write_tags):
        path = write_tags('Foo\tfoo.go\t1;"\n')
        set_tags_path(str(path), strict=True)

        write_tags('Foo\tfoo.go\tbad\n')
        with pytest.raises(ValueError):
            reload_index()

    def test_reload_without_index(self):
        with pytest.raises(RuntimeError):
            reload_index()

    def test_lock_not_held_while_loading(self, monkeypatch, write_tags):
        path = write_tags('Foo\tfoo.go\t1;"\n')
        set_tags_path(str(path))
        write_tags('Foo\tfoo.go\t2;"\n')

        original_load = TagIndex.load
        acquired = []

        def try_lock():
            got = index_module._index_lock.acquire(blocking=False)
            acquired.append(got)
            if got:
                index_module._index_lock.release()

        def checking_load(cls, *args, **kwargs):
            thread = threading.Thread(target=try_lock)
            thread.start()
            thread.join()
            return original_load(*args, **kwargs)

        monkeypatch.setattr(TagIndex, "load", classmethod(checking_load))
        new, changed = reload_index()

        assert changed is True
        assert new.lookup("Foo")[0].line == 2
        assert acquired == [True]

    def test_reload_does_not_overwrite_newer_index(self, monkeypatch, write_tags):
        path = write_tags('Foo\tfoo.go\t1;"\n')
        other = write_tags('Bar\tbar.go\t1;"\n', name="other_tags")
        set_tags_path(str(path))
        write_tags('Foo\tfoo.go\t2;"\n')

        original_load = TagIndex.load
        installed = []

        def racing_load(cls, *args, **kwargs):
            if not installed:
                installed.append(True)
                # another caller switches tag files mid-reload
                monkeypatch.setattr(TagIndex, "load", original_load)
                installed.append(set_tags_path(str(other)))
            return original_load(*args, **kwargs)

        monkeypatch.setattr(TagIndex, "load", classmethod(racing_load))
        current, changed = reload_index()

        assert current is installed[1]
        assert get_index() is installed[1]
        assert current.path == str(other)

    def test_deleted_file_raises(self, write_tags):
        path = write_tags('Foo\tfoo.go\t1;"\n')
        set_tags_path(str(path))
        path.unlink()

        with pytest.raises(FileNotFoundError):
            reload_index()

    def test_queries_during_reloads(self, write_tags):
        path = write_tags('Foo\tfoo.go\t1;"\n')
        set_tags_path(str(path))
        errors = []

        def query():
            for _ in range(200):
                resolution = get_index().resolve("Foo")
                if resolution.status not in ("unique", "ambiguous"):
                    errors.append(resolution)

        threads = [threading.Thread(target=query) for _ in range(4)]
        for thread in threads:
            thread.start()
        for i in range(20):
            write_tags('Foo\tfoo.go\t1;"\n' * (i % 3 + 1))
            reload_index()
        for thread in threads:
            thread.join()

        assert errors == []


class TestFingerprint:

    def test_file_matches_bytes(self, write_tags):
        path = write_tags("Foo\tfoo.go\t1\n")
        assert fingerprint_file(str(path)) == fingerprint_bytes(b"Foo\tfoo.go\t1\n")

    def test_missing_file(self, tmp_path):
        assert fingerprint_file(str(tmp_path / "nope")) == ""

    def test_tracker(self, write_tags):
        path = write_tags("Foo\tfoo.go\t1\n")
        tracker = TagFileTracker()

        assert tracker.is_changed(str(path))
        tracker.remember(str(path), fingerprint_file(str(path)))
        assert not tracker.is_changed(str(path))

        write_tags("Foo\tfoo.go\t2\n")
        assert tracker.is_changed(str(path))

        tracker.forget(str(path))
        assert str(path) not in tracker.fingerprints


class TestLocate:

    def test_file_path_as_is(self, go_tags_file):
        assert locate_tags_file(str(go_tags_file)) == str(go_tags_file)

    def test_directory_containing_tags(self, go_project):
        assert locate_tags_file(str(go_project)) == str(go_project / "tags")

    def test_walks_up_parents(self, go_project):
        found = locate_tags_file(str(go_project / "cmd" / "app"))
        assert found == str((go_project / "tags").resolve())

    def test_custom_filename(self, go_project, write_tags):
        write_tags("X\tx.go\t1\n", name="GOTAGS")
        assert locate_tags_file(str(go_project), filename="GOTAGS") == str(go_project / "GOTAGS")

    def test_missing_path(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            locate_tags_file(str(tmp_path / "does-not-exist"))

    def test_no_tags_anywhere(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            locate_tags_file(str(tmp_path), filename="no-such-tags-file-anywhere")
