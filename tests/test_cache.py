import time
import unittest

from gdrivedav.cache import ResolutionCache
from gdrivedav.errors import NotFoundError
from gdrivedav.models import LookupResult, RemoteObject, ResolvedEntry


class FakeClock:
    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


def _found(path: str) -> LookupResult:
    obj = RemoteObject(file_id="F-" + path, name=path.rsplit("/", 1)[-1], mime_type="text/plain")
    return LookupResult(entry=ResolvedEntry(obj=obj, path=path))


class TestResolutionCache(unittest.TestCase):
    def setUp(self) -> None:
        self.clock = FakeClock()
        self.cache = ResolutionCache(60.0, clock=self.clock)

    def test_miss_then_hit_returns_same_result(self) -> None:
        self.assertEqual(self.cache.get("/a"), (None, False))

        result = _found("/a")
        self.cache.set("/a", result)
        cached, found = self.cache.get("/a")
        self.assertTrue(found)
        self.assertIs(cached, result)

    def test_keys_are_normalized(self) -> None:
        result = _found("/a/b")
        self.cache.set("/a/b/", result)
        self.assertIs(self.cache.get("/a/b")[0], result)

        root = _found("/")
        self.cache.set("/", root)
        self.assertIs(self.cache.get("")[0], root)

    def test_expired_entry_is_a_miss_without_sweep(self) -> None:
        self.cache.set("/a", _found("/a"))
        self.clock.now += 59.9
        self.assertTrue(self.cache.get("/a")[1])

        self.clock.now += 0.1
        self.assertEqual(self.cache.get("/a"), (None, False))
        self.assertEqual(len(self.cache), 0)

    def test_per_entry_ttl_override(self) -> None:
        self.cache.set("/a", _found("/a"), ttl_sec=5)
        self.clock.now += 5
        self.assertFalse(self.cache.get("/a")[1])

    def test_not_found_outcome_is_cacheable(self) -> None:
        err = NotFoundError("missing")
        self.cache.set("/gone", LookupResult.from_error(err))
        cached, found = self.cache.get("/gone")
        self.assertTrue(found)
        self.assertFalse(cached.found)
        with self.assertRaises(NotFoundError):
            cached.unwrap()

    def test_folder_only_results_have_their_own_slot(self) -> None:
        general = _found("/a")
        folders = LookupResult.from_error(NotFoundError("no folder"), only_directories=True)
        self.cache.set("/a", general)
        self.cache.set("/a", folders)

        self.assertIs(self.cache.get("/a")[0], general)
        self.assertIs(self.cache.get("/a", True)[0], folders)

        self.cache.delete("/a")
        self.assertEqual(len(self.cache), 0)

    def test_delete_only_touches_one_key(self) -> None:
        self.cache.set("/a", _found("/a"))
        self.cache.set("/a/b", _found("/a/b"))
        self.cache.delete("/a/")
        self.assertFalse(self.cache.get("/a")[1])
        self.assertTrue(self.cache.get("/a/b")[1])

    def test_delete_tree(self) -> None:
        for p in ("/a", "/a/b", "/a/b/c", "/ab", "/z"):
            self.cache.set(p, _found(p))
        self.cache.delete_tree("/a")
        self.assertFalse(self.cache.get("/a")[1])
        self.assertFalse(self.cache.get("/a/b")[1])
        self.assertFalse(self.cache.get("/a/b/c")[1])
        # Sibling sharing a name prefix survives.
        self.assertTrue(self.cache.get("/ab")[1])
        self.assertTrue(self.cache.get("/z")[1])

    def test_delete_tree_of_root_clears_everything(self) -> None:
        self.cache.set("/a", _found("/a"))
        self.cache.set("", _found("/"))
        self.cache.delete_tree("/")
        self.assertEqual(len(self.cache), 0)

    def test_evict_expired(self) -> None:
        self.cache.set("/old", _found("/old"))
        self.clock.now += 30
        self.cache.set("/new", _found("/new"))
        self.clock.now += 30
        self.assertEqual(self.cache.evict_expired(), 1)
        self.assertTrue(self.cache.get("/new")[1])

    def test_rejects_non_positive_ttl(self) -> None:
        with self.assertRaises(ValueError):
            ResolutionCache(0)


class TestResolutionCacheSweeper(unittest.TestCase):
    def test_sweeper_evicts_in_background(self) -> None:
        clock = FakeClock()
        cache = ResolutionCache(1.0, clock=clock)
        cache.set("/a", _found("/a"))
        clock.now += 2

        cache.start_sweeper(0.01)
        try:
            deadline = time.monotonic() + 2.0
            while len(cache) and time.monotonic() < deadline:
                time.sleep(0.01)
            self.assertEqual(len(cache), 0)
        finally:
            cache.close()

    def test_close_is_idempotent(self) -> None:
        cache = ResolutionCache(1.0)
        cache.start_sweeper(10)
        cache.close()
        cache.close()


if __name__ == "__main__":
    unittest.main()
