import unittest

from fake_drive import FakeDriveClient
from gdrivedav.cache import ResolutionCache
from gdrivedav.errors import NetworkError, NotFoundError
from gdrivedav.resolver import PathResolver


class TestPathResolver(unittest.TestCase):
    def setUp(self) -> None:
        self.client = FakeDriveClient()
        self.cache = ResolutionCache(60.0)
        self.resolver = PathResolver(self.client, self.cache)

    def test_root_is_fetched_by_id_without_listing(self) -> None:
        entry = self.resolver.resolve("/")
        self.assertEqual(entry.path, "/")
        self.assertEqual(entry.file_id, "root")
        self.assertEqual(self.client.calls, [("get", "root")])

    def test_root_spellings_share_one_entry(self) -> None:
        self.resolver.resolve("")
        self.resolver.resolve("/")
        self.resolver.resolve("//")
        self.assertEqual(self.client.count("get"), 1)
        self.assertEqual(self.client.count("list"), 0)

    def test_nested_path_walks_parents(self) -> None:
        a = self.client.add("a", "root", folder=True)
        b = self.client.add("b", a.file_id, content=b"x")

        entry = self.resolver.resolve("/a/b")

        self.assertEqual(entry.file_id, b.file_id)
        self.assertEqual(entry.path, "/a/b")
        self.assertEqual(
            self.client.calls,
            [
                ("get", "root"),
                ("list", "root", "a", True),
                ("list", a.file_id, "b", False),
            ],
        )

    def test_second_resolution_is_served_from_cache(self) -> None:
        a = self.client.add("a", "root", folder=True)
        self.client.add("b", a.file_id)

        first = self.resolver.resolve("/a/b")
        self.client.reset_calls()
        second = self.resolver.resolve("/a/b/")

        self.assertEqual(first, second)
        self.assertEqual(self.client.calls, [])

    def test_missing_parent_stops_before_child_listing(self) -> None:
        with self.assertRaises(NotFoundError):
            self.resolver.resolve("/missing/child")

        self.assertEqual(
            self.client.calls,
            [("get", "root"), ("list", "root", "missing", True)],
        )

    def test_not_found_is_cached(self) -> None:
        with self.assertRaises(NotFoundError):
            self.resolver.resolve("/nope")
        self.client.reset_calls()

        with self.assertRaises(NotFoundError):
            self.resolver.resolve("/nope")
        self.assertEqual(self.client.calls, [])

    def test_remote_failures_are_not_cached(self) -> None:
        calls = {"n": 0}
        original = self.client.list_children

        def flaky(*args, **kwargs):
            calls["n"] += 1
            if calls["n"] == 1:
                raise NetworkError("boom")
            return original(*args, **kwargs)

        self.client.list_children = flaky
        self.client.add("a", "root")

        with self.assertRaises(NetworkError):
            self.resolver.resolve("/a")
        self.assertEqual(self.resolver.resolve("/a").path, "/a")

    def test_trashed_objects_are_invisible(self) -> None:
        self.client.add("t", "root", trashed=True)
        with self.assertRaises(NotFoundError):
            self.resolver.resolve("/t")

    def test_first_listed_match_wins(self) -> None:
        first = self.client.add("dup", "root")
        self.client.add("dup", "root")
        self.assertEqual(self.resolver.resolve("/dup").file_id, first.file_id)

    def test_file_segment_is_checked_with_a_folder_listing(self) -> None:
        self.client.add("f", "root")
        self.resolver.resolve("/f")
        self.client.reset_calls()

        with self.assertRaises(NotFoundError):
            self.resolver.resolve("/f/child")
        # The cached file can't rule out a folder of the same name.
        self.assertEqual(self.client.calls, [("list", "root", "f", True)])

    def test_file_and_folder_with_the_same_name(self) -> None:
        self.client.add("a", "root", content=b"older")
        folder = self.client.add("a", "root", folder=True)
        x = self.client.add("x", folder.file_id, content=b"12345")

        # The general lookup sees the older file; the walk goes through the folder.
        self.assertFalse(self.resolver.resolve("/a").obj.is_folder)
        self.assertEqual(self.resolver.resolve("/a/x").file_id, x.file_id)
        self.assertEqual(self.resolver.resolve("/a", only_directories=True).file_id, folder.file_id)

        cold = PathResolver(self.client, ResolutionCache(60.0))
        self.assertEqual(cold.resolve("/a/x").file_id, x.file_id)
        self.assertFalse(cold.resolve("/a").obj.is_folder)

    def test_cached_folder_serves_the_directory_walk(self) -> None:
        d = self.client.add("d", "root", folder=True)
        self.client.add("x", d.file_id)
        self.resolver.resolve("/d")
        self.client.reset_calls()

        self.resolver.resolve("/d/x")
        self.assertEqual(self.client.calls, [("list", d.file_id, "x", False)])

    def test_cached_not_found_raises_a_fresh_error_each_time(self) -> None:
        errors = []
        for _ in range(2):
            with self.assertRaises(NotFoundError) as cm:
                self.resolver.resolve("/gone")
            errors.append(cm.exception)

        self.assertIsNot(errors[0], errors[1])
        self.assertEqual(errors[1].details["path"], "/gone")

    def test_missing_parent_error_names_the_child(self) -> None:
        with self.assertRaises(NotFoundError):
            self.resolver.resolve("/missing/child")

        with self.assertRaises(NotFoundError) as cm:
            self.resolver.resolve("/missing/child")
        self.assertEqual(cm.exception.details["path"], "/missing/child")
        self.assertEqual(cm.exception.details["missing_parent"], "/missing")

    def test_directory_only_miss_does_not_hide_a_file(self) -> None:
        f = self.client.add("f", "root")
        with self.assertRaises(NotFoundError):
            self.resolver.resolve("/f", only_directories=True)

        self.assertEqual(self.resolver.resolve("/f").file_id, f.file_id)

    def test_invalidate_drops_path_and_parent(self) -> None:
        a = self.client.add("a", "root", folder=True)
        self.client.add("b", a.file_id)
        self.resolver.resolve("/a/b")

        self.resolver.invalidate("/a/b")
        self.assertFalse(self.cache.get("/a/b")[1])
        self.assertFalse(self.cache.get("/a", True)[1])
        self.assertTrue(self.cache.get("", True)[1])

    def test_invalidate_tree_drops_descendants(self) -> None:
        a = self.client.add("a", "root", folder=True)
        b = self.client.add("b", a.file_id, folder=True)
        self.client.add("c", b.file_id)
        self.resolver.resolve("/a/b/c")

        self.resolver.invalidate_tree("/a")
        self.assertEqual(len(self.cache), 0)

    def test_exists(self) -> None:
        self.client.add("here", "root")
        self.assertTrue(self.resolver.exists("/here"))
        self.assertFalse(self.resolver.exists("/there"))

    def test_custom_root_id(self) -> None:
        client = FakeDriveClient(root_id="shared-drive")
        resolver = PathResolver(client, ResolutionCache(), root_id="shared-drive")
        self.assertEqual(resolver.resolve_id("/"), "shared-drive")


if __name__ == "__main__":
    unittest.main()
