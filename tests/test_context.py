import threading
import time
import unittest

from fake_drive import FakeDriveClient
from gdrivedav.config import DavConfig
from gdrivedav.context import DriveContext
from gdrivedav.errors import InvalidStateError


def _config(**overrides) -> DavConfig:
    values = {
        "client_secrets_file": "client_secrets.json",
        "token_file": "token.json",
        "cache_sweep_interval_sec": 0,
    }
    values.update(overrides)
    return DavConfig(**values)


class TestDriveContext(unittest.TestCase):
    def test_filesystem_is_built_lazily(self) -> None:
        built = []
        ctx = DriveContext(_config(), client_factory=lambda cfg: built.append(cfg) or FakeDriveClient())
        self.assertFalse(ctx.initialized)
        self.assertEqual(built, [])

        fs = ctx.filesystem
        self.assertTrue(ctx.initialized)
        self.assertIs(ctx.filesystem, fs)
        self.assertEqual(len(built), 1)

    def test_concurrent_first_use_builds_once(self) -> None:
        count = {"n": 0}
        count_lock = threading.Lock()

        def slow_factory(cfg):
            with count_lock:
                count["n"] += 1
            time.sleep(0.05)
            return FakeDriveClient()

        ctx = DriveContext(_config(), client_factory=slow_factory)
        barrier = threading.Barrier(8)
        seen = []

        def worker():
            barrier.wait()
            seen.append(ctx.filesystem)

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        self.assertEqual(count["n"], 1)
        self.assertEqual(len(seen), 8)
        self.assertTrue(all(fs is seen[0] for fs in seen))

    def test_config_flows_into_filesystem(self) -> None:
        cfg = _config(root_id="drive-1", cache_ttl_sec=5)
        ctx = DriveContext(cfg, client_factory=lambda _: FakeDriveClient(root_id="drive-1"))
        fs = ctx.filesystem
        self.assertEqual(fs.resolver.root_id, "drive-1")
        self.assertEqual(fs.cache.ttl_sec, 5)
        self.assertTrue(fs.stat("/").is_dir)

    def test_close_stops_sweeper_and_blocks_reuse(self) -> None:
        with DriveContext(
            _config(cache_sweep_interval_sec=10),
            client_factory=lambda _: FakeDriveClient(),
        ) as ctx:
            cache = ctx.filesystem.cache
            self.assertIsNotNone(cache._sweeper)

        self.assertIsNone(cache._sweeper)
        with self.assertRaises(InvalidStateError):
            ctx.filesystem


if __name__ == "__main__":
    unittest.main()
