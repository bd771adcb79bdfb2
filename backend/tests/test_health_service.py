import sys
import unittest
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(REPO_ROOT / "backend"))
sys.path.insert(0, str(REPO_ROOT))

from app.services.health_service import DataSourceContext  # noqa: E402


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


class DataSourceContextTests(unittest.TestCase):
    def setUp(self):
        self.clock = FakeClock()
        self.results = [True]
        self.calls = 0

        def probe():
            self.calls += 1
            return self.results[-1]

        self.context = DataSourceContext(probe=probe, ttl_seconds=30, clock=self.clock)

    def test_result_is_cached_within_ttl(self):
        self.assertTrue(self.context.is_store_available())
        self.results.append(False)
        self.clock.now = 29
        self.assertTrue(self.context.is_store_available())
        self.assertEqual(self.calls, 1)

    def test_reprobes_after_ttl(self):
        self.assertTrue(self.context.is_store_available())
        self.results.append(False)
        self.clock.now = 31
        self.assertFalse(self.context.is_store_available())
        self.assertTrue(self.context.mock_mode)
        self.assertEqual(self.calls, 2)

    def test_probe_exception_counts_as_unavailable(self):
        context = DataSourceContext(probe=lambda: 1 / 0, clock=self.clock)
        self.assertFalse(context.refresh())
        self.assertTrue(context.health()["mockMode"])

    def test_mock_only_never_probes(self):
        context = DataSourceContext(probe=lambda: True, mock_only=True)
        self.assertFalse(context.is_store_available())
        self.assertEqual(context.health()["status"], "ok")


if __name__ == "__main__":
    unittest.main()
