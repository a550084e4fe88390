import threading
import unittest

from badge_stats import FrequencyCounter, ServiceStats


class FrequencyCounterTests(unittest.TestCase):
    def test_counts_names(self) -> None:
        counter = FrequencyCounter()
        counter.record("Ada")
        counter.record("Ada")
        counter.record("Grace")
        self.assertEqual(counter.snapshot(), {"Ada": 2, "Grace": 1})

    def test_snapshot_is_a_copy(self) -> None:
        counter = FrequencyCounter()
        snapshot = counter.snapshot()
        snapshot["Ada"] = 5
        self.assertEqual(counter.snapshot(), {})

    def test_concurrent_records(self) -> None:
        counter = FrequencyCounter()

        def _work() -> None:
            for _ in range(500):
                counter.record("Ada")

        threads = [threading.Thread(target=_work) for _ in range(4)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()
        self.assertEqual(counter.snapshot(), {"Ada": 2000})


class ServiceStatsTests(unittest.TestCase):
    def test_empty(self) -> None:
        snapshot = ServiceStats().snapshot()
        self.assertEqual(snapshot.num_requests, 0)
        self.assertEqual(snapshot.average_processing_time, 0.0)

    def test_records_errors_and_latency(self) -> None:
        stats = ServiceStats()
        stats.record(0.2)
        stats.record(0.4, "boom")
        snapshot = stats.snapshot()
        self.assertEqual(snapshot.num_requests, 2)
        self.assertEqual(snapshot.num_errors, 1)
        self.assertEqual(snapshot.last_error, "boom")
        self.assertAlmostEqual(snapshot.processing_time, 0.6)
        self.assertAlmostEqual(snapshot.average_processing_time, 0.3)
        self.assertEqual(snapshot.as_dict()["num_errors"], 1)


if __name__ == "__main__":
    unittest.main()
