import unittest

from pcaplatency import LatencyAggregator, NoMatchesError


class LatencyAggregatorTest(unittest.TestCase):
    def test_single_negative_sample(self) -> None:
        aggregator = LatencyAggregator()
        aggregator.add(-50)
        aggregator.add(None)

        summary = aggregator.summary()
        self.assertEqual(summary.average_latency, 50)
        self.assertEqual(summary.jitter, 0)
        self.assertEqual(summary.min_latency, 50)
        self.assertEqual(summary.max_latency, 50)
        self.assertEqual(summary.packet_count, 2)
        self.assertEqual(summary.hit_count, 1)
        self.assertEqual(summary.miss_count, 1)
        self.assertAlmostEqual(summary.miss_percentage, 50.0)
        self.assertEqual(summary.std_deviation, 0.0)

    def test_min_and_max_track_magnitude(self) -> None:
        aggregator = LatencyAggregator()
        for latency in (100, -300, 200):
            aggregator.add_hit(latency)

        summary = aggregator.summary()
        self.assertEqual(summary.min_latency, 100)
        self.assertEqual(summary.max_latency, 300)
        self.assertEqual(summary.jitter, 200)
        self.assertEqual(summary.average_latency, 200)
        self.assertAlmostEqual(summary.std_deviation, 100.0)

    def test_average_is_integer_microseconds(self) -> None:
        aggregator = LatencyAggregator()
        aggregator.add_hit(1)
        aggregator.add_hit(2)
        self.assertEqual(aggregator.summary().average_latency, 1)

    def test_counts_add_up(self) -> None:
        aggregator = LatencyAggregator()
        for latency in (5, None, None, -7, None):
            aggregator.add(latency)
        self.assertEqual(aggregator.hit_count + aggregator.miss_count, aggregator.packet_count)
        self.assertEqual(aggregator.packet_count, 5)

    def test_summary_without_hits_raises(self) -> None:
        aggregator = LatencyAggregator()
        with self.assertRaises(NoMatchesError):
            aggregator.summary()

        aggregator.add_miss()
        with self.assertRaises(NoMatchesError):
            aggregator.summary()


if __name__ == "__main__":  # pragma: no cover - convenience
    unittest.main()
