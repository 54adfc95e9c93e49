import unittest

from pcaplatency import PacketTime


class PacketTimeTest(unittest.TestCase):
    def test_to_micros(self) -> None:
        self.assertEqual(PacketTime(3, 250).to_micros(), 3_000_250)

    def test_difference_is_outbound_minus_inbound(self) -> None:
        outbound = PacketTime(10, 500_000)
        inbound = PacketTime(10, 0)
        self.assertEqual(outbound - inbound, 500_000)
        self.assertEqual(inbound - outbound, -500_000)

    def test_difference_across_second_boundary(self) -> None:
        self.assertEqual(PacketTime(11, 0) - PacketTime(10, 999_999), 1)

    def test_large_seconds_do_not_overflow(self) -> None:
        late = PacketTime(0xFFFFFFFF, 999_999)
        self.assertEqual(late - PacketTime(0, 0), 0xFFFFFFFF * 1_000_000 + 999_999)

    def test_str_pads_microseconds(self) -> None:
        self.assertEqual(str(PacketTime(5, 42)), "5.000042")


if __name__ == "__main__":  # pragma: no cover - convenience
    unittest.main()
