import unittest

from pcaplatency import ByteFilter


class ByteFilterTest(unittest.TestCase):
    def test_empty_filter_accepts_everything(self) -> None:
        byte_filter = ByteFilter()
        self.assertFalse(byte_filter)
        self.assertTrue(byte_filter.matches(b""))
        self.assertTrue(byte_filter.matches(b"\x01\x02"))

    def test_all_constraints_must_hold(self) -> None:
        byte_filter = ByteFilter([(0, 1), (2, 3)])
        self.assertTrue(byte_filter.matches(b"\x01\x00\x03"))
        self.assertFalse(byte_filter.matches(b"\x01\x00\x04"))
        self.assertFalse(byte_filter.matches(b"\x02\x00\x03"))

    def test_short_frame_is_rejected_regardless_of_bytes(self) -> None:
        byte_filter = ByteFilter([(0, 1), (5, 0)])
        self.assertEqual(byte_filter.max_offset, 5)
        self.assertFalse(byte_filter.matches(b"\x01\x00\x00\x00\x00"))
        self.assertTrue(byte_filter.matches(b"\x01\x00\x00\x00\x00\x00"))

    def test_matching_is_repeatable(self) -> None:
        byte_filter = ByteFilter([(1, 0xFF)])
        frame = b"\x00\xff"
        first = byte_filter.matches(frame)
        second = byte_filter.matches(frame)
        self.assertEqual(first, second)
        self.assertEqual(byte_filter.constraints, ((1, 0xFF),))

    def test_from_strings(self) -> None:
        byte_filter = ByteFilter.from_strings(["12:8", "13:0"])
        self.assertEqual(byte_filter.constraints, ((12, 8), (13, 0)))
        self.assertEqual(len(byte_filter), 2)
        self.assertEqual(repr(byte_filter), "ByteFilter(12:8 13:0)")

    def test_from_strings_rejects_malformed_items(self) -> None:
        for item in ("12", "a:1", "1:b", ":"):
            with self.subTest(item=item):
                with self.assertRaises(ValueError):
                    ByteFilter.from_strings([item])

    def test_out_of_range_constraints(self) -> None:
        with self.assertRaises(ValueError):
            ByteFilter([(-1, 0)])
        with self.assertRaises(ValueError):
            ByteFilter([(0, 256)])


if __name__ == "__main__":  # pragma: no cover - convenience
    unittest.main()
