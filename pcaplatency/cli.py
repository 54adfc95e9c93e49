"""Command-line entry point comparing packet times across two captures."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional, TextIO

from .byte_filter import ByteFilter
from .capture_reader import FILE_HEADER_LEN, CaptureError
from .correlator import CorrelationReport, LatencyCorrelator, LatencySample
from .latency_stats import NoMatchesError
from .packet_identity import MalformedPacketError
from .utils import DEFAULT_BUFFER_SIZE

logger = logging.getLogger(__name__)

DESCRIPTION = """\
Compare the capture time of identical packets in two pcap files.

inbound  = dump of packets sent towards the measured device or path
outbound = dump of packets received from it

Identical packets:
- TCP packets with the same source IP, destination IP, source port,
  destination port, sequence number and acknowledgement number;
- ICMP packets with the same source IP, destination IP and checksum.

Latency is the outbound timestamp minus the inbound timestamp of the same
packet, in microseconds.
"""


class SamplePrinter:
    """Writes one line per inbound packet: its latency or ``miss``."""

    def __init__(self, stream: TextIO) -> None:
        self._stream = stream

    def on_sample(self, sample: LatencySample) -> None:
        line = "miss" if sample.latency is None else str(sample.latency)
        self._stream.write(line + "\n")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pcap-latency",
        description=DESCRIPTION,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "inbound",
        type=Path,
        metavar="PCAP_IN",
        help="Path to the pcap file captured on the inbound interface.",
    )
    parser.add_argument(
        "outbound",
        type=Path,
        metavar="PCAP_OUT",
        help="Path to the pcap file captured on the outbound interface.",
    )
    parser.add_argument(
        "-p",
        "--disable-printing",
        action="store_true",
        help="Disable output of latency/miss for every packet.",
    )
    parser.add_argument(
        "-f",
        "--filter",
        dest="filters",
        nargs="+",
        action="extend",
        default=[],
        metavar="OFFSET:VALUE",
        help="Only use frames whose byte at OFFSET equals VALUE (decimal).",
    )
    parser.add_argument(
        "--buffer-size",
        type=int,
        default=DEFAULT_BUFFER_SIZE,
        metavar="BYTES",
        help="Capture read buffer size in bytes (default: 1 MiB).",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        default="INFO",
        help="Log level for diagnostic output.",
    )
    return parser


def format_summary(report: CorrelationReport) -> str:
    summary = report.summary
    return (
        f"Average latency (usec): {summary.average_latency}. "
        f"Jitter (usec): {summary.jitter}. "
        f"Packets count: {summary.packet_count}. "
        f"Misses count: {summary.miss_count} ({summary.miss_percentage}%)"
    )


def main(argv: Optional[List[str]] = None, stdout: Optional[TextIO] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    out = stdout if stdout is not None else sys.stdout

    logging.basicConfig(level=getattr(logging, args.log_level))

    try:
        byte_filter = ByteFilter.from_strings(args.filters)
    except ValueError as exc:
        parser.error(str(exc))

    if args.buffer_size <= FILE_HEADER_LEN:
        parser.error(f"--buffer-size must be larger than {FILE_HEADER_LEN} bytes.")

    correlator = LatencyCorrelator(
        args.outbound,
        args.inbound,
        byte_filter=byte_filter,
        buffer_size=args.buffer_size,
    )

    if not args.disable_printing:
        correlator.add_sample_listener(SamplePrinter(out))

    try:
        report = correlator.run()
    except (CaptureError, MalformedPacketError, NoMatchesError) as exc:
        logger.error("%s", exc)
        return 1

    out.write(format_summary(report) + "\n")
    if report.unmatched_outbound:
        logger.info(
            "%d of %d outbound packets were never seen inbound",
            report.unmatched_outbound,
            report.outbound_packets,
        )
    return 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
