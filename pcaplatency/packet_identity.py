"""Protocol-aware identity keys used to match packets across captures."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Union

import dpkt

from .utils import format_ip

logger = logging.getLogger(__name__)


class MalformedPacketError(ValueError):
    """Raised when IPv4 announces TCP or ICMP but the header does not parse."""


@dataclass(frozen=True)
class TcpIdentity:
    """TCP segment keyed by its address/port pair plus sequence and ack."""

    src_ip: bytes
    dst_ip: bytes
    src_port: int
    dst_port: int
    sequence: int
    ack: int

    def __str__(self) -> str:
        return (
            f"tcp {format_ip(self.src_ip)}:{self.src_port} -> "
            f"{format_ip(self.dst_ip)}:{self.dst_port} seq={self.sequence} ack={self.ack}"
        )


@dataclass(frozen=True)
class IcmpIdentity:
    """ICMP message keyed by its addresses and checksum."""

    src_ip: bytes
    dst_ip: bytes
    checksum: int

    def __str__(self) -> str:
        return f"icmp {format_ip(self.src_ip)} -> {format_ip(self.dst_ip)} sum=0x{self.checksum:04x}"


PacketIdentity = Union[TcpIdentity, IcmpIdentity]


def identity_from_frame(frame: bytes) -> Optional[PacketIdentity]:
    """Derive the identity of an Ethernet/IPv4 TCP or ICMP frame.

    Returns ``None`` for frames outside the supported set: anything that is
    not untagged Ethernet carrying an unfragmented IPv4 datagram, and IPv4
    datagrams with a protocol other than TCP or ICMP.

    Raises :class:`MalformedPacketError` when the IPv4 header announces TCP
    or ICMP but the transport header cannot be parsed.
    """
    ip = _ipv4_payload(frame)
    if ip is None:
        return None

    if ip.p == dpkt.ip.IP_PROTO_TCP:
        tcp = _transport(ip, dpkt.tcp.TCP, "TCP")
        return TcpIdentity(
            src_ip=bytes(ip.src),
            dst_ip=bytes(ip.dst),
            src_port=tcp.sport,
            dst_port=tcp.dport,
            sequence=tcp.seq,
            ack=tcp.ack,
        )

    if ip.p == dpkt.ip.IP_PROTO_ICMP:
        icmp = _transport(ip, dpkt.icmp.ICMP, "ICMP")
        return IcmpIdentity(
            src_ip=bytes(ip.src),
            dst_ip=bytes(ip.dst),
            checksum=icmp.sum,
        )

    return None


def _ipv4_payload(frame: bytes) -> Optional[dpkt.ip.IP]:
    try:
        ethernet = dpkt.ethernet.Ethernet(frame)
    except (dpkt.UnpackError, ValueError):
        logger.debug("Skipping undecodable Ethernet frame", exc_info=True)
        return None

    if ethernet.type != dpkt.ethernet.ETH_TYPE_IP:
        return None
    if getattr(ethernet, "vlan_tags", None) or getattr(ethernet, "mpls_labels", None):
        return None

    ip = ethernet.data
    if not isinstance(ip, dpkt.ip.IP):
        logger.debug("Skipping frame with undecodable IPv4 header")
        return None
    if ip.v != 4:
        return None
    if ip.mf or ip.offset:
        return None
    return ip


def _transport(ip: dpkt.ip.IP, header_cls, name: str):
    payload = ip.data
    if isinstance(payload, header_cls):
        return payload
    try:
        return header_cls(bytes(payload))
    except (dpkt.UnpackError, ValueError) as exc:
        raise MalformedPacketError(
            f"IPv4 {format_ip(ip.src)} -> {format_ip(ip.dst)} declares {name} "
            f"but carries an unparsable {len(payload)} byte header"
        ) from exc


__all__ = [
    "IcmpIdentity",
    "MalformedPacketError",
    "PacketIdentity",
    "TcpIdentity",
    "identity_from_frame",
]
