"""Consume-once mapping from packet identity to outbound timestamp."""

from __future__ import annotations

import logging
from typing import Dict, Iterable, Iterator, Optional, Tuple

from .packet_identity import PacketIdentity
from .packet_time import PacketTime

logger = logging.getLogger(__name__)


class CorrelationTable:
    """Outbound timestamps keyed by identity, each matchable at most once.

    Inserting an identity that is already present replaces its timestamp.
    :meth:`take` removes the entry it returns, so a second inbound packet
    with the same identity finds nothing.
    """

    __slots__ = ("_entries", "overwrites")

    def __init__(self) -> None:
        self._entries: Dict[PacketIdentity, PacketTime] = {}
        self.overwrites = 0

    @classmethod
    def from_packets(
        cls, packets: Iterable[Tuple[PacketIdentity, PacketTime]]
    ) -> "CorrelationTable":
        table = cls()
        for identity, timestamp in packets:
            table.insert(identity, timestamp)
        if table.overwrites:
            logger.debug("%d outbound identities were seen more than once", table.overwrites)
        return table

    # ------------------------------------------------------------------
    def insert(self, identity: PacketIdentity, timestamp: PacketTime) -> None:
        if identity in self._entries:
            self.overwrites += 1
        self._entries[identity] = timestamp

    def take(self, identity: PacketIdentity) -> Optional[PacketTime]:
        return self._entries.pop(identity, None)

    def remaining(self) -> Iterator[Tuple[PacketIdentity, PacketTime]]:
        """Entries that have not been taken yet."""
        return iter(list(self._entries.items()))

    # ------------------------------------------------------------------
    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, identity: object) -> bool:
        return identity in self._entries


__all__ = ["CorrelationTable"]
