"""
File: app/services/dedup.py
Project: GST WhatsApp Relay

Purpose:
Process-lifetime record of inbound message ids already routed (polling mode).

Design rules:
- In memory only; a restart forgets everything
- Unbounded unless max_size is given, then the oldest ids are evicted first
- Touched only from the poller tick, so no locking
"""

from __future__ import annotations

from collections import OrderedDict


class ProcessedMessageSet:
    def __init__(self, max_size: int | None = None) -> None:
        if max_size is not None and max_size <= 0:
            raise ValueError("max_size must be positive")
        self._max_size = max_size
        self._ids: OrderedDict[str, None] = OrderedDict()

    def __contains__(self, message_id: object) -> bool:
        return message_id in self._ids

    def __len__(self) -> int:
        return len(self._ids)

    def add(self, message_id: str) -> bool:
        """
        Returns:
            True  -> id was new and is now recorded
            False -> id was already present
        """
        if message_id in self._ids:
            return False

        self._ids[message_id] = None
        if self._max_size is not None and len(self._ids) > self._max_size:
            self._ids.popitem(last=False)
        return True
