import time
from typing import Any, Optional

from ingestion.blockchainetl.errors import ChannelClosed
from utils.logger_utils import get_logger

logger = get_logger("Stream Consumer")


class StreamConsumer(object):
    """
    Polls a receiver without blocking, the way a frame-driven UI would.

    Each cycle takes at most `max_drain_per_cycle` payloads so one busy chain
    cannot monopolize a cycle, then sleeps `idle_seconds` if nothing arrived.
    """

    def __init__(
        self,
        receiver: Any,
        item_exporter: Any,
        max_drain_per_cycle: int = 32,
        idle_seconds: float = 0.1,
        max_items: Optional[int] = None,
    ):
        if max_drain_per_cycle <= 0:
            raise ValueError(f"max_drain_per_cycle must be greater than 0, got {max_drain_per_cycle}")
        self.receiver = receiver
        self.item_exporter = item_exporter
        self.max_drain_per_cycle = max_drain_per_cycle
        self.idle_seconds = idle_seconds
        self.max_items = max_items
        self.consumed = 0

    def run(self) -> int:
        """Consumes until the stream ends (or max_items is reached). Returns the number of payloads consumed."""
        self.item_exporter.open()
        try:
            while self.max_items is None or self.consumed < self.max_items:
                try:
                    drained = self.drain_once()
                except ChannelClosed:
                    logger.info(f"Stream ended after {self.consumed} payloads")
                    break
                if drained == 0:
                    time.sleep(self.idle_seconds)
        finally:
            self.item_exporter.close()
        return self.consumed

    def drain_once(self) -> int:
        drained = 0
        while drained < self.max_drain_per_cycle:
            if self.max_items is not None and self.consumed >= self.max_items:
                break
            item = self.receiver.try_recv()
            if item is None:
                break
            self.item_exporter.export_item(item)
            drained += 1
            self.consumed += 1
        return drained
