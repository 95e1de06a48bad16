import json
import pathlib
import threading
from typing import Iterable, Iterator, List, Optional, Union

from ingestion.blockchainetl.streaming.channel import Receiver
from ingestion.ethereumetl.mappers.block_mapper import EthBlockMapper
from ingestion.ethereumetl.models.block import BlockPayload
from utils.file_utils import smart_open
from utils.logger_utils import get_logger

logger = get_logger("Fixture Exporter")


class FixtureExporter(object):
    """
    Buffers block payloads in memory and writes them as one JSON array on flush().

    Nothing reaches disk before flush(); payloads buffered when the process
    dies without flushing are lost.
    """

    def __init__(self, path: Union[str, pathlib.Path]):
        self.path = pathlib.Path(path)
        self._items: List[BlockPayload] = []
        self._lock = threading.Lock()

    def open(self) -> None:
        pass

    def export_items(self, items: Iterable[BlockPayload]) -> None:
        for item in items:
            self.export_item(item)

    def export_item(self, item: BlockPayload) -> None:
        with self._lock:
            self._items.append(item)

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)

    def flush(self) -> None:
        with self._lock:
            snapshot = list(self._items)

        data = [EthBlockMapper.block_to_dict(item) for item in snapshot]
        with smart_open(self.path, "w") as fh:
            fh.write(json.dumps(data, indent=2))
        logger.info(f"Recorded {len(snapshot)} payloads to {self.path}")

    def close(self) -> None:
        self.flush()


class RecordingReceiver(object):
    """Receiving tap: hands payloads out unchanged and records each one it hands out."""

    def __init__(self, receiver: Receiver[BlockPayload], exporter: FixtureExporter):
        self._receiver = receiver
        self._exporter = exporter

    @property
    def capacity(self) -> int:
        return self._receiver.capacity

    @property
    def closed(self) -> bool:
        return self._receiver.closed

    def __len__(self) -> int:
        return len(self._receiver)

    def try_recv(self) -> Optional[BlockPayload]:
        item = self._receiver.try_recv()
        if item is not None:
            self._exporter.export_item(item)
        return item

    def recv(self, timeout: Optional[float] = None) -> BlockPayload:
        item = self._receiver.recv(timeout)
        self._exporter.export_item(item)
        return item

    def close(self) -> None:
        self._receiver.close()

    def __iter__(self) -> Iterator[BlockPayload]:
        for item in self._receiver:
            self._exporter.export_item(item)
            yield item
