import pathlib
import threading
import time
from typing import List, Sequence, Union

from pydantic import TypeAdapter, ValidationError

from constants.constants import CHANNEL_CAPACITY, REPLAY_INTERVAL_SECONDS
from ingestion.blockchainetl.errors import ChannelClosed, FixtureError
from ingestion.blockchainetl.streaming.channel import Receiver, Sender, bounded
from ingestion.ethereumetl.models.block import BlockPayload
from utils.logger_utils import get_logger

logger = get_logger("Fixture Replay")

_PAYLOADS_ADAPTER = TypeAdapter(List[BlockPayload])


def load_fixture(path: Union[str, pathlib.Path]) -> List[BlockPayload]:
    """
    Reads a recorded fixture file.

    Raises:
        FixtureError: the file cannot be read or is not a JSON array of block payloads.
    """
    try:
        raw = pathlib.Path(path).read_text(encoding="utf-8")
    except OSError as e:
        raise FixtureError(f"Cannot read fixture {path}: {e}") from e

    try:
        return _PAYLOADS_ADAPTER.validate_json(raw)
    except ValidationError as e:
        raise FixtureError(f"Malformed fixture {path}: {e}") from e


def replay_fixture(
    path: Union[str, pathlib.Path],
    interval_seconds: float = REPLAY_INTERVAL_SECONDS,
    capacity: int = CHANNEL_CAPACITY,
) -> Receiver[BlockPayload]:
    """
    Emits the payloads recorded in `path`, in file order, with `interval_seconds` between two emissions.

    The file is parsed before this returns, so a bad fixture fails here and
    not on the background thread. The receiver reports closure after the last payload.
    """
    payloads = load_fixture(path)
    logger.info(f"Replaying {len(payloads)} payloads from {path}")

    sender, receiver = bounded(capacity)
    thread = threading.Thread(
        target=_emit,
        args=(payloads, sender, interval_seconds),
        name="fixture-replay",
        daemon=True,
    )
    thread.start()
    return receiver


def _emit(payloads: Sequence[BlockPayload], sender: Sender[BlockPayload], interval_seconds: float) -> None:
    try:
        for index, payload in enumerate(payloads):
            if index > 0:
                time.sleep(interval_seconds)
            sender.send(payload)
    except ChannelClosed:
        logger.debug("Receiver closed, stopping replay")
    finally:
        sender.close()
