import queue
import threading
import time
import weakref
from typing import Generic, Iterator, Optional, Tuple, TypeVar

from constants.constants import CHANNEL_CAPACITY
from ingestion.blockchainetl.errors import ChannelClosed, ChannelTimeout

T = TypeVar("T")

# Granularity at which blocked senders/receivers re-check for the other side going away
_WAKEUP_SECONDS = 0.1


class _ChannelState(Generic[T]):
    def __init__(self, capacity: int):
        if capacity <= 0:
            raise ValueError(f"Channel capacity must be greater than 0, got {capacity}")
        self.capacity = capacity
        self.queue: "queue.Queue[T]" = queue.Queue(maxsize=capacity)
        self.receiver_closed = threading.Event()
        self._senders = 0
        self._lock = threading.Lock()

    def add_sender(self) -> None:
        with self._lock:
            self._senders += 1

    def drop_sender(self) -> None:
        with self._lock:
            self._senders -= 1

    def is_drained_and_disconnected(self) -> bool:
        # Senders put before they close, so once no sender is left the queue size is final.
        with self._lock:
            disconnected = self._senders == 0
        return disconnected and self.queue.empty()


class Sender(Generic[T]):
    """
    Producing half of a bounded channel.

    send() blocks while the channel is full; that is the only backpressure in
    the pipeline. Each sender (and each clone) must be closed, or garbage
    collected, before the receiver can observe the end of the stream.
    """

    def __init__(self, state: _ChannelState[T]):
        self._state = state
        state.add_sender()
        self._finalizer = weakref.finalize(self, state.drop_sender)

    def send(self, item: T) -> None:
        if not self._finalizer.alive:
            raise ChannelClosed("send on a closed sender")
        while True:
            if self._state.receiver_closed.is_set():
                raise ChannelClosed("receiver has been closed")
            try:
                self._state.queue.put(item, timeout=_WAKEUP_SECONDS)
                return
            except queue.Full:
                continue

    def clone(self) -> "Sender[T]":
        return Sender(self._state)

    def close(self) -> None:
        self._finalizer()

    @property
    def closed(self) -> bool:
        return not self._finalizer.alive

    def __enter__(self) -> "Sender[T]":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()


class Receiver(Generic[T]):
    """
    Consuming half of a bounded channel. Single consumer.

    Closing the receiver (explicitly or by dropping the last reference to it)
    is the shutdown signal: every upstream send() then raises ChannelClosed.
    """

    def __init__(self, state: _ChannelState[T]):
        self._state = state
        self._finalizer = weakref.finalize(self, state.receiver_closed.set)

    @property
    def capacity(self) -> int:
        return self._state.capacity

    @property
    def closed(self) -> bool:
        return not self._finalizer.alive

    def __len__(self) -> int:
        return self._state.queue.qsize()

    def try_recv(self) -> Optional[T]:
        """
        Take the next item without blocking.

        Returns None when nothing is buffered right now. Raises ChannelClosed
        once every sender is gone and the buffer is drained.
        """
        try:
            return self._state.queue.get_nowait()
        except queue.Empty:
            if self._state.is_drained_and_disconnected():
                raise ChannelClosed("all senders have been closed")
            return None

    def recv(self, timeout: Optional[float] = None) -> T:
        """
        Block until the next item arrives.

        Raises ChannelTimeout if `timeout` seconds pass without an item and
        ChannelClosed once every sender is gone and the buffer is drained.
        """
        deadline = None if timeout is None else time.monotonic() + timeout
        while True:
            wait = _WAKEUP_SECONDS
            if deadline is not None:
                wait = min(wait, max(0.0, deadline - time.monotonic()))
            try:
                return self._state.queue.get(timeout=wait)
            except queue.Empty:
                if self._state.is_drained_and_disconnected():
                    raise ChannelClosed("all senders have been closed")
                if deadline is not None and time.monotonic() >= deadline:
                    raise ChannelTimeout(f"no item received within {timeout}s")

    def close(self) -> None:
        self._finalizer()

    def __iter__(self) -> Iterator[T]:
        while True:
            try:
                yield self.recv()
            except ChannelClosed:
                return


def bounded(capacity: int = CHANNEL_CAPACITY) -> Tuple[Sender[T], Receiver[T]]:
    """Create a bounded single-consumer channel and return its (sender, receiver) pair."""
    state: _ChannelState[T] = _ChannelState(capacity)
    return Sender(state), Receiver(state)
