import gc
import threading
import time

import pytest

from ingestion.blockchainetl.errors import ChannelClosed, ChannelTimeout
from ingestion.blockchainetl.streaming.channel import bounded


def test_rejects_non_positive_capacity():
    with pytest.raises(ValueError, match="capacity must be greater than 0"):
        bounded(0)


def test_items_arrive_in_send_order():
    sender, receiver = bounded(8)
    for i in range(5):
        sender.send(i)

    assert len(receiver) == 5
    assert [receiver.try_recv() for _ in range(5)] == [0, 1, 2, 3, 4]


def test_try_recv_returns_none_while_senders_alive():
    sender, receiver = bounded(4)
    assert receiver.try_recv() is None
    assert not sender.closed


def test_try_recv_raises_once_drained_and_senders_closed():
    sender, receiver = bounded(4)
    sender.send("a")
    sender.close()

    assert receiver.try_recv() == "a"
    with pytest.raises(ChannelClosed):
        receiver.try_recv()


def test_clone_keeps_channel_open_until_every_sender_closes():
    sender, receiver = bounded(4)
    clone = sender.clone()
    sender.close()

    assert receiver.try_recv() is None

    clone.send(1)
    clone.close()
    assert receiver.try_recv() == 1
    with pytest.raises(ChannelClosed):
        receiver.try_recv()


def test_send_on_closed_sender_raises():
    sender, _receiver = bounded(1)
    sender.close()
    with pytest.raises(ChannelClosed):
        sender.send(1)


def test_recv_times_out():
    sender, receiver = bounded(1)
    start = time.monotonic()
    with pytest.raises(ChannelTimeout):
        receiver.recv(timeout=0.2)
    assert time.monotonic() - start >= 0.19
    sender.close()


def test_channel_timeout_is_a_timeout_error():
    _sender, receiver = bounded(1)
    with pytest.raises(TimeoutError):
        receiver.recv(timeout=0.01)


def test_full_channel_blocks_sender_until_consumer_takes_an_item():
    sender, receiver = bounded(1)
    sender.send("first")
    sent_second = threading.Event()

    def produce():
        sender.send("second")
        sent_second.set()

    thread = threading.Thread(target=produce, daemon=True)
    thread.start()

    assert not sent_second.wait(0.3)
    assert receiver.recv(timeout=1) == "first"
    assert sent_second.wait(2)
    assert receiver.recv(timeout=1) == "second"


def test_closing_receiver_unblocks_and_fails_blocked_sender():
    sender, receiver = bounded(1)
    sender.send("fill")
    errors = []

    def produce():
        try:
            sender.send("blocked")
        except ChannelClosed as e:
            errors.append(e)

    thread = threading.Thread(target=produce, daemon=True)
    thread.start()
    time.sleep(0.2)
    receiver.close()
    thread.join(timeout=2)

    assert not thread.is_alive()
    assert len(errors) == 1
    assert receiver.closed


def test_dropping_receiver_closes_channel():
    sender, receiver = bounded(2)
    del receiver
    gc.collect()

    with pytest.raises(ChannelClosed):
        sender.send(1)


def test_iteration_ends_when_senders_close():
    sender, receiver = bounded(4)

    def produce():
        with sender:
            for i in range(3):
                sender.send(i)

    threading.Thread(target=produce, daemon=True).start()
    assert list(receiver) == [0, 1, 2]
