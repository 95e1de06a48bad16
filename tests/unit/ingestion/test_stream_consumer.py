from unittest.mock import MagicMock

import pytest

from ingestion.blockchainetl.exporters.console_item_exporter import ConsoleItemExporter
from ingestion.blockchainetl.streaming.channel import bounded
from ingestion.blockchainetl.streaming.stream_consumer import StreamConsumer
from tests.factories import make_block


def test_drain_once_respects_cap():
    sender, receiver = bounded(16)
    for n in range(10):
        sender.send(make_block(n))
    exporter = MagicMock()

    consumer = StreamConsumer(receiver, exporter, max_drain_per_cycle=4)

    assert consumer.drain_once() == 4
    assert consumer.drain_once() == 4
    assert consumer.drain_once() == 2
    assert consumer.drain_once() == 0
    assert exporter.export_item.call_count == 10


def test_run_until_stream_ends():
    sender, receiver = bounded(16)
    for n in range(5):
        sender.send(make_block(n))
    sender.close()
    exporter = MagicMock()

    assert StreamConsumer(receiver, exporter, max_drain_per_cycle=2, idle_seconds=0).run() == 5
    exporter.open.assert_called_once()
    exporter.close.assert_called_once()


def test_run_stops_at_max_items():
    sender, receiver = bounded(16)
    for n in range(10):
        sender.send(make_block(n))

    consumer = StreamConsumer(receiver, MagicMock(), max_drain_per_cycle=4, max_items=6)
    assert consumer.run() == 6
    assert len(receiver) == 4


def test_rejects_non_positive_cap():
    _sender, receiver = bounded(1)
    with pytest.raises(ValueError):
        StreamConsumer(receiver, MagicMock(), max_drain_per_cycle=0)


def test_console_exporter_prints_summary(capsys):
    exporter = ConsoleItemExporter()
    exporter.export_item(make_block(5, chain_id=8453, tx_count=1, l1_origin_number=42))

    out = capsys.readouterr().out
    assert "[base] block 5 txs=1" in out
    assert "l1_origin=42" in out
    assert exporter.exported_count == 1


def test_console_exporter_filters_chains(capsys):
    exporter = ConsoleItemExporter(chain_ids=[1])
    exporter.export_items([make_block(1, chain_id=1), make_block(2, chain_id=10)])

    out = capsys.readouterr().out
    assert "block 1" in out
    assert "block 2" not in out


def test_console_exporter_verbose_prints_json():
    line = ConsoleItemExporter.format_item(make_block(3, tx_count=1), verbose=True)
    assert '"number": 3' in line
    assert '"from":' in line
