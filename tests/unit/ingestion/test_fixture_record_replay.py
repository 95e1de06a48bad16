import json
import time

import pytest

from ingestion.blockchainetl.errors import ChannelClosed, FixtureError
from ingestion.blockchainetl.exporters.fixture_exporter import FixtureExporter, RecordingReceiver
from ingestion.blockchainetl.streaming.channel import bounded
from ingestion.blockchainetl.streaming.fixture_replay import load_fixture, replay_fixture
from tests.factories import make_block


def _sample_blocks():
    return [
        make_block(1, chain_id=1, tx_count=2),
        make_block(2, chain_id=8453, tx_count=1, l1_origin_number=19_000_000),
        make_block(3, chain_id=1),
    ]


def test_flush_writes_pretty_json_array_and_creates_directories(tmp_path):
    path = tmp_path / "nested" / "dir" / "fixture.json"
    exporter = FixtureExporter(path)
    exporter.export_items(_sample_blocks())

    exporter.flush()

    text = path.read_text(encoding="utf-8")
    assert text.startswith("[\n  {")
    data = json.loads(text)
    assert [item["number"] for item in data] == [1, 2, 3]
    assert data[0]["transactions"][0]["from"].lower() == "0xf39fd6e51aad88f6f4ce6ab8827279cfffb92266"


def test_recording_receiver_records_what_it_hands_out(tmp_path):
    exporter = FixtureExporter(tmp_path / "fixture.json")
    sender, receiver = bounded(8)
    for block in _sample_blocks():
        sender.send(block)
    sender.close()

    recording = RecordingReceiver(receiver, exporter)
    received = [recording.try_recv(), recording.recv(timeout=1), recording.try_recv()]

    assert len(exporter) == 3
    assert [block.number for block in received] == [1, 2, 3]
    with pytest.raises(ChannelClosed):
        recording.try_recv()
    assert len(exporter) == 3


def test_round_trip_replays_every_payload_in_order_and_spaced(tmp_path):
    blocks = _sample_blocks()
    path = tmp_path / "fixture.json"
    exporter = FixtureExporter(path)
    exporter.export_items(blocks)
    exporter.flush()

    receiver = replay_fixture(path, interval_seconds=0.05)
    replayed, arrivals = [], []
    for payload in receiver:
        replayed.append(payload)
        arrivals.append(time.monotonic())

    assert replayed == blocks
    assert [b.l1_origin_number for b in replayed] == [None, 19_000_000, None]
    gaps = [later - earlier for earlier, later in zip(arrivals, arrivals[1:])]
    assert all(gap >= 0.04 for gap in gaps)


def test_replay_stops_when_receiver_closed(tmp_path):
    path = tmp_path / "fixture.json"
    exporter = FixtureExporter(path)
    exporter.export_items(make_block(n) for n in range(100))
    exporter.flush()

    receiver = replay_fixture(path, interval_seconds=0.01, capacity=1)
    assert receiver.recv(timeout=2).number == 0
    receiver.close()
    assert receiver.closed


def test_missing_fixture_raises(tmp_path):
    with pytest.raises(FixtureError, match="Cannot read fixture"):
        replay_fixture(tmp_path / "missing.json")


@pytest.mark.parametrize("content", ["not json", "{}", '[{"number": 1}]'])
def test_malformed_fixture_raises(tmp_path, content):
    path = tmp_path / "bad.json"
    path.write_text(content, encoding="utf-8")
    with pytest.raises(FixtureError, match="Malformed fixture"):
        load_fixture(path)


def test_compact_json_is_accepted(tmp_path):
    path = tmp_path / "compact.json"
    path.write_text(json.dumps([make_block(7).model_dump(mode="json", by_alias=True)]), encoding="utf-8")
    assert [block.number for block in load_fixture(path)] == [7]
