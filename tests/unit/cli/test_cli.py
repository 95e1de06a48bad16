import importlib
from unittest.mock import MagicMock, patch

import pytest
from click.testing import CliRunner

from cli import cli
from ingestion.blockchainetl.exporters.fixture_exporter import FixtureExporter
from ingestion.blockchainetl.streaming.channel import bounded
from tests.factories import make_block

# The package re-exports each command under its module's name
stream_blocks_module = importlib.import_module("cli.stream_blocks")
replay_fixture_module = importlib.import_module("cli.replay_fixture")


@pytest.fixture(autouse=True)
def no_process_wide_setup():
    with patch.object(stream_blocks_module, "configure_signals"), patch.object(
        stream_blocks_module, "configure_logging"
    ), patch.object(replay_fixture_module, "configure_signals"), patch.object(
        replay_fixture_module, "configure_logging"
    ):
        yield


def _finished_receiver(blocks):
    sender, receiver = bounded(len(blocks) + 1)
    for block in blocks:
        sender.send(block)
    sender.close()
    return receiver


def test_replay_fixture_prints_every_payload(tmp_path):
    path = tmp_path / "fixture.json"
    exporter = FixtureExporter(path)
    exporter.export_items([make_block(1), make_block(2, chain_id=10, l1_origin_number=7)])
    exporter.flush()

    result = CliRunner().invoke(cli, ["replay_fixture", "--fixture", str(path), "--interval", "0"])

    assert result.exit_code == 0, result.output
    assert "[mainnet] block 1" in result.output
    assert "[optimism] block 2" in result.output


def test_replay_fixture_rejects_malformed_file(tmp_path):
    path = tmp_path / "bad.json"
    path.write_text("{}", encoding="utf-8")

    result = CliRunner().invoke(cli, ["replay_fixture", "--fixture", str(path)])

    assert result.exit_code != 0
    assert "Malformed fixture" in result.output


def test_stream_blocks_fans_in_and_records(tmp_path):
    record_path = tmp_path / "out" / "recorded.json"
    receiver = _finished_receiver([make_block(1), make_block(2)])

    with patch.object(stream_blocks_module, "fan_in", return_value=receiver) as mock_fan_in, patch.object(
        stream_blocks_module, "atexit"
    ) as mock_atexit:
        result = CliRunner().invoke(
            cli,
            [
                "stream_blocks",
                "--provider-uri",
                "http://127.0.0.1:8545",
                "--chain-id",
                "31337",
                "--record",
                str(record_path),
            ],
        )

    assert result.exit_code == 0, result.output
    configs = mock_fan_in.call_args.args[0]
    assert [config.chain.id for config in configs] == [31337]
    assert "block 1" in result.output and "block 2" in result.output

    flush = mock_atexit.register.call_args.args[0]
    flush()
    assert record_path.exists()


def test_stream_blocks_rejects_bad_provider_uri():
    with patch.object(stream_blocks_module, "fan_in", MagicMock()) as mock_fan_in:
        result = CliRunner().invoke(cli, ["stream_blocks", "--provider-uri", "not a url"])

    assert result.exit_code != 0
    mock_fan_in.assert_not_called()
