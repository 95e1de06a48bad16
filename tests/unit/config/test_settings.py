import pytest

from config.chain_configs import load_fetcher_configs, parse_chain_rpc_urls
from config.settings import Settings


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in (
        "RPC_URL",
        "CHAIN_ID",
        "CHAIN_NAME",
        "CHAIN_RPC_URLS",
        "BACKFILL_COUNT",
        "POLL_INTERVAL_SECONDS",
        "MAX_DRAIN_PER_CYCLE",
        "LOG_LEVEL",
        "LOG_FILE",
        "FIXTURE_RECORD_PATH",
        "FIXTURE_REPLAY_INTERVAL_SECONDS",
    ):
        monkeypatch.delenv(name, raising=False)


def test_defaults():
    settings = Settings(_env_file=None)

    assert settings.chains.rpc_url == "http://127.0.0.1:8545"
    assert settings.chains.chain_id == 1
    assert settings.streamer.backfill_count == 20
    assert settings.streamer.poll_interval_seconds == 2.0
    assert settings.streamer.channel_capacity == 64
    assert settings.fixture.replay_interval_seconds == 0.05


def test_flat_env_vars_populate_sections(monkeypatch):
    monkeypatch.setenv("CHAIN_ID", "8453")
    monkeypatch.setenv("RPC_URL", "https://base.example")
    monkeypatch.setenv("BACKFILL_COUNT", "5")

    settings = Settings(_env_file=None)

    assert settings.chains.chain_id == 8453
    assert settings.streamer.backfill_count == 5
    configs = load_fetcher_configs(settings)
    assert len(configs) == 1
    assert configs[0].chain.name == "base"
    assert configs[0].chain.is_op_stack


def test_chain_rpc_urls_define_ordered_chains(monkeypatch):
    monkeypatch.setenv("CHAIN_RPC_URLS", "10=https://op.example,\n1=https://eth.example")

    configs = load_fetcher_configs(Settings(_env_file=None))

    assert [config.chain.id for config in configs] == [10, 1]
    assert str(configs[1].rpc_endpoint).startswith("https://eth.example")


@pytest.mark.parametrize(
    "value, message",
    [
        ("1https://eth.example", "expected <chain_id>=<url>"),
        ("abc=https://eth.example", "Invalid chain id"),
        ("1=not a url", "Invalid configuration"),
        ("1=https://a.example,1=https://b.example", "more than once"),
    ],
)
def test_malformed_entries_rejected(value, message):
    with pytest.raises(ValueError, match=message):
        parse_chain_rpc_urls(value)


def test_every_section_reads_its_flat_env_vars(monkeypatch):
    monkeypatch.setenv("LOG_LEVEL", "DEBUG")
    monkeypatch.setenv("LOG_FILE", "/tmp/ingest.log")
    monkeypatch.setenv("POLL_INTERVAL_SECONDS", "0.5")
    monkeypatch.setenv("MAX_DRAIN_PER_CYCLE", "8")
    monkeypatch.setenv("FIXTURE_RECORD_PATH", "fixtures/out.json")
    monkeypatch.setenv("FIXTURE_REPLAY_INTERVAL_SECONDS", "0.2")

    settings = Settings(_env_file=None)

    assert settings.app.log_level == "DEBUG"
    assert settings.app.log_file == "/tmp/ingest.log"
    assert settings.streamer.poll_interval_seconds == 0.5
    assert settings.streamer.max_drain_per_cycle == 8
    assert settings.fixture.record_path == "fixtures/out.json"
    assert settings.fixture.replay_interval_seconds == 0.2


def test_rpc_url_env_var_is_used_when_no_chain_list(monkeypatch):
    monkeypatch.setenv("RPC_URL", "https://node.example")
    monkeypatch.setenv("CHAIN_ID", "31337")

    configs = load_fetcher_configs(Settings(_env_file=None))

    assert [config.chain.id for config in configs] == [31337]
    assert str(configs[0].rpc_endpoint).startswith("https://node.example")
