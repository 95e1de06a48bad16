# MIT License
#
# Copyright (c) 2018 Evgeny Medvedev, evge.medvedev@gmail.com
#
# Permission is hereby granted, free of charge, to any person obtaining a copy
# of this software and associated documentation files (the "Software"), to deal
# in the Software without restriction, including without limitation the rights
# to use, copy, modify, merge, publish, distribute, sublicense, and/or sell
# copies of the Software, and to permit persons to whom the Software is
# furnished to do so, subject to the following conditions:
#
# The above copyright notice and this permission notice shall be included in all
# copies or substantial portions of the Software.
#
# THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND, EXPRESS OR
# IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF MERCHANTABILITY,
# FITNESS FOR A PARTICULAR PURPOSE AND NONINFRINGEMENT. IN NO EVENT SHALL THE
# AUTHORS OR COPYRIGHT HOLDERS BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER
# LIABILITY, WHETHER IN AN ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING FROM,
# OUT OF OR IN CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS IN THE
# SOFTWARE.


import atexit
from typing import List, Optional

import click

from config.chain_configs import build_fetcher_config, load_fetcher_configs
from config.settings import settings
from ingestion.blockchainetl.exporters.console_item_exporter import ConsoleItemExporter
from ingestion.blockchainetl.exporters.fixture_exporter import FixtureExporter, RecordingReceiver
from ingestion.blockchainetl.streaming.stream_consumer import StreamConsumer
from ingestion.ethereumetl.fetchers.evm_fetcher import EvmFetcher
from ingestion.ethereumetl.models.chain import FetcherConfig
from ingestion.ethereumetl.streaming.fan_in import fan_in
from utils.logger_utils import configure_logging, get_logger
from utils.signal_utils import configure_signals

logger = get_logger(__name__)


@click.command(context_settings=dict(help_option_names=["-h", "--help"]))
@click.option(
    "-p",
    "--provider-uri",
    default=None,
    type=str,
    help="JSON-RPC URL of a single chain to stream. Overrides RPC_URL / CHAIN_RPC_URLS.",
)
@click.option(
    "-c",
    "--chain-id",
    default=None,
    type=int,
    help="Chain id served by --provider-uri. Defaults to CHAIN_ID.",
)
@click.option(
    "-r",
    "--record",
    default=settings.fixture.record_path,
    type=click.Path(dir_okay=False),
    help="Record every streamed payload to this fixture file on exit.",
)
@click.option(
    "--backfill-count",
    default=settings.streamer.backfill_count,
    show_default=True,
    type=click.IntRange(min=1),
    help="How many recent blocks to fetch per chain before polling.",
)
@click.option(
    "--poll-interval",
    default=settings.streamer.poll_interval_seconds,
    show_default=True,
    type=click.FloatRange(min=0, min_open=True),
    help="How many seconds to sleep between two head polls.",
)
@click.option(
    "--max-drain",
    default=settings.streamer.max_drain_per_cycle,
    show_default=True,
    type=click.IntRange(min=1),
    help="Maximum payloads consumed per cycle.",
)
@click.option("--max-items", default=None, type=click.IntRange(min=1), help="Stop after this many payloads.")
@click.option("-v", "--verbose", is_flag=True, default=False, help="Print full payloads as JSON.")
@click.option("--log-file", default=settings.app.log_file, type=str, help="Log file")
@click.option("--log-level", default=settings.app.log_level, show_default=True, type=str, help="Log level")
def stream_blocks(
    provider_uri: Optional[str],
    chain_id: Optional[int],
    record: Optional[str],
    backfill_count: int,
    poll_interval: float,
    max_drain: int,
    max_items: Optional[int],
    verbose: bool,
    log_file: Optional[str],
    log_level: str,
):
    """Streams recent and new blocks of one or more EVM chains to the console."""
    configure_logging(log_file, log_level)
    configure_signals()

    try:
        configs = resolve_fetcher_configs(provider_uri, chain_id)
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="--provider-uri / CHAIN_RPC_URLS") from e

    logger.info(f"Streaming chains: {', '.join(f'{c.chain} ({c.rpc_endpoint})' for c in configs)}")

    fetcher = EvmFetcher(
        backfill_count=backfill_count,
        poll_interval_seconds=poll_interval,
        channel_capacity=settings.streamer.channel_capacity,
    )
    receiver = fan_in(configs, fetcher=fetcher, capacity=settings.streamer.channel_capacity)

    if record:
        recorder = FixtureExporter(record)
        # Runs on normal exit, Ctrl-C and SIGTERM (via sys.exit)
        atexit.register(recorder.flush)
        receiver = RecordingReceiver(receiver, recorder)

    consumer = StreamConsumer(
        receiver=receiver,
        item_exporter=ConsoleItemExporter(verbose=verbose),
        max_drain_per_cycle=max_drain,
        max_items=max_items,
    )
    try:
        consumer.run()
    except KeyboardInterrupt:
        logger.info("Streaming interrupted by user. Shutting down gracefully...")
    finally:
        receiver.close()


def resolve_fetcher_configs(provider_uri: Optional[str], chain_id: Optional[int]) -> List[FetcherConfig]:
    if provider_uri:
        resolved_chain_id = chain_id if chain_id is not None else settings.chains.chain_id
        return [build_fetcher_config(resolved_chain_id, provider_uri)]

    configs = load_fetcher_configs(settings)
    if chain_id is not None:
        configs = [config for config in configs if config.chain.id == chain_id]
        if not configs:
            raise ValueError(f"Chain {chain_id} is not configured")
    return configs
