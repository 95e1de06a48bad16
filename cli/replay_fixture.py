from typing import Optional

import click

from config.settings import settings
from ingestion.blockchainetl.errors import FixtureError
from ingestion.blockchainetl.exporters.console_item_exporter import ConsoleItemExporter
from ingestion.blockchainetl.streaming.fixture_replay import replay_fixture as replay_fixture_file
from ingestion.blockchainetl.streaming.stream_consumer import StreamConsumer
from utils.logger_utils import configure_logging, get_logger
from utils.signal_utils import configure_signals

logger = get_logger(__name__)


@click.command(context_settings=dict(help_option_names=["-h", "--help"]))
@click.option(
    "-f",
    "--fixture",
    default=settings.fixture.replay_path,
    required=settings.fixture.replay_path is None,
    type=click.Path(exists=True, dir_okay=False),
    help="Fixture file previously written by stream_blocks --record.",
)
@click.option(
    "--interval",
    default=settings.fixture.replay_interval_seconds,
    show_default=True,
    type=click.FloatRange(min=0),
    help="Seconds between two replayed payloads.",
)
@click.option(
    "--max-drain",
    default=settings.streamer.max_drain_per_cycle,
    show_default=True,
    type=click.IntRange(min=1),
    help="Maximum payloads consumed per cycle.",
)
@click.option("-v", "--verbose", is_flag=True, default=False, help="Print full payloads as JSON.")
@click.option("--log-file", default=settings.app.log_file, type=str, help="Log file")
@click.option("--log-level", default=settings.app.log_level, show_default=True, type=str, help="Log level")
def replay_fixture(
    fixture: str,
    interval: float,
    max_drain: int,
    verbose: bool,
    log_file: Optional[str],
    log_level: str,
):
    """Replays a recorded fixture to the console, as if the chains were live."""
    configure_logging(log_file, log_level)
    configure_signals()

    try:
        receiver = replay_fixture_file(fixture, interval_seconds=interval, capacity=settings.streamer.channel_capacity)
    except FixtureError as e:
        raise click.ClickException(str(e)) from e

    consumer = StreamConsumer(
        receiver=receiver,
        item_exporter=ConsoleItemExporter(verbose=verbose),
        max_drain_per_cycle=max_drain,
        idle_seconds=min(interval, 0.1) if interval > 0 else 0.01,
    )
    try:
        count = consumer.run()
        logger.info(f"Replayed {count} payloads from {fixture}")
    except KeyboardInterrupt:
        logger.info("Replay interrupted by user.")
    finally:
        receiver.close()
