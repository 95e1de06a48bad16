import asyncio
import threading
from typing import Any, Callable

from constants.constants import BACKFILL_COUNT, CHANNEL_CAPACITY, POLL_INTERVAL_SECONDS
from ingestion.blockchainetl.streaming.channel import Receiver, Sender, bounded
from ingestion.blockchainetl.streaming.streamer import Streamer
from ingestion.ethereumetl.fetchers.chain_fetcher import ChainFetcher
from ingestion.ethereumetl.models.block import BlockPayload
from ingestion.ethereumetl.models.chain import FetcherConfig
from ingestion.ethereumetl.streaming.eth_streamer_adapter import EthStreamerAdapter
from utils.logger_utils import get_logger

logger = get_logger("EVM Fetcher")


class EvmFetcher(ChainFetcher):
    """
    Fetches any EVM-compatible chain, OP Stack L2s included.

    Each spawn() gets a dedicated daemon thread running its own asyncio event
    loop, so a slow chain never starves another one. OP Stack handling (L1
    origin derivation) is driven by config.chain.is_op_stack.
    """

    def __init__(
        self,
        backfill_count: int = BACKFILL_COUNT,
        poll_interval_seconds: float = POLL_INTERVAL_SECONDS,
        channel_capacity: int = CHANNEL_CAPACITY,
        adapter_factory: Callable[[FetcherConfig], Any] = EthStreamerAdapter,
    ):
        self.backfill_count = backfill_count
        self.poll_interval_seconds = poll_interval_seconds
        self.channel_capacity = channel_capacity
        self._adapter_factory = adapter_factory

    def spawn(self, config: FetcherConfig) -> Receiver[BlockPayload]:
        sender, receiver = bounded(self.channel_capacity)
        thread = threading.Thread(
            target=self._run,
            args=(config, sender),
            name=f"fetcher-{config.chain}",
            daemon=True,
        )
        thread.start()
        return receiver

    def _run(self, config: FetcherConfig, sender: Sender[BlockPayload]) -> None:
        try:
            adapter = self._adapter_factory(config)
        except Exception:
            logger.exception(f"[{config.chain}] failed to create streamer adapter")
            sender.close()
            return

        streamer = Streamer(
            blockchain_streamer_adapter=adapter,
            item_sender=sender,
            backfill_count=self.backfill_count,
            period_seconds=self.poll_interval_seconds,
            label=str(config.chain),
        )
        asyncio.run(streamer.stream())
        logger.info(f"[{config.chain}] fetcher thread exiting")
