import threading
from typing import List, Optional, Sequence

from constants.constants import CHANNEL_CAPACITY
from ingestion.blockchainetl.errors import ChannelClosed
from ingestion.blockchainetl.streaming.channel import Receiver, Sender, bounded
from ingestion.ethereumetl.fetchers.chain_fetcher import ChainFetcher
from ingestion.ethereumetl.fetchers.evm_fetcher import EvmFetcher
from ingestion.ethereumetl.models.block import BlockPayload
from ingestion.ethereumetl.models.chain import FetcherConfig
from utils.logger_utils import get_logger

logger = get_logger("Fan In")


def fan_in(
    configs: Sequence[FetcherConfig],
    fetcher: Optional[ChainFetcher] = None,
    capacity: int = CHANNEL_CAPACITY,
) -> Receiver[BlockPayload]:
    """
    Spawns one fetcher per config and merges their output into a single receiver.

    Per-chain order is preserved; no ordering holds across chains. A single
    config returns the fetcher's own receiver unchanged. The merged receiver
    ends once every per-chain stream has ended, and closing it stops every
    forwarder (and through them, every fetcher).
    """
    if not configs:
        raise ValueError("fan_in requires at least one fetcher config")

    fetcher = fetcher or EvmFetcher()

    if len(configs) == 1:
        return fetcher.spawn(configs[0])

    sender, receiver = bounded(capacity)
    sources: List[Receiver[BlockPayload]] = []
    try:
        for config in configs:
            source = fetcher.spawn(config)
            sources.append(source)
            thread = threading.Thread(
                target=_forward,
                args=(source, sender.clone(), str(config.chain)),
                name=f"fan-in-{config.chain}",
                daemon=True,
            )
            thread.start()
    except Exception:
        logger.exception("Failed to start every fetcher, stopping the ones already running")
        for source in sources:
            source.close()
        receiver.close()
        raise
    finally:
        # Only the forwarders' clones keep the merged channel open
        sender.close()

    return receiver


def _forward(source: Receiver[BlockPayload], sink: Sender[BlockPayload], label: str) -> None:
    try:
        for payload in source:
            sink.send(payload)
        logger.info(f"[{label}] upstream ended")
    except ChannelClosed:
        logger.debug(f"[{label}] merged receiver closed, stopping forwarder")
    finally:
        source.close()
        sink.close()
