from abc import ABC, abstractmethod

from ingestion.blockchainetl.streaming.channel import Receiver
from ingestion.ethereumetl.models.block import BlockPayload
from ingestion.ethereumetl.models.chain import FetcherConfig


class ChainFetcher(ABC):
    @abstractmethod
    def spawn(self, config: FetcherConfig) -> Receiver[BlockPayload]:
        """
        Start ingesting the configured chain in the background and return the receiving end.

        Must not block the caller. Payloads arrive in increasing block order;
        closing the returned receiver stops the background work.
        """
