from typing import Optional

from web3 import AsyncHTTPProvider, AsyncWeb3
from web3.exceptions import BlockNotFound

from ingestion.ethereumetl.mappers.block_mapper import EthBlockMapper
from ingestion.ethereumetl.models.block import BlockPayload
from ingestion.ethereumetl.models.chain import ChainIdentity, FetcherConfig
from ingestion.ethereumetl.providers.provider_factory import get_async_provider_from_uri
from utils.logger_utils import get_logger

logger = get_logger("ETH Streamer Adapter")


class EthStreamerAdapter:
    """
    Reads one EVM chain over JSON-RPC and maps its blocks to BlockPayload.

    Per-block failures never escape: they are logged and reported as None so
    the streamer moves on to the next block number.
    """

    def __init__(self, config: FetcherConfig, web3: Optional[AsyncWeb3] = None):
        self._chain = config.chain
        self._w3 = web3 or AsyncWeb3(get_async_provider_from_uri(str(config.rpc_endpoint)))
        self._block_mapper = EthBlockMapper()

    @property
    def chain(self) -> ChainIdentity:
        return self._chain

    async def open(self) -> None:
        logger.info(f"[{self._chain}] connecting (op_stack={self._chain.is_op_stack})")

    async def get_current_block_number(self) -> int:
        return await self._w3.eth.get_block_number()

    async def export_block(self, block_number: int) -> Optional[BlockPayload]:
        try:
            block_data = await self._w3.eth.get_block(block_number, full_transactions=True)
        except BlockNotFound:
            block_data = None
        except Exception as e:
            logger.warning(f"[{self._chain}] failed to fetch block {block_number}: {e}")
            return None

        if block_data is None:
            logger.warning(f"[{self._chain}] block {block_number} not found")
            return None

        try:
            block = self._block_mapper.json_dict_to_block(block_data, self._chain)
        except Exception as e:
            logger.warning(f"[{self._chain}] failed to decode block {block_number}: {e}")
            return None

        logger.info(
            f"[{self._chain}] block {block.number} ({block.tx_count} txs, gas {block.gas_used}/{block.gas_limit}"
            + (f", L1 origin {block.l1_origin_number})" if self._chain.is_op_stack else ")")
        )
        return block

    async def close(self) -> None:
        provider = self._w3.provider
        if isinstance(provider, AsyncHTTPProvider):
            await provider.disconnect()
