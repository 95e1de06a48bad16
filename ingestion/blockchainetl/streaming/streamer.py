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


import asyncio
import inspect
from typing import Any, Optional

from constants.constants import BACKFILL_COUNT, POLL_INTERVAL_SECONDS
from ingestion.blockchainetl.errors import ChannelClosed
from ingestion.blockchainetl.streaming.channel import Sender
from utils.logger_utils import get_logger

logger = get_logger("Streamer")


class Streamer:
    def __init__(
        self,
        blockchain_streamer_adapter: Any,
        item_sender: Sender,
        backfill_count: int = BACKFILL_COUNT,
        period_seconds: float = POLL_INTERVAL_SECONDS,
        end_block: Optional[int] = None,
        label: str = "chain",
    ):
        """
        Backfill-then-poll loop for a single chain.

        Args:
            blockchain_streamer_adapter (Any): Provides get_current_block_number() and export_block(n).
            item_sender (Sender): Channel every exported item is sent to, in block order.
            backfill_count (int): How many of the most recent blocks to fetch before polling.
            period_seconds (float): How many seconds to sleep between two polls of the chain head.
            end_block (Optional[int]): Stop once this block has been synced. If None, streams indefinitely.
            label (str): Prefix for log lines, usually the chain name.
        """
        if backfill_count <= 0:
            raise ValueError(f"backfill_count must be greater than 0, got {backfill_count}")

        self.blockchain_streamer_adapter = blockchain_streamer_adapter
        self.item_sender = item_sender
        self.backfill_count = backfill_count
        self.period_seconds = period_seconds
        self.end_block = end_block
        self.label = label
        self.last_synced_block: Optional[int] = None

    async def stream(self) -> None:
        """
        Runs until the receiver goes away, end_block is reached, or the initial
        head query fails. Always closes the adapter and the sender on the way out.
        """
        try:
            await self._call_adapter("open")
            await self._do_stream()
        except ChannelClosed:
            logger.debug(f"[{self.label}] receiver closed, stopping")
        finally:
            try:
                await self._call_adapter("close")
            finally:
                self.item_sender.close()

    async def _do_stream(self) -> None:
        try:
            latest_block = await self.blockchain_streamer_adapter.get_current_block_number()
        except Exception as e:
            logger.error(f"[{self.label}] failed to get latest block number: {e}")
            return

        target_block = self._calculate_target_block(latest_block)
        start_block = max(0, target_block - self.backfill_count + 1)
        logger.info(f"[{self.label}] backfilling blocks {start_block}..={target_block}")

        await self._export_range(start_block, target_block)
        self.last_synced_block = target_block
        logger.info(f"[{self.label}] backfill complete, polling for new blocks")

        while self.end_block is None or self.last_synced_block < self.end_block:
            await asyncio.sleep(self.period_seconds)
            await self._sync_cycle()

    async def _sync_cycle(self) -> int:
        """
        Executes a single polling round.
        Returns the number of blocks synced in this cycle.
        """
        try:
            current_block = await self.blockchain_streamer_adapter.get_current_block_number()
        except Exception as e:
            logger.warning(f"[{self.label}] poll error: {e}")
            return 0

        target_block = self._calculate_target_block(current_block)

        # A head at or below the last synced block (including a reorg to a shorter chain) is ignored
        blocks_to_sync = max(target_block - self.last_synced_block, 0)
        if blocks_to_sync == 0:
            return 0

        logger.debug(f"[{self.label}] syncing blocks {self.last_synced_block + 1}..={target_block}")
        await self._export_range(self.last_synced_block + 1, target_block)
        self.last_synced_block = target_block
        return blocks_to_sync

    async def _export_range(self, start_block: int, end_block: int) -> None:
        for block_number in range(start_block, end_block + 1):
            item = await self.blockchain_streamer_adapter.export_block(block_number)
            if item is None:
                continue
            # Blocks this thread while the channel is full
            self.item_sender.send(item)

    def _calculate_target_block(self, current_block: int) -> int:
        if self.end_block is not None:
            return min(current_block, self.end_block)
        return current_block

    async def _call_adapter(self, method_name: str) -> None:
        method = getattr(self.blockchain_streamer_adapter, method_name, None)
        if method is None:
            return
        result = method()
        if inspect.isawaitable(result):
            await result
