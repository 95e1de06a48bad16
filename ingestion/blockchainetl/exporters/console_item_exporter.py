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

import json
from typing import Iterable, Optional, Set

import click

from ingestion.ethereumetl.mappers.block_mapper import EthBlockMapper
from ingestion.ethereumetl.models.block import BlockPayload


class ConsoleItemExporter(object):
    def __init__(self, chain_ids: Optional[Iterable[int]] = None, verbose: bool = False):
        # Empty set means every chain is printed
        self.allowed_chain_ids: Set[int] = set(chain_ids) if chain_ids else set()
        self.verbose = verbose
        self.exported_count = 0

    def open(self):
        pass

    def export_items(self, items: Iterable[BlockPayload]):
        for item in items:
            self.export_item(item)

    def export_item(self, item: BlockPayload):
        if self.allowed_chain_ids and item.chain.id not in self.allowed_chain_ids:
            return
        click.echo(self.format_item(item, self.verbose))
        self.exported_count += 1

    @staticmethod
    def format_item(item: BlockPayload, verbose: bool = False) -> str:
        if verbose:
            return json.dumps(EthBlockMapper.block_to_dict(item), indent=2)

        line = (
            f"[{item.chain}] block {item.number} txs={item.tx_count} "
            f"gas={item.gas_used}/{item.gas_limit} ts={item.timestamp}"
        )
        if item.base_fee_per_gas is not None:
            line += f" base_fee={item.base_fee_per_gas}"
        if item.l1_origin_number is not None:
            line += f" l1_origin={item.l1_origin_number}"
        return line

    def close(self):
        pass
