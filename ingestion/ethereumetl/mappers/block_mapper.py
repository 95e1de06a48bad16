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

from typing import Any, Dict, Mapping

from ingestion.ethereumetl.mappers.transaction_mapper import EthTransactionMapper
from ingestion.ethereumetl.models.block import BlockPayload
from ingestion.ethereumetl.models.chain import ChainIdentity
from ingestion.ethereumetl.service.l1_origin_service import extract_l1_origin
from utils.formatter_utils import hex_to_dec


class EthBlockMapper(object):
    def __init__(self):
        self.transaction_mapper = EthTransactionMapper()

    def json_dict_to_block(self, json_dict: Mapping[str, Any], chain: ChainIdentity) -> BlockPayload:
        # Only full transaction objects are mapped; hash-only entries are dropped
        raw_transactions = [tx for tx in (json_dict.get("transactions") or []) if isinstance(tx, Mapping)]

        transactions = [
            self.transaction_mapper.json_dict_to_transaction(tx, tx_index=index)
            for index, tx in enumerate(raw_transactions)
        ]

        return BlockPayload(
            chain=chain,
            number=hex_to_dec(json_dict.get("number")),
            gas_used=hex_to_dec(json_dict.get("gasUsed")),
            gas_limit=hex_to_dec(json_dict.get("gasLimit")),
            timestamp=hex_to_dec(json_dict.get("timestamp")),
            tx_count=len(transactions),
            base_fee_per_gas=hex_to_dec(json_dict.get("baseFeePerGas")),
            blob_gas_used=hex_to_dec(json_dict.get("blobGasUsed")),
            transactions=transactions,
            l1_origin_number=extract_l1_origin(raw_transactions) if chain.is_op_stack else None,
        )

    @staticmethod
    def block_to_dict(block: BlockPayload) -> Dict[str, Any]:
        return block.model_dump(mode="json", by_alias=True)
