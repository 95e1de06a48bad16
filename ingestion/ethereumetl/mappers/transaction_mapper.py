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

from typing import Any, Mapping

from ingestion.ethereumetl.models.transaction import TxPayload
from utils.formatter_utils import hex_to_dec, to_hex_string, to_normalized_address, wei_to_eth


class EthTransactionMapper(object):
    @staticmethod
    def json_dict_to_transaction(json_dict: Mapping[str, Any], tx_index: int) -> TxPayload:
        """
        Maps one transaction object of eth_getBlockByNumber(n, true).

        Accepts both raw JSON-RPC values (hex strings) and the web3 formatted
        ones (ints, HexBytes). `tx_index` is the position within the block.
        """
        # gasPrice is the effective price on mined txs; deposit txs may omit it
        gas_price = hex_to_dec(json_dict.get("gasPrice"))
        if gas_price is None:
            gas_price = hex_to_dec(json_dict.get("maxFeePerGas"))

        return TxPayload(
            hash=to_hex_string(json_dict.get("hash")),
            tx_index=tx_index,
            gas=hex_to_dec(json_dict.get("gas")),
            gas_price=gas_price or 0,
            value_eth=wei_to_eth(hex_to_dec(json_dict.get("value")) or 0),
            from_address=to_normalized_address(json_dict.get("from")),
            to_address=to_normalized_address(json_dict.get("to")),
            blob_count=len(json_dict.get("blobVersionedHashes") or []),
            max_fee_per_blob_gas=hex_to_dec(json_dict.get("maxFeePerBlobGas")),
        )
