from typing import Any, Mapping, Optional, Sequence

from constants.constants import (
    L1_BLOCK_PREDEPLOY,
    L1_ORIGIN_MIN_CALLDATA_LENGTH,
    L1_ORIGIN_NUMBER_OFFSET,
    L1_ORIGIN_NUMBER_SIZE,
)
from utils.formatter_utils import hex_to_bytes


def derive_l1_origin(to_address: Optional[str], calldata: bytes) -> Optional[int]:
    """
    Reads the L1 block number out of an OP Stack L1 attributes deposit transaction.

    Every OP Stack block opens with a deposit tx that writes the attributes of
    its L1 origin block into the L1Block predeploy. In both the pre-Ecotone
    (ABI-encoded setL1BlockValues) and the Ecotone packed
    (setL1BlockValuesEcotone) calldata, the L1 block number is the big-endian
    uint64 at bytes 28..35.

    Returns None when the tx does not target the predeploy or the calldata is
    too short to hold the field.
    """
    if to_address is None or to_address.lower() != L1_BLOCK_PREDEPLOY:
        return None

    if len(calldata) < L1_ORIGIN_MIN_CALLDATA_LENGTH:
        return None

    number_bytes = calldata[L1_ORIGIN_NUMBER_OFFSET : L1_ORIGIN_NUMBER_OFFSET + L1_ORIGIN_NUMBER_SIZE]
    return int.from_bytes(number_bytes, byteorder="big")


def extract_l1_origin(transactions: Sequence[Mapping[str, Any]]) -> Optional[int]:
    """Applies derive_l1_origin to the first transaction of a raw block, if any."""
    if not transactions:
        return None

    first = transactions[0]
    to_address = first.get("to")
    return derive_l1_origin(str(to_address) if to_address is not None else None, hex_to_bytes(first.get("input")))
