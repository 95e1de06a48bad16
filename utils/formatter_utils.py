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

from typing import Optional

from eth_utils import to_bytes
from eth_utils import to_checksum_address as eth_to_normalized_address
from eth_utils import to_int

from constants.constants import U128_MAX, WEI_PER_ETH
from utils.logger_utils import get_logger

logger = get_logger("Formatter Utils")


def hex_to_dec(hex_string: int | str | None) -> int | None:
    """
    Converts a hex string to decimal integer.
    Integers (as returned by web3 formatters) are passed through unchanged.
    """
    if hex_string is None:
        return None
    if isinstance(hex_string, int):
        return hex_string
    try:
        return to_int(hexstr=hex_string)
    except (ValueError, TypeError):
        logger.warning(f"Invalid hex string for conversion: {hex_string}")
        return None


def to_hex_string(value: bytes | str | None) -> str | None:
    """
    Lowercase 0x-prefixed hex for raw bytes (HexBytes included) or hex strings.
    """
    if value is None:
        return None
    if isinstance(value, (bytes, bytearray)):
        # bytes.hex() never carries the prefix, HexBytes.hex() does depending on its version
        return "0x" + bytes(value).hex()
    text = str(value).lower()
    return text if text.startswith("0x") else "0x" + text


def hex_to_bytes(value: bytes | str | None) -> bytes:
    if value is None:
        return b""
    if isinstance(value, (bytes, bytearray)):
        return bytes(value)
    return to_bytes(hexstr=value)


def wei_to_eth(wei: int) -> float:
    """
    Converts a wei amount to ETH in double precision.
    The amount is clamped to the unsigned 128-bit range first, so oversized values saturate.
    """
    clamped = min(max(int(wei), 0), U128_MAX)
    return clamped / WEI_PER_ETH


def to_normalized_address(address: Optional[str]) -> Optional[str]:
    """
    Convert address to its EIP-55 checksum form.
    Safe-guards against None or invalid types to maintain backward compatibility.
    """
    if address is None or not isinstance(address, str):
        return None

    try:
        return eth_to_normalized_address(address)
    except ValueError:
        return address.lower()
