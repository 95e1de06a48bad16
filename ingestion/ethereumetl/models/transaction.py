import re
from typing import Optional

from eth_utils import to_checksum_address
from pydantic import BaseModel, ConfigDict, Field, field_validator

from constants.constants import U64_MAX, U128_MAX

_TX_HASH_PATTERN = re.compile(r"^0x[0-9a-f]{64}$")


class OpStackFees(BaseModel):
    """L1 data fee breakdown of an OP Stack transaction (taken from its receipt)."""

    model_config = ConfigDict(frozen=True)

    l1_fee: int | None = Field(default=None, ge=0)
    l1_gas_used: int | None = Field(default=None, ge=0)
    l1_gas_price: int | None = Field(default=None, ge=0)
    l1_fee_scalar: float | None = None


class TxPayload(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    hash: str
    tx_index: int = Field(ge=0)
    gas: int = Field(ge=0, le=U64_MAX)
    gas_price: int = Field(default=0, ge=0, le=U128_MAX, description="Effective gas price in wei")
    value_eth: float = Field(default=0.0, ge=0.0)
    from_address: str = Field(alias="from")
    to_address: Optional[str] = Field(default=None, alias="to", description="None for contract creation")
    blob_count: int = Field(default=0, ge=0)
    max_fee_per_blob_gas: int | None = Field(default=None, ge=0, le=U128_MAX)
    op_stack_fees: OpStackFees | None = None

    @field_validator("hash")
    @classmethod
    def validate_hash(cls, v: str) -> str:
        v = v.lower()
        if not _TX_HASH_PATTERN.match(v):
            raise ValueError(f"Transaction hash must be 0x followed by 64 hex characters, got {v!r}")
        return v

    @field_validator("from_address", "to_address")
    @classmethod
    def checksum_address(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        return to_checksum_address(v)

    @property
    def is_contract_creation(self) -> bool:
        return self.to_address is None
