from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, model_validator

from constants.constants import U32_MAX, U64_MAX
from ingestion.ethereumetl.models.chain import ChainIdentity
from ingestion.ethereumetl.models.transaction import TxPayload


class BlockPayload(BaseModel):
    model_config = ConfigDict(frozen=True)

    chain: ChainIdentity
    number: int = Field(ge=0, le=U64_MAX, description="Block number, increasing per chain")
    gas_used: int = Field(ge=0, le=U64_MAX)
    gas_limit: int = Field(ge=0, le=U64_MAX)
    timestamp: int = Field(ge=0, le=U64_MAX, description="Chain-reported, in seconds")
    tx_count: int = Field(ge=0, le=U32_MAX)
    base_fee_per_gas: Optional[int] = Field(default=None, ge=0, le=U64_MAX)
    blob_gas_used: Optional[int] = Field(default=None, ge=0, le=U64_MAX)
    transactions: Tuple[TxPayload, ...] = ()
    l1_origin_number: Optional[int] = Field(default=None, ge=0, le=U64_MAX)

    @model_validator(mode="after")
    def validate_consistency(self) -> "BlockPayload":
        if self.tx_count != len(self.transactions):
            raise ValueError(f"tx_count ({self.tx_count}) must equal the number of transactions ({len(self.transactions)})")

        for position, tx in enumerate(self.transactions):
            if tx.tx_index != position:
                raise ValueError(f"Transaction at position {position} has tx_index {tx.tx_index}")

        if self.l1_origin_number is not None and not self.chain.is_op_stack:
            raise ValueError(f"l1_origin_number is only allowed on OP Stack chains, got chain {self.chain}")
        return self
