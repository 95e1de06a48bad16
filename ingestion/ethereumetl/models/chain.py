from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, HttpUrl, model_validator

from constants.constants import KNOWN_CHAIN_NAMES, OP_STACK_CHAIN_IDS


class ChainIdentity(BaseModel):
    """
    Identifies a blockchain network.

    Two identities are equal when their numeric ids match, whatever their
    names. `op_stack` overrides the well-known chain table when set.
    """

    model_config = ConfigDict(frozen=True)

    id: int = Field(ge=0, description="EIP-155 chain id")
    name: Optional[str] = None
    op_stack: Optional[bool] = None

    @model_validator(mode="before")
    @classmethod
    def fill_known_name(cls, data: Any) -> Any:
        if isinstance(data, dict) and data.get("name") is None and data.get("id") in KNOWN_CHAIN_NAMES:
            return {**data, "name": KNOWN_CHAIN_NAMES[data["id"]]}
        return data

    @classmethod
    def from_id(cls, chain_id: int, name: Optional[str] = None, op_stack: Optional[bool] = None) -> "ChainIdentity":
        return cls(id=chain_id, name=name, op_stack=op_stack)

    @property
    def is_op_stack(self) -> bool:
        if self.op_stack is not None:
            return self.op_stack
        return self.id in OP_STACK_CHAIN_IDS

    def __eq__(self, other: object) -> bool:
        if isinstance(other, ChainIdentity):
            return self.id == other.id
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self.id)

    def __str__(self) -> str:
        return self.name or str(self.id)


class FetcherConfig(BaseModel):
    """One chain to ingest: who it is and where its JSON-RPC endpoint lives."""

    model_config = ConfigDict(frozen=True)

    chain: ChainIdentity
    rpc_endpoint: HttpUrl
