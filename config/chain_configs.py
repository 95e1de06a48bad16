import re
from typing import List, Optional

from pydantic import ValidationError

from config.settings import Settings
from ingestion.ethereumetl.models.chain import ChainIdentity, FetcherConfig

_ENTRY_SEPARATOR = re.compile(r"[,\n]")


def parse_chain_rpc_urls(value: str) -> List[FetcherConfig]:
    """
    Parses "<chain_id>=<url>" entries separated by commas or newlines, keeping their order.

    Raises:
        ValueError: an entry is malformed, has an invalid URL, or repeats a chain id.
    """
    configs: List[FetcherConfig] = []
    seen_ids = set()

    for entry in _ENTRY_SEPARATOR.split(value):
        entry = entry.strip()
        if not entry:
            continue

        chain_id_text, separator, url = entry.partition("=")
        if not separator or not url.strip():
            raise ValueError(f"Invalid chain entry {entry!r}, expected <chain_id>=<url>")
        try:
            chain_id = int(chain_id_text.strip())
        except ValueError:
            raise ValueError(f"Invalid chain id in entry {entry!r}") from None

        if chain_id in seen_ids:
            raise ValueError(f"Chain {chain_id} is configured more than once")
        seen_ids.add(chain_id)

        configs.append(build_fetcher_config(chain_id, url.strip()))

    return configs


def build_fetcher_config(chain_id: int, rpc_url: str, name: Optional[str] = None) -> FetcherConfig:
    try:
        return FetcherConfig(chain=ChainIdentity.from_id(chain_id, name=name), rpc_endpoint=rpc_url)
    except ValidationError as e:
        raise ValueError(f"Invalid configuration for chain {chain_id}: {e}") from e


def load_fetcher_configs(settings: Settings) -> List[FetcherConfig]:
    """Resolves the ordered list of chains to ingest: CHAIN_RPC_URLS when set, else the single RPC_URL chain."""
    chains = settings.chains
    if chains.chain_rpc_urls and chains.chain_rpc_urls.strip():
        configs = parse_chain_rpc_urls(chains.chain_rpc_urls)
        if configs:
            return configs

    return [build_fetcher_config(chains.chain_id, chains.rpc_url, chains.chain_name)]
