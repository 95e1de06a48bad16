# --- INGESTION PIPELINE ---

# Number of most recent blocks fetched once before switching to polling
BACKFILL_COUNT = 20

# Seconds between two head-height polls
POLL_INTERVAL_SECONDS = 2.0

# Capacity of every bounded channel (fetcher, fan-in and replay)
CHANNEL_CAPACITY = 64

# Seconds between two emissions when replaying a fixture file
REPLAY_INTERVAL_SECONDS = 0.05

# Default local node (anvil / hardhat)
DEFAULT_RPC_URL = "http://127.0.0.1:8545"
DEFAULT_CHAIN_ID = 1


# --- NUMERIC LIMITS ---

WEI_PER_ETH = 1e18
U32_MAX = 2**32 - 1
U64_MAX = 2**64 - 1
U128_MAX = 2**128 - 1


# --- OP STACK ---

# L1Block predeploy: target of the L1 attributes deposit tx opening every OP Stack block
L1_BLOCK_PREDEPLOY = "0x4200000000000000000000000000000000000015"

# The L1 block number sits at bytes 28..35 of the deposit calldata in both the
# ABI-encoded (pre-Ecotone) and the packed (Ecotone+) layouts
L1_ORIGIN_NUMBER_OFFSET = 28
L1_ORIGIN_NUMBER_SIZE = 8
L1_ORIGIN_MIN_CALLDATA_LENGTH = L1_ORIGIN_NUMBER_OFFSET + L1_ORIGIN_NUMBER_SIZE


# --- WELL-KNOWN CHAINS ---

# chain_id -> name
KNOWN_CHAIN_NAMES = {
    1: "mainnet",
    10: "optimism",
    130: "unichain",
    252: "fraxtal",
    480: "worldchain",
    1135: "lisk",
    8453: "base",
    17000: "holesky",
    31337: "anvil",
    34443: "mode",
    57073: "ink",
    60808: "bob",
    84532: "base-sepolia",
    7777777: "zora",
    11155111: "sepolia",
    11155420: "optimism-sepolia",
}

OP_STACK_CHAIN_IDS = frozenset(
    {
        10,  # OP Mainnet
        130,  # Unichain
        252,  # Fraxtal
        480,  # World Chain
        1135,  # Lisk
        8453,  # Base
        34443,  # Mode
        57073,  # Ink
        60808,  # BOB
        84532,  # Base Sepolia
        7777777,  # Zora
        11155420,  # OP Sepolia
    }
)
