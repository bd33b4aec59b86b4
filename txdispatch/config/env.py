import os
from typing import Dict
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


def parse_chain_rpc_urls(raw: str) -> Dict[int, str]:
    """Parse "1=https://a,56=https://b" into {1: "https://a", 56: "https://b"}."""
    urls: Dict[int, str] = {}
    for item in raw.split(","):
        item = item.strip()
        if not item:
            continue
        chain_id, sep, url = item.partition("=")
        if not sep or not url.strip():
            raise ValueError(f"Malformed CHAIN_RPC_URLS entry: {item!r}")
        urls[int(chain_id.strip())] = url.strip()
    return urls


# RPC configuration
CHAIN_RPC_URLS = parse_chain_rpc_urls(os.getenv("CHAIN_RPC_URLS", ""))
RPC_TIMEOUT_SEC = int(os.getenv("RPC_TIMEOUT_SEC", 10))

# Pending nonce lookups
NONCE_RPC_ATTEMPTS = int(os.getenv("NONCE_RPC_ATTEMPTS", 3))
NONCE_RPC_WAIT_SEC = float(os.getenv("NONCE_RPC_WAIT_SEC", 2))

# Admission
QUEUE_CAPACITY_PER_SENDER = int(os.getenv("QUEUE_CAPACITY_PER_SENDER", 16))

# Gas price escalation defaults
GAS_BUMP_FACTOR = float(os.getenv("GAS_BUMP_FACTOR", 1.2))
MAX_GAS_PRICE_GWEI = float(os.getenv("MAX_GAS_PRICE_GWEI", 500))
TX_TIMEOUT_SEC = int(os.getenv("TX_TIMEOUT_SEC", 120))
TX_CHECK_INTERVAL_SEC = int(os.getenv("TX_CHECK_INTERVAL_SEC", 30))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

REQUIRED_VARS = [
    "CHAIN_RPC_URLS",
]

def validate_env():
    """Validate that all required environment variables are set"""
    missing = [var for var in REQUIRED_VARS if not os.getenv(var)]
    if missing:
        raise ValueError(f"Missing required environment variables: {', '.join(missing)}")
