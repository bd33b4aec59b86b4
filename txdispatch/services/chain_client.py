import threading
from typing import Dict

from eth_utils import to_checksum_address
from tenacity import retry, stop_after_attempt, wait_fixed
from web3 import Web3, HTTPProvider

from txdispatch.config import env
from txdispatch.core.constants import PENDING_BLOCK
from txdispatch.core.errors import ChainNotConfigured
from txdispatch.core.logger import get_logger

logger = get_logger(__name__)


def _http_web3(rpc_url: str) -> Web3:
    return Web3(HTTPProvider(rpc_url, request_kwargs={'timeout': env.RPC_TIMEOUT_SEC}))


class MultiChainClient:
    """Web3 clients keyed by chain id, answering pending nonce queries."""

    def __init__(self, clients: Dict[int, Web3]):
        self._clients = dict(clients)
        self._lock = threading.Lock()

    @classmethod
    def from_env(cls) -> "MultiChainClient":
        clients = {}
        for chain_id, rpc_url in env.CHAIN_RPC_URLS.items():
            clients[chain_id] = _http_web3(rpc_url)
            logger.info(f"Configured RPC for chain {chain_id}: {rpc_url}")
        return cls(clients)

    def client(self, chain_id: int) -> Web3:
        with self._lock:
            w3 = self._clients.get(chain_id)
        if w3 is None:
            raise ChainNotConfigured(f"no RPC client configured for chain {chain_id}")
        return w3

    def reconnect(self, chain_id: int) -> Web3:
        """Replace the client of chain_id with a fresh one on the same endpoint."""
        rpc_url = self.client(chain_id).provider.endpoint_uri
        w3 = _http_web3(rpc_url)
        with self._lock:
            self._clients[chain_id] = w3
        logger.info(f"Reconnected chain {chain_id} to {rpc_url}")
        return w3

    def pending_nonce_at(self, chain_id: int, account: str) -> int:
        w3 = self.client(chain_id)
        return self._pending_nonce(w3, to_checksum_address(account))

    @retry(stop=stop_after_attempt(env.NONCE_RPC_ATTEMPTS), wait=wait_fixed(env.NONCE_RPC_WAIT_SEC), reraise=True)
    def _pending_nonce(self, w3: Web3, account: str) -> int:
        return w3.eth.get_transaction_count(account, PENDING_BLOCK)
