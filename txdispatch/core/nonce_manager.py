import threading
from typing import Any, Dict, Optional

from txdispatch.core import metrics
from txdispatch.core.constants import NONCE_ERROR_PATTERNS
from txdispatch.core.errors import NonceLookupError, NonceRecoveryError, SendError
from txdispatch.core.interfaces import NonceSource, TransactionSendFn
from txdispatch.core.logger import get_logger

logger = get_logger(__name__)


def is_nonce_error(exc: BaseException) -> bool:
    """True if the node rejected a transaction because of its nonce."""
    texts = [str(exc)]
    for arg in exc.args:
        if isinstance(arg, dict) and "message" in arg:
            texts.append(str(arg["message"]))
    text = " ".join(texts).lower()
    return any(pattern in text for pattern in NONCE_ERROR_PATTERNS)


class NonceManager:
    """Caches the next nonce of every account this process sends from.

    One lock guards the whole cache, so sends for different accounts are
    serialized as well. The cache is advisory: it is filled from the
    network when empty and re-synced after a nonce error.
    """

    def __init__(self, source: NonceSource):
        self.source = source
        self._nonces: Dict[str, int] = {}
        self._lock = threading.Lock()

    def cached(self, account: str) -> Optional[int]:
        with self._lock:
            return self._nonces.get(account)

    def send(self, chain_id: int, account: str, send_fn: TransactionSendFn) -> Any:
        """Run send_fn with the next nonce of account and advance the cache.

        A nonce error is recovered once by re-fetching the pending nonce and
        calling send_fn again. The cache only moves on success.
        """
        with self._lock:
            nonce = self._nonces.get(account)
            if nonce is None:
                nonce = self._pending_nonce(chain_id, account, reason="cache_miss")
            else:
                logger.debug(f"Using cached nonce {nonce} for {account}")

            try:
                tx = send_fn(nonce)
            except Exception as exc:
                if not is_nonce_error(exc):
                    raise SendError(f"handler failed to send transaction: {exc}") from exc

                logger.warning(f"Nonce {nonce} rejected for {account} ({exc}), re-syncing")
                metrics.increment_nonce_retry()
                nonce = self._pending_nonce(chain_id, account, reason="nonce_error")
                try:
                    tx = send_fn(nonce)
                except Exception as retry_exc:
                    raise NonceRecoveryError(
                        f"handler recovered nonce but still failed to send transaction: {retry_exc}"
                    ) from retry_exc

            self._nonces[account] = nonce + 1
            return tx

    def _pending_nonce(self, chain_id: int, account: str, reason: str) -> int:
        metrics.increment_nonce_lookup(reason)
        try:
            nonce = self.source.pending_nonce_at(chain_id, account)
        except Exception as exc:
            raise NonceLookupError(f"could not get nonce: {exc}") from exc
        logger.debug(f"Pending nonce for {account} on chain {chain_id} is {nonce}")
        return nonce
